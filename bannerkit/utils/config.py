"""Application configuration."""
from __future__ import annotations

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings loaded from .env and environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    output_dir: str = "outputs"
    default_click_tag: str = "https://www.google.com"
    default_background: str = "#FFFFFF"
    default_total_duration: float = 15000
    default_export_preset: str = "iab"
    frame_step_ms: float = Field(
        default=33,
        validation_alias=AliasChoices("FRAME_STEP_MS", "VIDEO_FRAME_STEP"),
    )
    video_scale: float = 2.0  # raster scale for captured frames
    manifest_description: str = "A banner created with Hubannero"
    sizmek_loader_url: str = "https://ds.serving-sys.com/BurstingScript/EBLoader.js"
    backup_image_name: str = "backup.png"
    max_layer_dimension: float = 10000
    log_level: str = "INFO"


settings = Settings()
