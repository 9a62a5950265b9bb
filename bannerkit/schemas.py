"""Pydantic schemas for API."""
from __future__ import annotations

import base64
import binascii
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from bannerkit.services.cancellation import ExportError
from bannerkit.timeline.models import Asset, BannerData, Pose


def decode_images(images: Dict[str, str]) -> Dict[str, bytes]:
    """Base64 (optionally as a data URI) -> raw bytes, keyed by asset id."""
    decoded: Dict[str, bytes] = {}
    for asset_id, value in images.items():
        payload = value.split(",", 1)[1] if value.startswith("data:") else value
        try:
            decoded[asset_id] = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError):
            raise ExportError(f"Image for asset {asset_id} is not valid base64")
    return decoded


class BannerRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    banner: BannerData
    images: Dict[str, str] = Field(default_factory=dict)  # asset id -> base64 PNG


class PreviewResponse(BaseModel):
    html: str


class ExportRequest(BannerRequest):
    optimize: bool = True


class ExportResponse(BaseModel):
    frame_name: str
    preset: str
    html: str
    manifest: Optional[str]
    image_paths: List[str]
    warnings: List[str] = Field(default_factory=list)
    export_scale: float = 1.0
    total_bytes: int = 0


class BatchExportRequest(BaseModel):
    items: List[ExportRequest]


class BatchItemResponse(BaseModel):
    index: int
    frame_name: str
    ok: bool
    error: Optional[str] = None
    export: Optional[ExportResponse] = None


class BatchExportResponse(BaseModel):
    items: List[BatchItemResponse]
    cancelled: bool = False


class SampleRequest(BaseModel):
    banner: BannerData
    time: float


class SampleResponse(BaseModel):
    time: float
    poses: Dict[str, Pose]


class ManifestRequest(BaseModel):
    banner: BannerData


class ManifestResponse(BaseModel):
    preset: str
    manifest: Optional[Dict[str, Any]]


class ValidateAssetsRequest(BaseModel):
    assets: List[Asset]
    max_dimension: Optional[float] = None


class AssetIssueResponse(BaseModel):
    asset_id: str
    name: str
    error: str


class ValidateAssetsResponse(BaseModel):
    valid: bool
    issues: List[AssetIssueResponse] = Field(default_factory=list)


class AssetWeightResponse(BaseModel):
    asset_id: str
    name: str
    optimized: int
    unoptimized: int


class WeightsResponse(BaseModel):
    weights: List[AssetWeightResponse]
    optimized_total: int
    unoptimized_total: int
