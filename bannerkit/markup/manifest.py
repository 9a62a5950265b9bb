"""Network-specific manifest sidecar for a static export."""
from __future__ import annotations

import json
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from bannerkit.timeline.keyframes import format_number
from bannerkit.timeline.models import BannerData, ExportPreset
from bannerkit.utils.config import settings

MANIFEST_VERSION = "1.0.0"
MANIFEST_SOURCE = "index.html"


class ManifestData(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    frame_name: str = Field(default="Banner", alias="frameName")
    banner_width: float = Field(alias="bannerWidth")
    banner_height: float = Field(alias="bannerHeight")
    click_tag: str = Field(default="", alias="clickTag")

    @classmethod
    def from_banner(cls, banner: BannerData) -> "ManifestData":
        return cls(
            frame_name=banner.frame_name,
            banner_width=banner.banner_width,
            banner_height=banner.banner_height,
            click_tag=banner.click_tag,
        )


def _number(value: float):
    value = float(value)
    return int(value) if value.is_integer() else value


def build_manifest(preset, data: ManifestData) -> Optional[Dict[str, Any]]:
    """Manifest object for ``preset``, or None when the network sizes and tracks the ad itself."""
    preset = ExportPreset.resolve(preset)
    if preset is ExportPreset.XANDR:
        return None
    if preset is ExportPreset.SIZMEK:
        return {
            "version": MANIFEST_VERSION,
            "source": MANIFEST_SOURCE,
            "width": _number(data.banner_width),
            "height": _number(data.banner_height),
            "adParameters": {},
            "clickThrough": {
                "url": data.click_tag,
                "name": "clickTag",
            },
        }
    return {
        "version": MANIFEST_VERSION,
        "title": data.frame_name,
        "description": settings.manifest_description,
        "width": format_number(data.banner_width),
        "height": format_number(data.banner_height),
        "source": MANIFEST_SOURCE,
        "clicktags": {
            "clickTag": data.click_tag,
        },
    }


def generate_manifest(preset, data: ManifestData) -> Optional[str]:
    manifest = build_manifest(preset, data)
    if manifest is None:
        return None
    return json.dumps(manifest, indent=2)
