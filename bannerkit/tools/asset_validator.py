"""Layer validation for captured assets."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from bannerkit.timeline.keyframes import format_number
from bannerkit.timeline.models import Asset
from bannerkit.utils.config import settings

UNEXPORTABLE_KINDS = {"CONNECTOR"}


@dataclass
class AssetIssue:
    asset_id: str
    name: str
    error: str

    def __str__(self) -> str:
        return f'Layer "{self.name}" ({self.asset_id}): {self.error}'


def validate_asset(asset: Asset, max_dimension: Optional[float] = None) -> Tuple[bool, Optional[str]]:
    """Return (is_valid, error) for a single captured layer."""
    limit = settings.max_layer_dimension if max_dimension is None else max_dimension
    size = f"{format_number(asset.width)}x{format_number(asset.height)}"
    if asset.width <= 0 or asset.height <= 0:
        return False, f"Invalid dimensions: {size}"
    if asset.width > limit or asset.height > limit:
        return False, f"Layer too large: {size}"
    if not asset.visible:
        return False, "Layer is hidden"
    if asset.type.upper() in UNEXPORTABLE_KINDS:
        return False, "Connector elements cannot be exported"
    return True, None


def collect_issues(assets: Iterable[Asset], max_dimension: Optional[float] = None) -> List[AssetIssue]:
    issues = []
    for asset in assets:
        ok, error = validate_asset(asset, max_dimension)
        if not ok:
            issues.append(AssetIssue(asset_id=asset.id, name=asset.name, error=error or ""))
        elif asset.has_error:
            issues.append(AssetIssue(asset_id=asset.id, name=asset.name, error=asset.error_message or "Capture failed"))
    return issues
