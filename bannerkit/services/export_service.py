"""Preview, static export, batch export and video export for banners."""
from __future__ import annotations

import base64
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from PIL import Image

from bannerkit.markup.assembler import RenderMode, assemble_document
from bannerkit.markup.manifest import ManifestData, generate_manifest
from bannerkit.services.cancellation import CancellationToken, ExportCancelled, ExportError
from bannerkit.timeline.keyframes import generate_animation_data
from bannerkit.timeline.models import Asset, BannerData, ExportPreset
from bannerkit.tools.asset_validator import collect_issues
from bannerkit.utils.config import settings
from bannerkit.utils.file_utils import safe_file_stem
from bannerkit.video.compositor import capture_frames, rasterize_layer

logger = logging.getLogger(__name__)

IMAGE_DIR = "images"

# Layer raster scale of an export without optimisation, and of the unoptimised weight estimate
UNOPTIMIZED_SCALE = 1.5
WEIGHT_SCALE = 2.0


def to_data_uri(data: bytes, mime: str = "image/png") -> str:
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


@dataclass
class ExportBundle:
    """Everything the archive packager needs for one banner."""
    frame_name: str
    preset: ExportPreset
    html: str
    manifest: Optional[str]
    images: Dict[str, bytes] = field(default_factory=dict)  # relative path -> bytes
    backup_image: Optional[bytes] = None
    warnings: List[str] = field(default_factory=list)
    export_scale: float = 1.0

    @property
    def total_bytes(self) -> int:
        size = len(self.html.encode("utf-8")) + sum(len(data) for data in self.images.values())
        if self.manifest is not None:
            size += len(self.manifest.encode("utf-8"))
        return size


@dataclass
class ExportOutcome:
    index: int
    frame_name: str
    bundle: Optional[ExportBundle] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.bundle is not None


@dataclass
class BatchResult:
    outcomes: List[ExportOutcome] = field(default_factory=list)
    cancelled: bool = False

    @property
    def succeeded(self) -> List[ExportOutcome]:
        return [o for o in self.outcomes if o.ok]

    @property
    def failed(self) -> List[ExportOutcome]:
        return [o for o in self.outcomes if not o.ok]


@dataclass
class AssetWeight:
    """Encoded size in bytes of one layer, optimised and not."""
    asset_id: str
    name: str
    optimized: int
    unoptimized: int


@dataclass
class VideoExport:
    filename: str
    frames: List[Image.Image]
    frame_step: float
    total_duration: float


def render_preview(banner: BannerData, images: Dict[str, bytes]) -> str:
    """Interactive, scrubbable document with every layer inlined as a data URI."""
    if not banner.assets:
        raise ExportError("No assets to preview.")
    sources = {asset_id: to_data_uri(data) for asset_id, data in images.items()}
    rendered = generate_animation_data(banner)
    return assemble_document(rendered, banner, sources, RenderMode.INTERACTIVE)


def static_image_path(name: str, index: int) -> str:
    return f"{IMAGE_DIR}/{safe_file_stem(name)}-{index}.png"


def _layer_size(asset: Asset, scale: float) -> Tuple[int, int]:
    return max(1, round(asset.width * scale)), max(1, round(asset.height * scale))


def _rasterize(asset: Asset, data: bytes, scale: float) -> bytes:
    try:
        return rasterize_layer(data, _layer_size(asset, scale))
    except OSError as exc:
        raise ExportError(f'Layer "{asset.name}" ({asset.id}): unreadable image') from exc


def export_banner(
    banner: BannerData,
    images: Dict[str, bytes],
    optimize: bool = True,
    backup_image: Optional[bytes] = None,
) -> ExportBundle:
    """Minified static document, manifest and relative image files for one banner.

    ``optimize`` writes layers at their captured size; without it layers are
    rasterised at ``UNOPTIMIZED_SCALE`` for sharper output on dense screens.
    """
    if not banner.assets:
        raise ExportError(f'Banner "{banner.frame_name}" has no assets to export.')

    export_scale = 1.0 if optimize else UNOPTIMIZED_SCALE
    warnings = [str(issue) for issue in collect_issues(banner.assets)]
    sources: Dict[str, str] = {}
    files: Dict[str, bytes] = {}
    for index, asset in enumerate(banner.assets):
        data = images.get(asset.id)
        if data is None:
            warnings.append(f'Layer "{asset.name}" ({asset.id}): no image supplied')
            continue
        path = static_image_path(asset.name, index)
        sources[asset.id] = path
        files[path] = _rasterize(asset, data, export_scale)

    rendered = generate_animation_data(banner)
    html = assemble_document(rendered, banner, sources, RenderMode.STATIC)
    manifest = generate_manifest(banner.export_preset, ManifestData.from_banner(banner))
    for w in warnings:
        logger.warning(w)
    return ExportBundle(
        frame_name=banner.frame_name,
        preset=banner.export_preset,
        html=html,
        manifest=manifest,
        images=files,
        backup_image=backup_image,
        warnings=warnings,
        export_scale=export_scale,
    )


def measure_weights(banner: BannerData, images: Dict[str, bytes]) -> List[AssetWeight]:
    """Encoded PNG size of every supplied layer at 1x and at ``WEIGHT_SCALE``."""
    weights = []
    for asset in banner.assets:
        data = images.get(asset.id)
        if data is None:
            continue
        weights.append(
            AssetWeight(
                asset_id=asset.id,
                name=asset.name,
                optimized=len(_rasterize(asset, data, 1.0)),
                unoptimized=len(_rasterize(asset, data, WEIGHT_SCALE)),
            )
        )
    return weights


def export_batch(
    banners: Sequence[BannerData],
    images_by_index: Sequence[Dict[str, bytes]],
    cancel_token: Optional[CancellationToken] = None,
) -> BatchResult:
    """Export several banners; a failing banner is reported without losing the others."""
    result = BatchResult()
    for index, banner in enumerate(banners):
        if cancel_token is not None and cancel_token.cancelled:
            logger.info(f"Batch export cancelled before banner #{index}")
            result.cancelled = True
            break
        images = images_by_index[index] if index < len(images_by_index) else {}
        try:
            bundle = export_banner(banner, images)
        except ExportError as exc:
            logger.warning(f"Banner #{index} ({banner.frame_name}) not exported: {exc}")
            result.outcomes.append(
                ExportOutcome(index=index, frame_name=banner.frame_name, error=f"Banner #{index} ({banner.frame_name}): {exc}")
            )
        except Exception as exc:
            logger.exception(f"Banner generation failed for {banner.frame_name!r}")
            result.outcomes.append(
                ExportOutcome(
                    index=index,
                    frame_name=banner.frame_name,
                    error=f"Banner #{index} ({banner.frame_name}): An unexpected error occurred: {exc}",
                )
            )
        else:
            result.outcomes.append(ExportOutcome(index=index, frame_name=banner.frame_name, bundle=bundle))
    return result


def export_video(
    banner: BannerData,
    layer_images: Dict[str, bytes],
    frame_step: Optional[float] = None,
    scale: Optional[float] = None,
    cancel_token: Optional[CancellationToken] = None,
) -> VideoExport:
    if not banner.assets:
        raise ExportError(f'Banner "{banner.frame_name}" has no assets to export.')
    if not any(asset.id in layer_images for asset in banner.assets):
        raise ExportError("No valid assets found for export.")
    try:
        frames = capture_frames(banner, layer_images, frame_step=frame_step, scale=scale, cancel_token=cancel_token)
    except ExportCancelled:
        logger.info(f"Video export cancelled for {banner.frame_name!r}")
        raise
    return VideoExport(
        filename=banner.frame_name,
        frames=frames,
        frame_step=settings.frame_step_ms if frame_step is None else frame_step,
        total_duration=banner.total_duration,
    )
