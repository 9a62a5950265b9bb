"""Fixed-step frame capture: composite every layer's sampled pose onto the banner canvas.

This is the host adapter for the sampler: poses are immutable values, and the
only mutation happens here on a private canvas per frame.
"""
from __future__ import annotations

import io
import logging
import math
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import numpy as np
from PIL import Image

from bannerkit.services.cancellation import CancellationToken
from bannerkit.timeline.models import Asset, BannerData, Pose
from bannerkit.timeline.sampler import sample_banner
from bannerkit.utils.config import settings

logger = logging.getLogger(__name__)

WHITE = (255, 255, 255)


def parse_hex_color(value: str) -> Tuple[int, int, int]:
    """`#rgb` or `#rrggbb` to an RGB tuple; anything else is white."""
    if not value or not isinstance(value, str):
        return WHITE
    s = value.strip().lstrip("#")
    if len(s) == 3:
        s = "".join(c * 2 for c in s)
    if len(s) != 6:
        return WHITE
    try:
        return tuple(int(s[i:i + 2], 16) for i in (0, 2, 4))
    except ValueError:
        return WHITE


def load_layer(data: bytes) -> Image.Image:
    with Image.open(io.BytesIO(data)) as img:
        return img.convert("RGBA")


def rasterize_layer(data: bytes, size: Tuple[int, int]) -> bytes:
    """PNG bytes of the layer at ``size``; bytes already at that size pass through."""
    with Image.open(io.BytesIO(data)) as img:
        if img.size == size:
            return data
        resized = img.convert("RGBA").resize(size, Image.Resampling.LANCZOS)
    buf = io.BytesIO()
    resized.save(buf, format="PNG")
    return buf.getvalue()


def frame_count(total_duration: float, frame_step: float) -> int:
    if frame_step <= 0:
        raise ValueError("frame_step must be positive")
    return max(0, math.floor(total_duration / frame_step))


def _with_opacity(img: Image.Image, opacity: float) -> Image.Image:
    if opacity >= 1.0:
        return img
    arr = np.array(img, dtype=np.uint8)
    alpha = arr[:, :, 3].astype(np.float32) * max(0.0, opacity)
    arr[:, :, 3] = np.clip(np.round(alpha), 0, 255).astype(np.uint8)
    return Image.fromarray(arr)


def apply_pose(canvas: Image.Image, layer: Image.Image, asset: Asset, pose: Pose, scale: float = 1.0) -> None:
    """Draw ``layer`` onto ``canvas`` at ``pose``.

    Scale is a resize about the layer's centre relative to its captured size.
    Layers that cannot be resized are drawn at their captured size.
    """
    if pose.opacity <= 0:
        return
    base_w = max(1, round(asset.width * scale))
    base_h = max(1, round(asset.height * scale))
    img = layer if layer.size == (base_w, base_h) else layer.resize((base_w, base_h), Image.Resampling.LANCZOS)

    if pose.scale_x != 1 or pose.scale_y != 1:
        target = (round(base_w * pose.scale_x), round(base_h * pose.scale_y))
        if target[0] > 0 and target[1] > 0:
            img = img.resize(target, Image.Resampling.LANCZOS)
        else:
            logger.debug(f"Resize to {target} skipped for {asset.id}; drawing at captured size")

    if pose.rotation:
        # CSS rotates clockwise for positive angles, PIL counter-clockwise
        img = img.rotate(-pose.rotation, resample=Image.Resampling.BICUBIC, expand=True)

    img = _with_opacity(img, pose.opacity)
    cx = (pose.x + asset.width / 2) * scale
    cy = (pose.y + asset.height / 2) * scale
    canvas.paste(img, (round(cx - img.width / 2), round(cy - img.height / 2)), img)


def render_frame(
    banner: BannerData,
    layers: Dict[str, Image.Image],
    time: float,
    scale: float = 1.0,
) -> Image.Image:
    """One composited frame at ``time`` ms; assets are drawn in capture order."""
    size = (max(1, round(banner.banner_width * scale)), max(1, round(banner.banner_height * scale)))
    canvas = Image.new("RGBA", size, parse_hex_color(banner.background_color) + (255,))
    poses = sample_banner(banner, time)
    for asset in banner.assets:
        layer = layers.get(asset.id)
        if layer is None:
            continue
        apply_pose(canvas, layer, asset, poses[asset.id], scale)
    return canvas


def capture_frames(
    banner: BannerData,
    layer_images: Dict[str, bytes],
    frame_step: Optional[float] = None,
    scale: Optional[float] = None,
    cancel_token: Optional[CancellationToken] = None,
) -> List[Image.Image]:
    """Sample the whole timeline every ``frame_step`` ms and composite each step.

    Args:
        banner: Timeline and canvas description.
        layer_images: asset id -> PNG bytes of the layer at rest.
        frame_step: Milliseconds between frames (default from settings, ~30 fps).
        scale: Raster scale of the output frames.
        cancel_token: Checked before every frame.

    Returns:
        ``floor(total_duration / frame_step)`` RGBA frames, the i-th at ``i * frame_step``.
    """
    step = settings.frame_step_ms if frame_step is None else frame_step
    scale = settings.video_scale if scale is None else scale

    layers: Dict[str, Image.Image] = {}
    for asset in banner.assets:
        data = layer_images.get(asset.id)
        if data is None:
            logger.warning(f"No layer image for asset {asset.id} ({asset.name}); skipped in video")
            continue
        layers[asset.id] = load_layer(data)

    frames = []
    for index in range(frame_count(banner.total_duration, step)):
        if cancel_token is not None:
            cancel_token.raise_if_cancelled("video export")
        frames.append(render_frame(banner, layers, index * step, scale))
    return frames


def frames_to_png_bytes(frames: List[Image.Image]) -> List[bytes]:
    out = []
    for frame in frames:
        buf = io.BytesIO()
        frame.save(buf, format="PNG")
        out.append(buf.getvalue())
    return out


def write_gif(frames: List[Image.Image], path: str, frame_step: float) -> Path:
    if not frames:
        raise ValueError("No frames to write")
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    rgb = [f.convert("RGB") for f in frames]
    rgb[0].save(
        target,
        format="GIF",
        save_all=True,
        append_images=rgb[1:],
        duration=max(1, round(frame_step)),
        loop=0,
    )
    return target
