"""Raster frame capture for video export."""

from bannerkit.video.compositor import (
    apply_pose,
    capture_frames,
    frame_count,
    frames_to_png_bytes,
    render_frame,
    write_gif,
)

__all__ = [
    "apply_pose",
    "capture_frames",
    "frame_count",
    "frames_to_png_bytes",
    "render_frame",
    "write_gif",
]
