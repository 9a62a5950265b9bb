"""CLI interface."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Optional

import typer
from pydantic import ValidationError

from bannerkit.markup.manifest import ManifestData, build_manifest
from bannerkit.services.cancellation import ExportError
from bannerkit.services.export_service import export_banner, export_video, render_preview
from bannerkit.timeline.models import BannerData
from bannerkit.timeline.sampler import sample_banner
from bannerkit.utils.config import settings
from bannerkit.utils.file_utils import ensure_dir, load_json, load_layer_images, match_layer_images, write_bytes
from bannerkit.video.compositor import frames_to_png_bytes, write_gif

app = typer.Typer(add_completion=False)


def _configure_logging() -> None:
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")


def _load_banner(path: str) -> BannerData:
    try:
        return BannerData.model_validate(load_json(path))
    except (OSError, ValueError, ValidationError) as exc:
        raise typer.BadParameter(f"Cannot read banner from {path}: {exc}")


def _load_layers(banner: BannerData, layers: Optional[str]) -> Dict[str, bytes]:
    if not layers:
        return {}
    return match_layer_images(load_layer_images(layers), [a.id for a in banner.assets])


def _fail(exc: Exception) -> None:
    typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(code=1)


@app.command()
def preview(
    banner_file: str = typer.Argument(..., help="BannerData JSON file."),
    layers: Optional[str] = typer.Option(None, "--layers", "-l", help="Directory of <asset id>.png images."),
    out: str = typer.Option(settings.output_dir, "--out", "-o"),
):
    """Write the interactive, scrubbable preview document."""
    _configure_logging()
    banner = _load_banner(banner_file)
    try:
        html = render_preview(banner, _load_layers(banner, layers))
    except ExportError as exc:
        _fail(exc)
    target = ensure_dir(out) / "preview.html"
    target.write_text(html, encoding="utf-8")
    typer.echo(json.dumps({"preview": str(target)}, indent=2))


@app.command()
def export(
    banner_file: str = typer.Argument(..., help="BannerData JSON file."),
    layers: Optional[str] = typer.Option(None, "--layers", "-l", help="Directory of <asset id>.png images."),
    out: str = typer.Option(settings.output_dir, "--out", "-o"),
    optimize: bool = typer.Option(True, "--optimize/--no-optimize", help="Write layers at their captured size (otherwise 1.5x)."),
    backup: Optional[str] = typer.Option(None, "--backup", help="Backup image shown without JavaScript."),
):
    """Write index.html, manifest.json and layer images for the banner's preset."""
    _configure_logging()
    banner = _load_banner(banner_file)
    backup_image = Path(backup).read_bytes() if backup else None
    try:
        bundle = export_banner(banner, _load_layers(banner, layers), optimize=optimize, backup_image=backup_image)
    except ExportError as exc:
        _fail(exc)

    root = ensure_dir(out)
    written = [str(write_bytes(root / "index.html", bundle.html.encode("utf-8")))]
    if bundle.manifest is not None:
        written.append(str(write_bytes(root / "manifest.json", bundle.manifest.encode("utf-8"))))
    for rel_path, data in bundle.images.items():
        written.append(str(write_bytes(root / rel_path, data)))
    if bundle.backup_image is not None:
        written.append(str(write_bytes(root / settings.backup_image_name, bundle.backup_image)))
    typer.echo(json.dumps({"preset": bundle.preset.value, "files": written, "warnings": bundle.warnings}, indent=2))


@app.command()
def manifest(banner_file: str = typer.Argument(..., help="BannerData JSON file.")):
    """Print the network manifest (null for presets without one)."""
    banner = _load_banner(banner_file)
    typer.echo(json.dumps(build_manifest(banner.export_preset, ManifestData.from_banner(banner)), indent=2))


@app.command()
def sample(
    banner_file: str = typer.Argument(..., help="BannerData JSON file."),
    time: float = typer.Option(..., "--time", "-t", help="Timeline position in ms."),
):
    """Print every layer's pose at a point on the timeline."""
    banner = _load_banner(banner_file)
    poses = sample_banner(banner, time)
    typer.echo(json.dumps({k: v.model_dump(by_alias=True) for k, v in poses.items()}, indent=2))


@app.command()
def video(
    banner_file: str = typer.Argument(..., help="BannerData JSON file."),
    layers: str = typer.Option(..., "--layers", "-l", help="Directory of <asset id>.png images."),
    out: str = typer.Option(settings.output_dir, "--out", "-o"),
    frame_step: float = typer.Option(settings.frame_step_ms, "--frame-step", help="Milliseconds between frames."),
    scale: float = typer.Option(settings.video_scale, "--scale"),
    gif: bool = typer.Option(False, "--gif", help="Also write an animated GIF."),
):
    """Capture the timeline as numbered PNG frames."""
    _configure_logging()
    banner = _load_banner(banner_file)
    try:
        result = export_video(banner, _load_layers(banner, layers), frame_step=frame_step, scale=scale)
    except ExportError as exc:
        _fail(exc)

    frames_dir = ensure_dir(str(Path(out) / "frames"))
    for index, data in enumerate(frames_to_png_bytes(result.frames)):
        write_bytes(frames_dir / f"frame-{index:05d}.png", data)
    summary = {"frames": len(result.frames), "frame_step": result.frame_step, "directory": str(frames_dir)}
    if gif and result.frames:
        summary["gif"] = str(write_gif(result.frames, str(Path(out) / f"{result.filename}.gif"), result.frame_step))
    typer.echo(json.dumps(summary, indent=2))


if __name__ == "__main__":
    app()
