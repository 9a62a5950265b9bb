"""Document assembly, minification and manifests for banner export."""

from bannerkit.markup.assembler import RenderMode, assemble_document, generate_banner_html
from bannerkit.markup.manifest import ManifestData, build_manifest, generate_manifest
from bannerkit.markup.minifier import minify_html
from bannerkit.markup.presets import PRESET_PROFILES, PresetProfile, get_profile, loop_allowed

__all__ = [
    "RenderMode",
    "assemble_document",
    "generate_banner_html",
    "ManifestData",
    "build_manifest",
    "generate_manifest",
    "minify_html",
    "PRESET_PROFILES",
    "PresetProfile",
    "get_profile",
    "loop_allowed",
]
