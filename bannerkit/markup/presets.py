"""Ad-network packaging profiles."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from bannerkit.timeline.models import ExportPreset
from bannerkit.utils.config import settings

DEFAULT_WRAPPER_START = '<div id="banner" class="banner-container" style="cursor: pointer;">'
DEFAULT_WRAPPER_END = "</div>"
OPEN_CLICK_TARGET = (
    "document.getElementById('banner').addEventListener('click', function() "
    "{ if(clickTag) { window.open(clickTag, '_blank'); } });"
)
# Left for the network's ad server to substitute at serve time
XANDR_CLICK_MACRO = "${CLICK_URL}"


@dataclass(frozen=True)
class PresetProfile:
    """How a network expects the static document to be packaged."""
    preset: ExportPreset
    header_script: str = ""
    click_handler: str = OPEN_CLICK_TARGET
    wrapper_start: str = DEFAULT_WRAPPER_START
    wrapper_end: str = DEFAULT_WRAPPER_END
    injects_click_tag: bool = False
    supports_loop: bool = False


def _iab(preset: ExportPreset) -> PresetProfile:
    return PresetProfile(preset=preset, injects_click_tag=True, supports_loop=True)


PRESET_PROFILES: Dict[ExportPreset, PresetProfile] = {
    ExportPreset.IAB: _iab(ExportPreset.IAB),
    ExportPreset.GOOGLE_ADS: _iab(ExportPreset.GOOGLE_ADS),
    ExportPreset.SIZMEK: PresetProfile(
        preset=ExportPreset.SIZMEK,
        header_script=f'<script type="text/javascript" src="{settings.sizmek_loader_url}"></script>',
        click_handler="document.getElementById('banner').addEventListener('click', function() { EB.clickthrough(); });",
    ),
    ExportPreset.XANDR: PresetProfile(
        preset=ExportPreset.XANDR,
        click_handler="",
        wrapper_start=(
            f'<a href="{XANDR_CLICK_MACRO}" target="_blank" style="text-decoration: none;">'
            '<div id="banner" class="banner-container">'
        ),
        wrapper_end="</div></a>",
    ),
}

# Interactive previews always behave like a plain IAB container
PREVIEW_PROFILE = PresetProfile(preset=ExportPreset.IAB)


def get_profile(preset) -> PresetProfile:
    return PRESET_PROFILES[ExportPreset.resolve(preset)]


def loop_allowed(preset, requested: bool) -> bool:
    """Loop is honoured only where the network lets the creative reload itself."""
    return bool(requested) and get_profile(preset).supports_loop
