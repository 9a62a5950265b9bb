"""Assemble interactive (scrubbable) or static (network-packaged) banner documents."""
from __future__ import annotations

import html
import json
import logging
from enum import Enum
from typing import Dict, List, Optional, Sequence

from bannerkit.markup.minifier import minify_html
from bannerkit.markup.presets import PREVIEW_PROFILE, PresetProfile, get_profile, loop_allowed
from bannerkit.timeline.keyframes import format_number, generate_animation_data
from bannerkit.timeline.models import BannerData, RenderedAnimationData
from bannerkit.utils.config import settings

logger = logging.getLogger(__name__)

READY_MESSAGE = "ready"


class RenderMode(str, Enum):
    INTERACTIVE = "interactive"
    STATIC = "static"


BASE_LAYER_CSS = """
        .asset { position: absolute; }
        .asset img { display: block; width: 100%; height: auto; }"""

CONTROL_SCRIPT_TEMPLATE = """
        <script>
            const allAnimations = [];
            const animationDefs = __ANIMATION_DEFS__;

            function initializeAnimations() {
                animationDefs.forEach(def => {
                    const el = document.querySelector(def.selector);
                    if (el) {
                        def.animations.forEach(anim => {
                            const animation = el.animate(anim.keyframes, anim.timing);
                            animation.pause();
                            animation.currentTime = 0;
                            allAnimations.push(animation);
                        });
                    }
                });
                if (window.parent) {
                    window.parent.postMessage({ pluginMessage: { type: '__READY__' } }, '*');
                }
            }

            function setAnimationTime(time) { allAnimations.forEach(anim => anim.currentTime = time); }
            function playAnimations() { allAnimations.forEach(anim => anim.play()); }
            function pauseAnimations() { allAnimations.forEach(anim => anim.pause()); }

            window.addEventListener('message', (event) => {
                const { type, time } = event.data || {};
                switch(type) {
                    case 'SEEK': setAnimationTime(time); break;
                    case 'PLAY': playAnimations(); break;
                    case 'PAUSE': pauseAnimations(); break;
                }
            });

            document.addEventListener('DOMContentLoaded', initializeAnimations);
        </script>
    """


def _script_safe_json(value) -> str:
    return json.dumps(value).replace("</", "<\\/")


def build_control_script(rendered: Sequence[RenderedAnimationData]) -> str:
    """Scrub-control script: paused at zero, one ready signal, then SEEK/PLAY/PAUSE."""
    defs = _script_safe_json([r.to_control_dict() for r in rendered])
    return CONTROL_SCRIPT_TEMPLATE.replace("__ANIMATION_DEFS__", defs).replace("__READY__", READY_MESSAGE)


def _layer_markup(rendered: RenderedAnimationData, name: str, src: str) -> str:
    return (
        f'<div id="{html.escape(rendered.element_id)}" class="asset">'
        f'<img src="{html.escape(src)}" alt="{html.escape(name)}"></div>\n'
    )


def _layer_css(rendered: Sequence[RenderedAnimationData], mode: RenderMode) -> str:
    if mode is RenderMode.INTERACTIVE:
        rules = [f"{r.selector} {{ {r.initial_style} }}" for r in rendered]
        return "\n".join(rules)
    rules = [f"{r.selector} {{ {r.static_style} }}" for r in rendered]
    keyframes = [css.keyframes_css for r in rendered for css in r.css_animations]
    return "\n".join(rules) + "\n" + "\n".join(keyframes)


def assemble_document(
    rendered: Sequence[RenderedAnimationData],
    banner: BannerData,
    image_sources: Dict[str, str],
    mode: RenderMode = RenderMode.STATIC,
    minify: Optional[bool] = None,
) -> str:
    """Compose the full document for ``rendered`` layers.

    Args:
        rendered: Keyframe generator output, in setting order.
        banner: Banner metadata (size, background, click target, loop, preset).
        image_sources: asset id -> inline data URI (interactive) or relative path (static).
            Layers without a source are left out.
        mode: Interactive documents embed the scrub-control script and ignore the
            network preset; static documents follow the preset table.
        minify: Defaults to True for static output, False for interactive.
    """
    static = mode is RenderMode.STATIC
    profile: PresetProfile = get_profile(banner.export_preset) if static else PREVIEW_PROFILE
    width = format_number(banner.banner_width)
    height = format_number(banner.banner_height)

    placed: List[RenderedAnimationData] = []
    layers = ""
    for r in rendered:
        src = image_sources.get(r.asset_id)
        if src is None:
            logger.warning(f"No image for asset {r.asset_id}; layer omitted")
            continue
        asset = banner.asset_by_id(r.asset_id)
        layers += _layer_markup(r, asset.name if asset else "", src)
        placed.append(r)

    click_tag_script = ""
    if static and profile.injects_click_tag:
        click_tag_script = f'<script type="text/javascript">var clickTag={_script_safe_json(banner.click_tag or "")};</script>'

    loop_script = ""
    if static and loop_allowed(banner.export_preset, banner.loop):
        loop_script = f"<script>setTimeout(()=>{{location.reload()}},{format_number(banner.total_duration)});</script>"

    noscript = ""
    if static:
        noscript = (
            f'<noscript><img src="{settings.backup_image_name}" width="{width}" '
            f'height="{height}" alt=""></noscript>'
        )

    click_handler = f"<script>{profile.click_handler}</script>" if profile.click_handler else ""
    control_script = "" if static else build_control_script(placed)

    document = f"""<!DOCTYPE html><html><head>
    <meta charset="UTF-8"><meta name="viewport" content="width=device-width, initial-scale=1.0">
    <meta name="ad.size" content="width={width},height={height}">
    {click_tag_script}
    {profile.header_script if static else ""}
    <title>{"Banner" if static else "Preview"}</title><style>
        body {{ margin: 0; background-color: {banner.background_color}; }}
        .banner-container {{ width: {width}px; height: {height}px; position: relative; border: 1px solid #ccc; box-sizing: border-box; overflow: hidden; }}
        {BASE_LAYER_CSS}
        {_layer_css(placed, mode)}
    </style></head><body>
    {profile.wrapper_start}
    {layers}
    {profile.wrapper_end}
    {noscript}
    {click_handler}
    {control_script}
    {loop_script}
    </body></html>"""

    if minify is None:
        minify = static
    return minify_html(document) if minify else document


def generate_banner_html(
    banner: BannerData,
    image_sources: Dict[str, str],
    mode: RenderMode = RenderMode.STATIC,
) -> str:
    """Keyframes plus markup for ``banner`` in one call."""
    rendered = generate_animation_data(banner)
    return assemble_document(rendered, banner, image_sources, mode)
