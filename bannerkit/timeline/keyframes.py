"""Compile phase descriptors into native keyframes and CSS @keyframes text."""
from __future__ import annotations

import logging
import math
import re
from typing import List, Optional, Sequence, Tuple

from bannerkit.timeline.models import (
    AnimationSetting,
    Asset,
    BannerData,
    CssAnimation,
    InStyle,
    Keyframe,
    KeyframeDefinition,
    MidStyle,
    OutStyle,
    RenderedAnimationData,
    Timing,
)
from bannerkit.timeline.phases import IDENTITY, Offset, entry_offset, exit_offset, resolve_timeline

logger = logging.getLogger(__name__)

PULSE_DEFAULT_INTENSITY = 1.05
SHAKE_DEFAULT_INTENSITY = 1.05
SHAKE_MIN_AMPLITUDE = 2.0
MID_EASING = "ease-in-out"
# Past this many repeats the static stylesheet loops forever instead
MAX_LITERAL_ITERATIONS = 10


def format_number(value: float) -> str:
    """Render a number the way a browser serialises it: no trailing `.0`."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(round(value, 6))


def format_transform(offset: Offset) -> str:
    return (
        f"translate({format_number(offset.dx)}px, {format_number(offset.dy)}px) "
        f"scale({format_number(offset.scale)}) rotate({format_number(offset.rotation)}deg)"
    )


IDENTITY_TRANSFORM = format_transform(IDENTITY)


def _keyframe(offset: Offset) -> Keyframe:
    return Keyframe(opacity=offset.opacity, transform=format_transform(offset))


def element_id_for(asset: Asset) -> str:
    return f"asset-{asset.id}"


def selector_for(asset: Asset) -> str:
    return "#" + element_id_for(asset).replace(":", "\\:")


def animation_suffix(asset: Asset) -> str:
    return re.sub(r"[^a-zA-Z0-9]", "", asset.id)


def shake_amplitude(intensity: Optional[float]) -> float:
    return max(SHAKE_MIN_AMPLITUDE, ((intensity or SHAKE_DEFAULT_INTENSITY) - 1) * 20)


def iteration_count(available: float, duration: float) -> int:
    if duration <= 0:
        return 1
    return max(1, math.floor(available / duration))


def render_iterations(count: int) -> str:
    return "infinite" if count > MAX_LITERAL_ITERATIONS else str(count)


def build_css_keyframes(name: str, keyframes: Sequence[Keyframe]) -> str:
    """@keyframes block; two stops use from/to, more are spread evenly."""
    if len(keyframes) == 2:
        stops = ["from", "to"]
    else:
        last = len(keyframes) - 1
        stops = [f"{format_number(100 * i / last)}%" for i in range(len(keyframes))]
    body = " ".join(
        f"{stop} {{ opacity: {format_number(kf.opacity)}; transform: {kf.transform}; }}"
        for stop, kf in zip(stops, keyframes)
    )
    return f"@keyframes {name} {{ {body} }}"


def _seconds(ms: float) -> str:
    return f"{format_number(ms / 1000)}s"


def _entry_animation(setting: AnimationSetting, suffix: str) -> Tuple[KeyframeDefinition, CssAnimation]:
    phase = setting.in_
    keyframes = [_keyframe(entry_offset(phase)), _keyframe(IDENTITY)]
    name = f"anim-in-{suffix}"
    definition = KeyframeDefinition(
        keyframes=keyframes,
        timing=Timing(delay=phase.delay, duration=phase.duration, easing=phase.easing),
    )
    css = CssAnimation(
        name=name,
        keyframes_css=build_css_keyframes(name, keyframes),
        shorthand=f"{name} {_seconds(phase.duration)} {phase.easing} {_seconds(phase.delay)} forwards",
    )
    return definition, css


def _exit_animation(setting: AnimationSetting, suffix: str) -> Tuple[KeyframeDefinition, CssAnimation]:
    phase = setting.out
    keyframes = [_keyframe(IDENTITY), _keyframe(exit_offset(phase))]
    name = f"anim-out-{suffix}"
    definition = KeyframeDefinition(
        keyframes=keyframes,
        timing=Timing(delay=phase.delay, duration=phase.duration, easing=phase.easing),
    )
    css = CssAnimation(
        name=name,
        keyframes_css=build_css_keyframes(name, keyframes),
        shorthand=f"{name} {_seconds(phase.duration)} {phase.easing} {_seconds(phase.delay)} forwards",
    )
    return definition, css


def attention_keyframes(setting: AnimationSetting) -> List[Keyframe]:
    mid = setting.mid
    if mid.style is MidStyle.PULSE:
        peak = Offset(opacity=1.0, scale=mid.intensity or PULSE_DEFAULT_INTENSITY)
        return [_keyframe(IDENTITY), _keyframe(peak), _keyframe(IDENTITY)]
    if mid.style is MidStyle.SHAKE:
        amp = shake_amplitude(mid.intensity)
        right = _keyframe(Offset(opacity=1.0, dx=amp))
        left = _keyframe(Offset(opacity=1.0, dx=-amp))
        return [_keyframe(IDENTITY), right, left, right, _keyframe(IDENTITY)]
    return []


def _attention_animation(
    setting: AnimationSetting,
    suffix: str,
    total_duration: float,
) -> Optional[Tuple[KeyframeDefinition, CssAnimation]]:
    timeline = resolve_timeline(setting, total_duration)
    window = timeline.attention
    if window is None:
        if setting.mid.style is not MidStyle.NONE:
            logger.debug(f"Mid phase suppressed for {setting.id}: no room before exit")
        return None
    keyframes = attention_keyframes(setting)
    name = f"anim-mid-{suffix}"
    count = iteration_count(timeline.attention_limit - window.start, window.duration)
    definition = KeyframeDefinition(
        keyframes=keyframes,
        timing=Timing(delay=window.start, duration=window.duration, easing=MID_EASING),
    )
    css = CssAnimation(
        name=name,
        keyframes_css=build_css_keyframes(name, keyframes),
        shorthand=(
            f"{name} {_seconds(window.duration)} {MID_EASING} {_seconds(window.start)} "
            f"{render_iterations(count)}"
        ),
    )
    return definition, css


def initial_style(setting: AnimationSetting, asset: Asset) -> str:
    opacity = 1 if setting.in_.style is InStyle.NONE else 0
    return (
        f"left: {format_number(asset.x)}px; top: {format_number(asset.y)}px; "
        f"width: {format_number(asset.width)}px; height: {format_number(asset.height)}px; "
        f"opacity: {opacity};"
    )


def render_setting(
    setting: AnimationSetting,
    asset: Asset,
    total_duration: float = 15000,
) -> RenderedAnimationData:
    """Keyframes for one layer, in entry, attention, exit order."""
    suffix = animation_suffix(asset)
    emitted: List[Tuple[KeyframeDefinition, CssAnimation]] = []
    if setting.in_.style is not InStyle.NONE:
        emitted.append(_entry_animation(setting, suffix))
    attention = _attention_animation(setting, suffix, total_duration)
    if attention is not None:
        emitted.append(attention)
    if setting.out.style is not OutStyle.NONE:
        emitted.append(_exit_animation(setting, suffix))

    return RenderedAnimationData(
        asset_id=asset.id,
        selector=selector_for(asset),
        element_id=element_id_for(asset),
        animations=[definition for definition, _ in emitted],
        css_animations=[css for _, css in emitted],
        initial_style=initial_style(setting, asset),
    )


def generate_animation_data(banner: BannerData) -> List[RenderedAnimationData]:
    """Render every (setting, asset) pair of ``banner`` in setting order.

    Settings whose identifier has no captured asset are dropped.
    """
    known = {asset.id for asset in banner.assets}
    for setting in banner.settings:
        if setting.id not in known:
            logger.warning(f"Dropping animation setting for unknown asset: {setting.id}")
    return [render_setting(s, a, banner.total_duration) for s, a in banner.resolved_pairs()]
