"""Phase resolver: pure time -> pose sampling for a single layer.

The same function drives interactive math checks and fixed-step frame capture,
so it must stay deterministic and free of state between calls.
"""
from __future__ import annotations

import math
from typing import Callable, Dict, List, Optional, Tuple

from bannerkit.timeline.models import AnimationSetting, Asset, BannerData, MidStyle, Pose
from bannerkit.timeline.phases import (
    IDENTITY,
    Offset,
    Timeline,
    ease_in_out,
    entry_offset,
    exit_offset,
    resolve_timeline,
)

PULSE_DEFAULT_INTENSITY = 1.2
SHAKE_DEFAULT_INTENSITY = 1.2

PoseRule = Tuple[Callable[[float], bool], Callable[[float], Pose]]


def _lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def _blend(a: Offset, b: Offset, t: float) -> Offset:
    return Offset(
        opacity=_lerp(a.opacity, b.opacity, t),
        dx=_lerp(a.dx, b.dx, t),
        dy=_lerp(a.dy, b.dy, t),
        scale=_lerp(a.scale, b.scale, t),
        rotation=_lerp(a.rotation, b.rotation, t),
    )


def _to_pose(asset: Asset, offset: Offset) -> Pose:
    return Pose(
        opacity=min(1.0, max(0.0, offset.opacity)),
        x=asset.x + offset.dx,
        y=asset.y + offset.dy,
        scale_x=offset.scale,
        scale_y=offset.scale,
        rotation=offset.rotation,
    )


def attention_offset(setting: AnimationSetting, progress: float) -> Offset:
    """Periodic motion of the mid phase at linear progress ``progress``."""
    mid = setting.mid
    if mid.style is MidStyle.PULSE:
        intensity = mid.intensity or PULSE_DEFAULT_INTENSITY
        scale = 1 + (intensity - 1) * math.sin(progress * math.pi * 4) * 0.5
        return Offset(opacity=1.0, scale=scale)
    if mid.style is MidStyle.SHAKE:
        intensity = mid.intensity or SHAKE_DEFAULT_INTENSITY
        amount = (intensity - 1) * 20
        return Offset(
            opacity=1.0,
            dx=math.sin(progress * math.pi * 20) * amount,
            dy=math.cos(progress * math.pi * 15) * amount * 0.5,
        )
    return IDENTITY


def _rules(setting: AnimationSetting, asset: Asset, timeline: Timeline) -> List[PoseRule]:
    pre_entry = entry_offset(setting.in_)
    post_exit = exit_offset(setting.out)
    entry, exit_, attention = timeline.entry, timeline.exit, timeline.attention

    rules: List[PoseRule] = [
        (lambda t: t < entry.start, lambda t: _to_pose(asset, pre_entry)),
        (
            entry.contains,
            lambda t: _to_pose(asset, _blend(pre_entry, IDENTITY, ease_in_out(entry.progress(t)))),
        ),
    ]
    if attention is not None:
        rules.append(
            (attention.contains, lambda t: _to_pose(asset, attention_offset(setting, attention.progress(t))))
        )
    rules.extend([
        (
            exit_.contains,
            lambda t: _to_pose(asset, _blend(IDENTITY, post_exit, ease_in_out(exit_.progress(t)))),
        ),
        (lambda t: t > exit_.end, lambda t: _to_pose(asset, post_exit)),
    ])
    return rules


def sample(
    setting: AnimationSetting,
    asset: Asset,
    time: float,
    total_duration: Optional[float] = None,
) -> Pose:
    """Return the pose of ``asset`` at ``time`` milliseconds.

    Rules are tried in fixed priority order: before entry, entry, attention,
    exit, after exit. Between phases the layer rests at its identity pose.

    Args:
        setting: The in/mid/out triple bound to the asset.
        asset: Captured geometry; x/y of the returned pose are absolute.
        time: Timeline position in ms. Negative values are treated as 0.
        total_duration: When given, times past it hold the post-exit pose and
            it bounds the attention phase if there is no exit.
    """
    t = max(0.0, float(time))
    timeline = resolve_timeline(setting, total_duration)
    if total_duration is not None and t > total_duration:
        return _to_pose(asset, exit_offset(setting.out))
    for matches, pose_at in _rules(setting, asset, timeline):
        if matches(t):
            return pose_at(t)
    return _to_pose(asset, IDENTITY)


def rest_pose(asset: Asset) -> Pose:
    return _to_pose(asset, IDENTITY)


def sample_banner(banner: BannerData, time: float) -> Dict[str, Pose]:
    """Pose for every asset of ``banner``; assets without a setting rest in place."""
    poses: Dict[str, Pose] = {}
    for asset in banner.assets:
        setting = banner.setting_by_id(asset.id)
        if setting is None:
            poses[asset.id] = rest_pose(asset)
        else:
            poses[asset.id] = sample(setting, asset, time, banner.total_duration)
    return poses
