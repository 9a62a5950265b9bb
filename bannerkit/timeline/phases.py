"""Phase windows and named style offsets shared by the sampler and the keyframe generator.

Both code paths resolve their intervals here so that continuous sampling and the
emitted keyframes agree on when each phase runs and where it starts or ends.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Union

from bannerkit.timeline.models import (
    AnimationSetting,
    InPhase,
    InStyle,
    MidPhase,
    MidStyle,
    OutPhase,
    OutStyle,
)

SLIDE_DISTANCE = 30.0
ZOOM_SCALE = 0.8
DEFAULT_MID_DURATION = 1000.0


def ease_in_out(t: float) -> float:
    """Quadratic ease-in-out on [0, 1]."""
    if t < 0.5:
        return 2 * t * t
    return 1 - ((-2 * t + 2) ** 2) / 2


@dataclass(frozen=True)
class Offset:
    """A non-identity endpoint relative to the layer's resting pose."""
    opacity: float = 0.0
    dx: float = 0.0
    dy: float = 0.0
    scale: float = 1.0
    rotation: float = 0.0


IDENTITY = Offset(opacity=1.0)

# Pre-entry pose for each named entry style
ENTRY_OFFSETS: Dict[InStyle, Offset] = {
    InStyle.NONE: IDENTITY,
    InStyle.FADE_IN: Offset(),
    InStyle.SLIDE_IN_UP: Offset(dy=SLIDE_DISTANCE),
    InStyle.SLIDE_IN_DOWN: Offset(dy=-SLIDE_DISTANCE),
    InStyle.SLIDE_IN_LEFT: Offset(dx=SLIDE_DISTANCE),
    InStyle.SLIDE_IN_RIGHT: Offset(dx=-SLIDE_DISTANCE),
    InStyle.ZOOM_IN: Offset(scale=ZOOM_SCALE),
}

# Post-exit pose for each named exit style
EXIT_OFFSETS: Dict[OutStyle, Offset] = {
    OutStyle.NONE: IDENTITY,
    OutStyle.FADE_OUT: Offset(),
    OutStyle.SLIDE_OUT_UP: Offset(dy=-SLIDE_DISTANCE),
    OutStyle.SLIDE_OUT_DOWN: Offset(dy=SLIDE_DISTANCE),
    OutStyle.SLIDE_OUT_LEFT: Offset(dx=-SLIDE_DISTANCE),
    OutStyle.SLIDE_OUT_RIGHT: Offset(dx=SLIDE_DISTANCE),
    OutStyle.ZOOM_OUT: Offset(scale=ZOOM_SCALE),
}


def custom_offset(phase: Union[InPhase, OutPhase]) -> Offset:
    """Endpoint taken literally from a custom phase's raw fields."""
    scale = phase.scale if phase.scale is not None else 100.0
    opacity = phase.opacity if phase.opacity is not None else 0.0
    return Offset(
        opacity=opacity / 100,
        dx=phase.x or 0.0,
        dy=phase.y or 0.0,
        scale=scale / 100,
        rotation=phase.rotation or 0.0,
    )


def entry_offset(phase: InPhase) -> Offset:
    if phase.style is InStyle.CUSTOM:
        return custom_offset(phase)
    return ENTRY_OFFSETS[phase.style]


def exit_offset(phase: OutPhase) -> Offset:
    if phase.style is OutStyle.CUSTOM:
        return custom_offset(phase)
    return EXIT_OFFSETS[phase.style]


@dataclass(frozen=True)
class PhaseWindow:
    """Closed interval [start, end] on the timeline, in milliseconds."""
    start: float
    end: float

    @property
    def duration(self) -> float:
        return self.end - self.start

    def contains(self, t: float) -> bool:
        return self.start <= t <= self.end

    def progress(self, t: float) -> float:
        if self.duration <= 0:
            return 1.0
        return min(1.0, max(0.0, (t - self.start) / self.duration))


@dataclass(frozen=True)
class Timeline:
    """Resolved in/mid/out intervals of a single setting."""
    entry: PhaseWindow
    exit: PhaseWindow
    attention: Optional[PhaseWindow]
    attention_limit: float


def _mid_limit(out: OutPhase, total_duration: Optional[float]) -> float:
    # the out delay bounds the mid phase even when the out style is `none`
    if out.delay:
        return out.delay
    if total_duration is not None:
        return total_duration
    return float("inf")


def resolve_attention(
    entry: PhaseWindow,
    mid: MidPhase,
    limit: float,
) -> Optional[PhaseWindow]:
    """Mid window, or None when it is styled `none` or cannot start before the exit."""
    if mid.style is MidStyle.NONE:
        return None
    start = max(mid.delay or 0.0, entry.end)
    if start >= limit:
        return None
    duration = mid.duration or DEFAULT_MID_DURATION
    return PhaseWindow(start, start + duration)


def resolve_timeline(setting: AnimationSetting, total_duration: Optional[float] = None) -> Timeline:
    in_ = setting.in_
    out = setting.out
    entry = PhaseWindow(in_.delay, in_.delay + in_.duration)
    exit_ = PhaseWindow(out.delay, out.delay + out.duration)
    limit = _mid_limit(out, total_duration)
    return Timeline(
        entry=entry,
        exit=exit_,
        attention=resolve_attention(entry, setting.mid, limit),
        attention_limit=limit,
    )
