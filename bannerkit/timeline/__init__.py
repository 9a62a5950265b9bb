"""Animation timeline engine.

Components:
- models: data shapes for assets, phases, settings and rendered animations
- phases: shared phase windows and named style offsets
- sampler: pure time -> pose resolver used for frame capture
- keyframes: native keyframe and CSS @keyframes synthesis
"""

from bannerkit.timeline.models import (
    AnimationSetting,
    Asset,
    BannerData,
    ExportPreset,
    InStyle,
    Keyframe,
    KeyframeDefinition,
    MidStyle,
    OutStyle,
    Pose,
    RenderedAnimationData,
    Timing,
)

from bannerkit.timeline.phases import (
    PhaseWindow,
    Timeline,
    ease_in_out,
    resolve_timeline,
)

from bannerkit.timeline.sampler import sample, sample_banner

from bannerkit.timeline.keyframes import (
    build_css_keyframes,
    format_transform,
    generate_animation_data,
    render_setting,
)

__all__ = [
    # Model
    "AnimationSetting",
    "Asset",
    "BannerData",
    "ExportPreset",
    "InStyle",
    "Keyframe",
    "KeyframeDefinition",
    "MidStyle",
    "OutStyle",
    "Pose",
    "RenderedAnimationData",
    "Timing",
    # Phases
    "PhaseWindow",
    "Timeline",
    "ease_in_out",
    "resolve_timeline",
    # Sampler
    "sample",
    "sample_banner",
    # Keyframes
    "build_css_keyframes",
    "format_transform",
    "generate_animation_data",
    "render_setting",
]
