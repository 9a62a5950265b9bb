import math

import pytest
from pydantic import ValidationError

from bannerkit.timeline.models import AnimationSetting, Asset, InStyle, OutStyle
from bannerkit.timeline.phases import ENTRY_OFFSETS, EXIT_OFFSETS, ease_in_out, resolve_timeline
from bannerkit.timeline.sampler import attention_offset, sample, sample_banner


ASSET = Asset(id="a1", name="Layer", x=100, y=50, width=40, height=20)


def _setting(**phases) -> AnimationSetting:
    return AnimationSetting.model_validate({"id": "a1", **phases})


# =============================================================================
# Easing
# =============================================================================

def test_ease_endpoints_and_midpoint():
    assert ease_in_out(0) == 0
    assert ease_in_out(1) == 1
    assert ease_in_out(0.5) == pytest.approx(0.5)


def test_ease_is_monotonic_and_symmetric():
    steps = [i / 100 for i in range(101)]
    values = [ease_in_out(t) for t in steps]
    assert values == sorted(values)
    for t in steps:
        assert ease_in_out(t) + ease_in_out(1 - t) == pytest.approx(1.0)


# =============================================================================
# Entry / exit
# =============================================================================

def test_fade_in_halfway_is_half_opaque():
    setting = _setting(**{"in": {"style": "fade-in", "delay": 0, "duration": 1000}})
    pose = sample(setting, ASSET, 500)
    assert pose.opacity == pytest.approx(0.5)
    assert (pose.x, pose.y) == (100, 50)


def test_negative_time_is_clamped_to_zero():
    setting = _setting(**{"in": {"style": "fade-in", "delay": 0, "duration": 1000}})
    assert sample(setting, ASSET, -250) == sample(setting, ASSET, 0)
    assert sample(setting, ASSET, 0).opacity == 0


def test_slide_in_up_starts_below_rest_position():
    setting = _setting(**{"in": {"style": "slide-in-up", "delay": 500, "duration": 1000}})
    before = sample(setting, ASSET, 100)
    assert before.opacity == 0
    assert before.y == 80
    assert before.x == 100
    after = sample(setting, ASSET, 1500)
    assert (after.opacity, after.y) == (1, 50)


@pytest.mark.parametrize(
    "style,dx,dy",
    [("slide-in-down", 0, -30), ("slide-in-left", 30, 0), ("slide-in-right", -30, 0)],
)
def test_slide_in_offsets(style, dx, dy):
    setting = _setting(**{"in": {"style": style, "delay": 100, "duration": 400}})
    pose = sample(setting, ASSET, 0)
    assert (pose.x - ASSET.x, pose.y - ASSET.y) == (dx, dy)


def test_zoom_in_starts_scaled_down():
    setting = _setting(**{"in": {"style": "zoom-in", "delay": 100, "duration": 400}})
    pose = sample(setting, ASSET, 0)
    assert pose.scale_x == pose.scale_y == pytest.approx(0.8)


def test_fade_out_blends_and_holds():
    setting = _setting(out={"style": "fade-out", "delay": 3000, "duration": 500})
    assert sample(setting, ASSET, 1000).opacity == 1
    assert sample(setting, ASSET, 3250).opacity == pytest.approx(0.5)
    assert sample(setting, ASSET, 4000).opacity == 0


def test_slide_out_down_ends_below():
    setting = _setting(out={"style": "slide-out-down", "delay": 1000, "duration": 500})
    assert sample(setting, ASSET, 2000).y == 80


def test_past_total_duration_returns_post_exit_pose():
    setting = _setting(out={"style": "slide-out-left", "delay": 8000, "duration": 500})
    pose = sample(setting, ASSET, 7000, total_duration=6000)
    assert pose.x == 70
    assert pose.opacity == 0


def test_zero_duration_entry_is_instant():
    setting = _setting(**{"in": {"style": "fade-in", "delay": 1000, "duration": 0}})
    assert sample(setting, ASSET, 999).opacity == 0
    assert sample(setting, ASSET, 1000).opacity == 1


def test_custom_entry_uses_raw_fields():
    setting = _setting(**{
        "in": {
            "style": "custom", "delay": 500, "duration": 500,
            "x": -50, "y": 10, "scale": 50, "opacity": 40, "rotation": 90,
        }
    })
    pose = sample(setting, ASSET, 0)
    assert (pose.x, pose.y) == (50, 60)
    assert pose.scale_x == pytest.approx(0.5)
    assert pose.opacity == pytest.approx(0.4)
    assert pose.rotation == 90


def test_custom_entry_defaults_to_transparent_unscaled():
    setting = _setting(**{"in": {"style": "custom", "delay": 500, "duration": 500}})
    pose = sample(setting, ASSET, 0)
    assert pose.opacity == 0
    assert pose.scale_x == 1


def test_identity_between_phases():
    setting = _setting(
        **{"in": {"style": "fade-in", "duration": 500}},
        out={"style": "fade-out", "delay": 4000, "duration": 500},
    )
    pose = sample(setting, ASSET, 2000)
    assert (pose.opacity, pose.x, pose.y, pose.scale_x, pose.rotation) == (1, 100, 50, 1, 0)


# =============================================================================
# Attention
# =============================================================================

def test_pulse_formula():
    setting = _setting(mid={"style": "pulse", "delay": 0, "duration": 1000, "intensity": 1.2})
    pose = sample(setting, ASSET, 125, total_duration=15000)
    assert pose.scale_x == pytest.approx(1.1)


def test_shake_formula():
    setting = _setting(mid={"style": "shake", "duration": 1000, "intensity": 1.5})
    offset = attention_offset(setting, 0.025)
    assert offset.dx == pytest.approx(10.0)
    assert offset.dy == pytest.approx(math.cos(0.025 * math.pi * 15) * 5)


def test_mid_starts_after_entry():
    setting = _setting(
        **{"in": {"style": "fade-in", "duration": 1000}},
        mid={"style": "pulse", "delay": 0, "duration": 1000},
    )
    timeline = resolve_timeline(setting, 15000)
    assert (timeline.attention.start, timeline.attention.end) == (1000, 2000)


def test_mid_defaults_to_one_second():
    setting = _setting(mid={"style": "shake", "delay": 200})
    timeline = resolve_timeline(setting, 15000)
    assert timeline.attention.duration == 1000


def test_mid_suppressed_when_it_cannot_start_before_exit():
    setting = _setting(
        **{"in": {"style": "fade-in", "duration": 2000}},
        mid={"style": "pulse", "duration": 1000},
        out={"style": "fade-out", "delay": 1500, "duration": 500},
    )
    assert resolve_timeline(setting, 15000).attention is None
    # entry blend still wins inside its own window
    assert sample(setting, ASSET, 1000).opacity == pytest.approx(0.5)


def test_unstyled_exit_delay_still_bounds_mid():
    setting = _setting(
        **{"in": {"style": "fade-in", "duration": 500}},
        mid={"style": "pulse", "duration": 1000},
        out={"style": "none", "delay": 400},
    )
    timeline = resolve_timeline(setting, 15000)
    assert timeline.attention is None
    assert timeline.attention_limit == 400
    # past the entry the layer simply rests
    pose = sample(setting, ASSET, 700, total_duration=15000)
    assert (pose.opacity, pose.scale_x) == (1, 1)


def test_mid_limit_falls_back_to_total_duration():
    setting = _setting(mid={"style": "pulse", "delay": 7000})
    assert resolve_timeline(setting, 6000).attention is None
    assert resolve_timeline(setting, 15000).attention is not None


# =============================================================================
# Tables, determinism, validation
# =============================================================================

def test_every_named_style_has_an_offset():
    assert set(ENTRY_OFFSETS) == set(InStyle) - {InStyle.CUSTOM}
    assert set(EXIT_OFFSETS) == set(OutStyle) - {OutStyle.CUSTOM}


def test_sampling_is_deterministic(banner):
    for t in (0, 333, 1500, 5250, 9000):
        assert sample_banner(banner, t) == sample_banner(banner, t)


def test_unknown_style_is_rejected():
    with pytest.raises(ValidationError):
        _setting(**{"in": {"style": "bounce-in"}})


def test_sample_banner_rests_assets_without_setting(banner):
    poses = sample_banner(banner, 500)
    assert poses["1:3"].opacity == 1
    assert (poses["1:3"].x, poses["1:3"].y) == (200, 180)
    assert poses["1:2"].opacity == pytest.approx(0.5)
