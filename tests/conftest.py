from __future__ import annotations

import io
from typing import Any, Dict

import pytest
from PIL import Image

from bannerkit.timeline.models import BannerData


def make_png(width: int = 10, height: int = 10, color=(255, 0, 0, 255)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGBA", (width, height), color).save(buf, format="PNG")
    return buf.getvalue()


def banner_payload(**overrides: Any) -> Dict[str, Any]:
    """A 300x250 banner with a headline (fade in, pulse, fade out) and a static logo."""
    payload: Dict[str, Any] = {
        "frameName": "Spring Sale",
        "bannerWidth": 300,
        "bannerHeight": 250,
        "backgroundColor": "#ffffff",
        "clickTag": "https://example.com/landing",
        "loop": False,
        "totalDuration": 6000,
        "exportPreset": "iab",
        "assets": [
            {"id": "1:2", "name": "Headline", "x": 20, "y": 40, "width": 10, "height": 10},
            {"id": "1:3", "name": "Logo", "x": 200, "y": 180, "width": 10, "height": 10},
        ],
        "settings": [
            {
                "id": "1:2",
                "name": "Headline",
                "in": {"style": "fade-in", "delay": 0, "duration": 1000, "easing": "ease-out"},
                "mid": {"style": "pulse", "delay": 0, "duration": 1000, "intensity": 1.1},
                "out": {"style": "fade-out", "delay": 5000, "duration": 500, "easing": "ease-in"},
            },
        ],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def banner() -> BannerData:
    return BannerData.model_validate(banner_payload())


@pytest.fixture
def layer_images() -> Dict[str, bytes]:
    return {"1:2": make_png(), "1:3": make_png(color=(0, 0, 255, 255))}


@pytest.fixture
def png():
    return make_png


@pytest.fixture
def payload():
    return banner_payload
