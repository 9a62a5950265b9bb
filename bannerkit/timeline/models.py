"""Timeline Model - data shapes for banner assets, phases and rendered animations."""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bannerkit.utils.config import settings


class InStyle(str, Enum):
    """Entry styles."""
    NONE = "none"
    FADE_IN = "fade-in"
    SLIDE_IN_UP = "slide-in-up"
    SLIDE_IN_DOWN = "slide-in-down"
    SLIDE_IN_LEFT = "slide-in-left"
    SLIDE_IN_RIGHT = "slide-in-right"
    ZOOM_IN = "zoom-in"
    CUSTOM = "custom"


class MidStyle(str, Enum):
    """Attention-loop styles."""
    NONE = "none"
    PULSE = "pulse"
    SHAKE = "shake"


class OutStyle(str, Enum):
    """Exit styles."""
    NONE = "none"
    FADE_OUT = "fade-out"
    SLIDE_OUT_UP = "slide-out-up"
    SLIDE_OUT_DOWN = "slide-out-down"
    SLIDE_OUT_LEFT = "slide-out-left"
    SLIDE_OUT_RIGHT = "slide-out-right"
    ZOOM_OUT = "zoom-out"
    CUSTOM = "custom"


class ExportPreset(str, Enum):
    """Ad-network packaging profiles."""
    IAB = "iab"
    GOOGLE_ADS = "google-ads"
    SIZMEK = "sizmek"
    XANDR = "xandr"

    @classmethod
    def resolve(cls, value: Any) -> "ExportPreset":
        """Return the preset for ``value``; anything unrecognised is IAB."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.IAB


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Asset(_Frozen):
    """A captured layer: identity, kind and geometry."""
    id: str
    name: str = ""
    type: str = "FRAME"
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    thumbnail: str = ""
    visible: bool = True
    has_error: bool = Field(default=False, alias="hasError")
    error_message: Optional[str] = Field(default=None, alias="errorMessage")


class _PhaseBase(_Frozen):
    delay: float = 0.0
    duration: float = 0.0
    easing: str = "ease"
    # Raw numeric fields, only read by `custom` and the mid family
    x: Optional[float] = None
    y: Optional[float] = None
    scale: Optional[float] = None  # percent, 100 = unscaled
    opacity: Optional[float] = None  # percent, 0..100
    rotation: Optional[float] = None  # degrees
    intensity: Optional[float] = None

    @field_validator("easing", mode="before")
    @classmethod
    def _default_easing(cls, value: Any) -> str:
        return value or "ease"


class InPhase(_PhaseBase):
    style: InStyle = InStyle.NONE


class MidPhase(_PhaseBase):
    style: MidStyle = MidStyle.NONE


class OutPhase(_PhaseBase):
    style: OutStyle = OutStyle.NONE


class AnimationSetting(_Frozen):
    """Binds one in/mid/out triple to an asset identifier."""
    id: str
    name: str = ""
    in_: InPhase = Field(default_factory=InPhase, alias="in")
    mid: MidPhase = Field(default_factory=MidPhase)
    out: OutPhase = Field(default_factory=OutPhase)


class BannerData(_Frozen):
    """Everything a single generation pass needs."""
    frame_name: str = Field(default="Banner", alias="frameName")
    banner_width: float = Field(alias="bannerWidth")
    banner_height: float = Field(alias="bannerHeight")
    background_color: str = Field(default_factory=lambda: settings.default_background, alias="backgroundColor")
    click_tag: str = Field(default_factory=lambda: settings.default_click_tag, alias="clickTag")
    loop: bool = False
    total_duration: float = Field(default_factory=lambda: settings.default_total_duration, alias="totalDuration")
    settings: List[AnimationSetting] = Field(default_factory=list)
    assets: List[Asset] = Field(default_factory=list)
    export_preset: ExportPreset = Field(
        default_factory=lambda: ExportPreset.resolve(settings.default_export_preset),
        alias="exportPreset",
    )

    @field_validator("export_preset", mode="before")
    @classmethod
    def _resolve_preset(cls, value: Any) -> ExportPreset:
        return ExportPreset.resolve(value)

    @field_validator("background_color", mode="before")
    @classmethod
    def _default_background(cls, value: Any) -> str:
        return value or settings.default_background

    def asset_by_id(self, asset_id: str) -> Optional[Asset]:
        for asset in self.assets:
            if asset.id == asset_id:
                return asset
        return None

    def setting_by_id(self, asset_id: str) -> Optional[AnimationSetting]:
        for setting in self.settings:
            if setting.id == asset_id:
                return setting
        return None

    def resolved_pairs(self) -> Iterator[Tuple[AnimationSetting, Asset]]:
        """Yield (setting, asset) in setting order; settings without an asset are skipped."""
        for setting in self.settings:
            asset = self.asset_by_id(setting.id)
            if asset is not None:
                yield setting, asset


class Pose(_Frozen):
    """Resolved layer state at a single instant. x/y are absolute positions."""
    opacity: float = 1.0
    x: float = 0.0
    y: float = 0.0
    scale_x: float = Field(default=1.0, alias="scaleX")
    scale_y: float = Field(default=1.0, alias="scaleY")
    rotation: float = 0.0


class Keyframe(_Frozen):
    opacity: float
    transform: str


class Timing(_Frozen):
    delay: float
    duration: float
    easing: str
    fill: str = "forwards"


class KeyframeDefinition(_Frozen):
    """One native animation: ordered keyframes plus timing."""
    keyframes: List[Keyframe]
    timing: Timing

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


class CssAnimation(_Frozen):
    """Static-export counterpart of a KeyframeDefinition."""
    name: str
    keyframes_css: str
    shorthand: str


class RenderedAnimationData(_Frozen):
    """Per-asset output of the keyframe generator."""
    asset_id: str
    selector: str
    element_id: str
    animations: List[KeyframeDefinition] = Field(default_factory=list)
    css_animations: List[CssAnimation] = Field(default_factory=list)
    initial_style: str = ""

    @property
    def animation_shorthand(self) -> str:
        return ", ".join(a.shorthand for a in self.css_animations)

    @property
    def static_style(self) -> str:
        """Initial style plus the chained `animation` property, for static export."""
        if not self.css_animations:
            return self.initial_style
        return f"{self.initial_style} animation: {self.animation_shorthand};"

    def to_control_dict(self) -> Dict[str, Any]:
        """Shape consumed by the interactive control script."""
        return {
            "selector": self.selector,
            "animations": [a.to_dict() for a in self.animations],
            "initialStyle": self.initial_style,
        }
