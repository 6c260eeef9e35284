from __future__ import annotations

from typing import Annotated, Dict, Literal, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from creative_pilot.composer.layer_schema import ImageSource

# -----------------------------
# Canvas
# -----------------------------

CanvasPreset = Literal[
    "instagram_post",      # 1080x1080
    "facebook_feed",       # 1200x628
    "instagram_story",     # 1080x1920
]

CANVAS_PRESETS: Dict[str, Tuple[int, int]] = {
    "instagram_post": (1080, 1080),
    "facebook_feed": (1200, 628),
    "instagram_story": (1080, 1920),
}


class Canvas(BaseModel):
    """Output size in pixels. Layers are free to sit outside these bounds."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    width: int = Field(default=1080, gt=0)
    height: int = Field(default=1080, gt=0)

    @classmethod
    def from_preset(cls, preset: CanvasPreset) -> "Canvas":
        w, h = CANVAS_PRESETS[preset]
        return cls(width=w, height=h)

    @property
    def center(self) -> Tuple[float, float]:
        return self.width / 2, self.height / 2

# -----------------------------
# Background (fill XOR image)
# -----------------------------

GRADIENT_FILL = "linear-gradient(45deg,#ff9a00,#ff0055)"
GRADIENT_STOPS = ("#ff9a00", "#ff0055")

BackgroundPreset = Literal["white", "black", "gradient"]

BACKGROUND_PRESETS: Dict[str, str] = {
    "white": "#ffffff",
    "black": "#000000",
    "gradient": GRADIENT_FILL,
}


class FillBackground(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["fill"] = "fill"
    value: str = "#111"

    @property
    def is_gradient(self) -> bool:
        return self.value.startswith("linear-gradient")


class ImageBackground(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["image"] = "image"
    source: ImageSource


Background = Annotated[Union[FillBackground, ImageBackground], Field(discriminator="kind")]
