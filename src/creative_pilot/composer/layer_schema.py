from __future__ import annotations

import base64
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from creative_pilot.core.hashing import sha256_of_bytes

LayerKind = Literal["image", "text"]

# -----------------------------
# Image payload
# -----------------------------

class ImageSource(BaseModel):
    """Binary image payload plus the display handle derived from it.

    `uri` is a data URI so any renderer can load it without a side channel;
    `sha256` identifies the payload for logging and equality checks."""
    model_config = ConfigDict(frozen=True)

    payload: bytes = Field(repr=False)
    filename: str = "image.png"
    mime: str = "image/png"
    sha256: str
    uri: str = Field(repr=False)

    @classmethod
    def from_bytes(
        cls,
        payload: bytes,
        *,
        filename: str = "image.png",
        mime: Optional[str] = None,
    ) -> "ImageSource":
        mime = mime or guess_mime(payload)
        encoded = base64.b64encode(payload).decode("ascii")
        return cls(
            payload=payload,
            filename=filename,
            mime=mime,
            sha256=sha256_of_bytes(payload),
            uri=f"data:{mime};base64,{encoded}",
        )


def guess_mime(payload: bytes) -> str:
    """Sniff the few raster formats a browser file picker hands us."""
    if payload.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if payload.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if payload[:6] in (b"GIF87a", b"GIF89a"):
        return "image/gif"
    if payload[:4] == b"RIFF" and payload[8:12] == b"WEBP":
        return "image/webp"
    return "application/octet-stream"

# -----------------------------
# Layer data payloads
# -----------------------------

class ImageLayerData(BaseModel):
    # scale has no floor here; only relative zoom applies MIN_SCALE
    model_config = ConfigDict(extra="forbid", frozen=True)

    source: ImageSource
    x: float
    y: float
    scale: float = Field(default=1.0, gt=0)
    rotation: float = 0.0


class TextLayerData(BaseModel):
    """Text has no stored scale; resize gestures are folded into font_size."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    text: str = "New Text"
    x: float = 60.0
    y: float = 60.0
    font_size: float = Field(default=36.0, gt=0)
    fill: str = "#ffffff"
    font_style: str = "normal"
    rotation: float = 0.0

# -----------------------------
# Layers (tagged by `type`)
# -----------------------------

class ImageLayer(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = ""
    type: Literal["image"] = "image"
    data: ImageLayerData


class TextLayer(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = ""
    type: Literal["text"] = "text"
    data: TextLayerData


Layer = Annotated[Union[ImageLayer, TextLayer], Field(discriminator="type")]

LayerData = Union[ImageLayerData, TextLayerData]

DATA_MODELS = {
    "image": ImageLayerData,
    "text": TextLayerData,
}


def seed_layers() -> list:
    """The two starter text layers every fresh composition begins with."""
    return [
        TextLayer(
            id="text-headline",
            data=TextLayerData(
                text="Summer Sale Up to 50% Off",
                x=40,
                y=40,
                font_size=64,
                fill="#ffffff",
                font_style="bold",
            ),
        ),
        TextLayer(
            id="text-cta",
            data=TextLayerData(
                text="Shop Now",
                x=40,
                y=140,
                font_size=40,
                fill="#ffcc00",
                font_style="600",
            ),
        ),
    ]
