from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from creative_pilot.composer.canvas_schema import (
    GRADIENT_STOPS,
    Background,
    Canvas,
    FillBackground,
)
from creative_pilot.composer.layer_store import LayerStore
from creative_pilot.composer.transforms import normalized_rotation

EXPORT_PIXEL_RATIO = 2
EXPORT_MIME = "image/png"
EXPORT_FILENAME = "creative.png"


class RenderInstruction(BaseModel):
    """
    What the renderer (Konva stage, canvas, etc.) should paint.
    Background first, then `layers` in order; later entries sit on top.
    Layer order and geometry here are the only inputs to the exported pixels.
    """
    width: int
    height: int
    background: Dict[str, Any] = Field(default_factory=dict)
    layers: List[Dict[str, Any]] = Field(default_factory=list)
    export: Dict[str, Any] = Field(default_factory=dict)


def _background_instruction(background: Background, canvas: Canvas) -> Dict[str, Any]:
    if isinstance(background, FillBackground):
        if background.is_gradient:
            # canvas 2D cannot take a CSS gradient string; hand over explicit stops
            return {
                "style": "gradient",
                "from": {"x": 0, "y": 0},
                "to": {"x": canvas.width, "y": canvas.height},
                "stops": [
                    {"offset": 0.0, "color": GRADIENT_STOPS[0]},
                    {"offset": 1.0, "color": GRADIENT_STOPS[1]},
                ],
            }
        return {"style": "solid", "value": background.value}
    return {
        "style": "image",
        "uri": background.source.uri,
        "box_px": {"x": 0, "y": 0, "w": canvas.width, "h": canvas.height},
    }


def build_render_plan(
    *,
    store: LayerStore,
    canvas: Canvas,
    background: Background,
    selected_id: Optional[str] = None,
) -> RenderInstruction:
    """
    Converts the live composition → renderer-friendly instruction list.
    Images are anchored at their center; text at its top-left.
    """
    selected_id = selected_id if selected_id is not None else store.selected_id

    render_layers: List[Dict[str, Any]] = []
    for z, layer in enumerate(store.layers):
        d = layer.data
        entry: Dict[str, Any] = {
            "id": layer.id,
            "type": layer.type,
            "z": z,
            "x": d.x,
            "y": d.y,
            "rotation_deg": normalized_rotation(d.rotation),
            "selected": layer.id == selected_id,
            "draggable": True,
        }
        if layer.type == "image":
            entry.update({
                "anchor": "center",
                "uri": d.source.uri,
                "mime": d.source.mime,
                "scale": d.scale,
                "shadow_blur": 6,
            })
        else:
            entry.update({
                "anchor": "top-left",
                "text": d.text,
                "font_size": d.font_size,
                "fill": d.fill,
                "font_style": d.font_style,
            })
        render_layers.append(entry)

    return RenderInstruction(
        width=canvas.width,
        height=canvas.height,
        background=_background_instruction(background, canvas),
        layers=render_layers,
        export={
            "mime": EXPORT_MIME,
            "pixel_ratio": EXPORT_PIXEL_RATIO,
            "filename": EXPORT_FILENAME,
        },
    )
