from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from creative_pilot.composer.layer_store import LayerStore

MIN_SCALE = 0.2
ZOOM_STEP = 0.1
ROTATE_STEP = 15.0
MIN_FONT_SIZE = 8.0


@dataclass(frozen=True)
class TransformEnd:
    """
    Final node geometry reported by the renderer when a resize/rotate gesture ends.
    Scale is uniform for images, so only scale_x is read.
    """
    x: float
    y: float
    rotation: float = 0.0
    scale_x: float = 1.0


# -----------------------------
# Relative (button) transforms
# -----------------------------

def scale_by(store: LayerStore, layer_id: str, delta: float) -> None:
    """new scale = max(0.2, scale + delta); image layers only."""
    layer = store.get(layer_id)
    if layer is None or layer.type != "image":
        return
    scale = max(MIN_SCALE, layer.data.scale + delta)
    store.update(layer_id, layer.data.model_copy(update={"scale": scale}))


def rotate_by(store: LayerStore, layer_id: str, delta_degrees: float) -> None:
    """Accumulates without wrapping; see normalized_rotation() for display."""
    layer = store.get(layer_id)
    if layer is None or layer.type != "image":
        return
    rotation = layer.data.rotation + delta_degrees
    store.update(layer_id, layer.data.model_copy(update={"rotation": rotation}))


def normalized_rotation(degrees: float) -> float:
    return degrees % 360.0

# -----------------------------
# Direct manipulation (renderer callbacks)
# -----------------------------

def apply_drag_end(store: LayerStore, layer_id: str, x: float, y: float) -> None:
    layer = store.get(layer_id)
    if layer is None:
        return
    store.update(layer_id, layer.data.model_copy(update={"x": x, "y": y}))


def apply_transform_end(store: LayerStore, layer_id: str, event: TransformEnd) -> None:
    """
    Images take the reported geometry as-is (scale included, no floor).
    A non-positive scale_x is not a real gesture and is ignored.
    Text folds the gesture's scale into font_size in the same update,
    so the next resize multiplies against the new font size rather than
    against an accumulated scale.
    """
    layer = store.get(layer_id)
    if layer is None or event.scale_x <= 0:
        return

    if layer.type == "image":
        new_data = layer.data.model_copy(update={
            "x": event.x,
            "y": event.y,
            "rotation": event.rotation,
            "scale": event.scale_x,
        })
    else:
        old_font_size = layer.data.font_size
        new_data = layer.data.model_copy(update={
            "x": event.x,
            "y": event.y,
            "rotation": event.rotation,
            "font_size": old_font_size * event.scale_x,
        })
    store.update(layer_id, new_data)

# -----------------------------
# Text controls
# -----------------------------

def adjust_font_size(
    store: LayerStore,
    layer_id: str,
    delta: float,
    *,
    floor: float = MIN_FONT_SIZE,
) -> Optional[float]:
    """A+/A- buttons. Returns the new font size, or None if nothing changed."""
    layer = store.get(layer_id)
    if layer is None or layer.type != "text":
        return None
    font_size = max(floor, layer.data.font_size + delta)
    store.update(layer_id, layer.data.model_copy(update={"font_size": font_size}))
    return font_size


def set_text(store: LayerStore, layer_id: str, text: str) -> None:
    layer = store.get(layer_id)
    if layer is None or layer.type != "text":
        return
    store.update(layer_id, layer.data.model_copy(update={"text": text}))


def set_fill(store: LayerStore, layer_id: str, color: str) -> None:
    layer = store.get(layer_id)
    if layer is None or layer.type != "text":
        return
    store.update(layer_id, layer.data.model_copy(update={"fill": color}))
