from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

from pydantic import BaseModel, ValidationError

from creative_pilot.composer.layer_schema import (
    DATA_MODELS,
    ImageLayer,
    Layer,
    LayerData,
    TextLayer,
    seed_layers,
)
from creative_pilot.core.ids import new_layer_id

logger = logging.getLogger(__name__)


class LayerStore:
    """
    Ordered layers + a single selection pointer.

    Index 0 is painted first; the last layer is drawn on top.
    Every operation is total: an unknown id is a no-op, never an error.
    """

    def __init__(self, layers: Optional[Iterable[Layer]] = None, *, seed: bool = True):
        self._layers: List[Layer] = []
        self._selected_id: Optional[str] = None
        initial = list(layers) if layers is not None else (seed_layers() if seed else [])
        for layer in initial:
            self.add(layer)

    # ---------- Queries ----------
    @property
    def layers(self) -> List[Layer]:
        return list(self._layers)

    @property
    def ids(self) -> List[str]:
        return [l.id for l in self._layers]

    @property
    def selected_id(self) -> Optional[str]:
        return self._selected_id

    @property
    def selected(self) -> Optional[Layer]:
        return self.get(self._selected_id) if self._selected_id else None

    def get(self, layer_id: Optional[str]) -> Optional[Layer]:
        idx = self._index(layer_id)
        return self._layers[idx] if idx != -1 else None

    def image_layers(self) -> List[ImageLayer]:
        return [l for l in self._layers if l.type == "image"]

    def text_layers(self) -> List[TextLayer]:
        return [l for l in self._layers if l.type == "text"]

    def __len__(self) -> int:
        return len(self._layers)

    def __iter__(self) -> Iterator[Layer]:
        return iter(list(self._layers))

    def __contains__(self, layer_id: object) -> bool:
        return isinstance(layer_id, str) and self._index(layer_id) != -1

    # ---------- Mutations ----------
    def add(self, layer: Layer) -> Optional[str]:
        """
        Append `layer` on top. A layer built without an id gets one here.
        Returns the id actually stored, or None if the id was already taken.
        """
        if not layer.id:
            layer = layer.model_copy(update={"id": new_layer_id(layer.type)})
        if layer.id in self:
            logger.debug("add ignored, duplicate layer id %s", layer.id)
            return None
        self._layers.append(layer)
        return layer.id

    def remove(self, layer_id: str) -> None:
        idx = self._index(layer_id)
        if idx == -1:
            return
        del self._layers[idx]
        if self._selected_id == layer_id:
            self._selected_id = None

    def move_up(self, layer_id: str) -> None:
        """Swap with the layer painted just above; no-op for the topmost layer."""
        idx = self._index(layer_id)
        if idx == -1 or idx >= len(self._layers) - 1:
            return
        self._swap(idx, idx + 1)

    def move_down(self, layer_id: str) -> None:
        """Swap with the layer painted just below; no-op for the bottom layer."""
        idx = self._index(layer_id)
        if idx <= 0:
            return
        self._swap(idx, idx - 1)

    def update(self, layer_id: str, new_data: Union[LayerData, Dict[str, Any]]) -> None:
        """
        Replace the whole `data` payload of a layer.
        The payload must match the layer's type; anything else is dropped.
        """
        idx = self._index(layer_id)
        if idx == -1:
            return
        layer = self._layers[idx]
        data_cls = DATA_MODELS[layer.type]

        if isinstance(new_data, BaseModel) and not isinstance(new_data, data_cls):
            logger.warning(
                "update ignored, %s payload for %s layer %s",
                type(new_data).__name__, layer.type, layer_id,
            )
            return
        # instances built with model_copy(update=...) skip validation; re-run it
        if isinstance(new_data, BaseModel):
            new_data = dict(new_data)
        try:
            new_data = data_cls.model_validate(new_data)
        except ValidationError as e:
            logger.warning("update ignored, invalid %s payload for %s: %s", layer.type, layer_id, e)
            return

        self._layers[idx] = layer.model_copy(update={"data": new_data})

    def select(self, layer_id: Optional[str]) -> None:
        """Point the selection at `layer_id`; an unknown id clears it."""
        self._selected_id = layer_id if layer_id in self else None

    def clear(self) -> None:
        self._layers = []
        self._selected_id = None

    # -------------------------
    # internal helpers
    # -------------------------
    def _index(self, layer_id: Optional[str]) -> int:
        if layer_id is None:
            return -1
        for i, l in enumerate(self._layers):
            if l.id == layer_id:
                return i
        return -1

    def _swap(self, i: int, j: int) -> None:
        self._layers[i], self._layers[j] = self._layers[j], self._layers[i]
