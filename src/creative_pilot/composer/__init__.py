from __future__ import annotations

"""
Composition model:
- layer_schema / canvas_schema: layer, canvas and background records
- layer_store: ordered layers + single selection
- transforms: geometry updates (zoom, rotate, drag/resize, text controls)
- bg_removal: remote background-removal round-trip
- actions: global toolbar actions and target disambiguation
"""

from creative_pilot.composer import actions, bg_removal, canvas_schema, layer_schema, layer_store, transforms

__all__ = [
    "actions",
    "bg_removal",
    "canvas_schema",
    "layer_schema",
    "layer_store",
    "transforms",
]
