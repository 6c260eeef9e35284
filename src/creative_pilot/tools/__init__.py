from __future__ import annotations

"""
Tools package for the creative composer.

- image_ops: remote background-removal clients (relay + remove.bg)
- exporters: render plan handed to the canvas renderer
"""

from creative_pilot.tools import image_ops, exporters

__all__ = [
    "image_ops",
    "exporters",
]
