from __future__ import annotations

from creative_pilot.tools.image_ops import remove_bg

__all__ = [
    "remove_bg",
]
