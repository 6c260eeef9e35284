from __future__ import annotations

from creative_pilot.tools.exporters import render_plan

__all__ = [
    "render_plan",
]
