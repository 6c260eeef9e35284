from __future__ import annotations

"""
Session layer:
- one open composition (canvas, background, layers)
- UI event entry points routed into the composer
"""

from creative_pilot.session import composer_session

__all__ = [
    "composer_session",
]
