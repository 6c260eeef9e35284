from __future__ import annotations

from creative_pilot.relay.server import create_relay_app, create_relay_app_from_settings

__all__ = [
    "create_relay_app",
    "create_relay_app_from_settings",
]
