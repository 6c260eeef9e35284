from __future__ import annotations

from typing import Optional

import uvicorn
from dotenv import load_dotenv

from creative_pilot.app.logging import setup_logging
from creative_pilot.app.settings import Settings, load_settings
from creative_pilot.relay.server import create_relay_app_from_settings
from creative_pilot.session.composer_session import ComposerSession


def new_session(settings: Optional[Settings] = None) -> ComposerSession:
    """
    Client-side entrypoint:
    - load .env + settings
    - build a composer session wired to the relay
    """
    load_dotenv()
    s = settings or load_settings()
    setup_logging(s.log_level)
    return ComposerSession.from_settings(s)


def run_relay() -> None:
    """
    Server-side entrypoint:
    - load .env + settings (REMOVE_BG_KEY is required)
    - serve the relay with uvicorn
    """
    load_dotenv()
    s = load_settings()
    setup_logging(s.log_level)

    app = create_relay_app_from_settings(s)
    uvicorn.run(app, host=s.relay_host, port=s.relay_port, log_config=None)


if __name__ == "__main__":
    run_relay()
