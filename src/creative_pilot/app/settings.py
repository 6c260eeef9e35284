from __future__ import annotations
import os
from dataclasses import dataclass

from creative_pilot.app.errors import ConfigError

DEFAULT_REMOVE_BG_API_URL = "https://api.remove.bg/v1.0/removebg"
DEFAULT_RELAY_URL = "http://localhost:8080/remove-bg"


def _get_env(name: str, default: str | None = None) -> str:
    v = os.getenv(name, default)
    if v is None or v == "":
        raise ConfigError(f"Missing required env var: {name}")
    return v


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        v = float(raw)
    except ValueError as e:
        raise ConfigError(f"Env var {name} must be a number, got {raw!r}") from e
    if v <= 0:
        raise ConfigError(f"Env var {name} must be positive, got {raw!r}")
    return v


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigError(f"Env var {name} must be an integer, got {raw!r}") from e
    if value <= 0:
        raise ConfigError(f"Env var {name} must be positive, got {raw!r}")
    return value


@dataclass(frozen=True)
class Settings:
    # remove.bg (relay side only; never shipped to the client)
    remove_bg_key: str | None
    remove_bg_api_url: str

    # Client side
    relay_url: str
    bg_removal_timeout_s: float

    # Relay server
    relay_host: str
    relay_port: int

    log_level: str

    def require_remove_bg_key(self) -> str:
        if not self.remove_bg_key:
            raise ConfigError("Missing required env var: REMOVE_BG_KEY")
        return self.remove_bg_key


def load_settings() -> Settings:
    return Settings(
        remove_bg_key=os.getenv("REMOVE_BG_KEY") or None,
        remove_bg_api_url=_get_env("REMOVE_BG_API_URL", DEFAULT_REMOVE_BG_API_URL),
        relay_url=_get_env("RELAY_URL", DEFAULT_RELAY_URL),
        bg_removal_timeout_s=_get_float("BG_REMOVAL_TIMEOUT_S", 60.0),
        relay_host=_get_env("RELAY_HOST", "0.0.0.0"),
        relay_port=_get_int("RELAY_PORT", 8080),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper().strip() or "INFO",
    )
