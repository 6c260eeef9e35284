"""
Pytest fixtures for the composer tests
"""

import asyncio
from typing import List, Optional

import pytest

from creative_pilot.app.errors import RemoteServiceError
from creative_pilot.composer.layer_store import LayerStore
from creative_pilot.session.composer_session import ComposerSession

PNG_SIG = b"\x89PNG\r\n\x1a\n"


def fake_png(tag: bytes) -> bytes:
    return PNG_SIG + b"fake-image-" + tag


class FakeRemover:
    """Stands in for the relay: records calls, returns `result` or raises `error`."""

    def __init__(
        self,
        result: bytes = b"",
        *,
        error: Optional[Exception] = None,
        delay: float = 0.0,
        on_call=None,
    ):
        self.result = result or fake_png(b"stripped")
        self.error = error
        self.delay = delay
        self.on_call = on_call
        self.calls: List[bytes] = []

    async def remove_background(self, payload: bytes, *, filename: str = "image.png") -> bytes:
        self.calls.append(payload)
        if self.on_call is not None:
            self.on_call()
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def photo_bytes() -> bytes:
    return fake_png(b"photo")


@pytest.fixture
def store() -> LayerStore:
    return LayerStore()


@pytest.fixture
def remover() -> FakeRemover:
    return FakeRemover()


@pytest.fixture
def failing_remover() -> FakeRemover:
    return FakeRemover(error=RemoteServiceError("relay returned HTTP 500", status_code=500))


@pytest.fixture
def notices() -> List[str]:
    return []


@pytest.fixture
def session(remover, notices) -> ComposerSession:
    return ComposerSession(remover, notify=notices.append)
