from __future__ import annotations

import logging
from typing import Optional, Protocol

import httpx

from creative_pilot.app.errors import RemoteServiceError

logger = logging.getLogger(__name__)


class BackgroundRemover(Protocol):
    """Takes an image payload, returns a background-stripped PNG payload, may fail."""

    async def remove_background(self, payload: bytes, *, filename: str = "image.png") -> bytes:
        ...


def _check_image_response(resp: httpx.Response, *, what: str) -> bytes:
    if resp.status_code < 200 or resp.status_code >= 300:
        raise RemoteServiceError(
            f"{what} returned HTTP {resp.status_code}",
            status_code=resp.status_code,
        )
    if not resp.content:
        raise RemoteServiceError(f"{what} returned an empty body", status_code=resp.status_code)
    return resp.content


class RelayClient:
    """
    Client side of the relay: POST one multipart `image` field, get PNG bytes back.
    No credential is sent; the relay injects its own.
    """

    def __init__(
        self,
        relay_url: str,
        *,
        timeout_s: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.relay_url = relay_url
        self.timeout_s = timeout_s
        self._transport = transport

    async def remove_background(self, payload: bytes, *, filename: str = "image.png") -> bytes:
        files = {"image": (filename, payload, "application/octet-stream")}
        try:
            async with httpx.AsyncClient(timeout=self.timeout_s, transport=self._transport) as client:
                resp = await client.post(self.relay_url, files=files)
        except httpx.HTTPError as e:
            raise RemoteServiceError(f"relay request failed: {e!r}") from e
        return _check_image_response(resp, what="relay")


class RemoveBgApiClient:
    """
    Server side: calls the remove.bg API with the secret key.
    Used only by the relay service.
    """

    def __init__(
        self,
        api_key: str,
        *,
        api_url: str = "https://api.remove.bg/v1.0/removebg",
        timeout_s: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.api_url = api_url
        self.timeout_s = timeout_s
        self._transport = transport

    async def remove_background(self, payload: bytes, *, filename: str = "image.png") -> bytes:
        files = {"image_file": (filename, payload, "application/octet-stream")}
        data = {"size": "auto"}
        headers = {"X-Api-Key": self.api_key}
        try:
            async with httpx.AsyncClient(timeout=self.timeout_s, transport=self._transport) as client:
                resp = await client.post(self.api_url, files=files, data=data, headers=headers)
        except httpx.HTTPError as e:
            raise RemoteServiceError(f"remove.bg request failed: {e!r}") from e

        if resp.status_code >= 400:
            # remove.bg reports errors as JSON; keep it for the log only
            logger.warning("remove.bg error %s: %s", resp.status_code, resp.text[:500])
        return _check_image_response(resp, what="remove.bg")
