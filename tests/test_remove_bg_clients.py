"""Tests for the relay and remove.bg HTTP clients."""

import httpx
import pytest

from creative_pilot.app.errors import RemoteServiceError
from creative_pilot.tools.image_ops.remove_bg import RelayClient, RemoveBgApiClient

from conftest import fake_png

RELAY_URL = "http://relay.test/remove-bg"
API_URL = "https://api.remove.bg.test/v1.0/removebg"


def _transport(status: int = 200, content: bytes = b"", seen=None) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status, content=content)

    return httpx.MockTransport(handler)


class TestRelayClient:
    @pytest.mark.asyncio
    async def test_posts_multipart_image_field(self):
        seen = []
        client = RelayClient(RELAY_URL, transport=_transport(content=fake_png(b"out"), seen=seen))

        result = await client.remove_background(fake_png(b"in"), filename="photo.jpg")

        assert result == fake_png(b"out")
        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == RELAY_URL
        assert request.headers["content-type"].startswith("multipart/form-data")
        assert b'name="image"; filename="photo.jpg"' in request.content
        assert fake_png(b"in") in request.content
        assert "x-api-key" not in request.headers

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [400, 500, 502])
    async def test_non_success_raises(self, status):
        client = RelayClient(RELAY_URL, transport=_transport(status=status, content=b"Error removing background"))
        with pytest.raises(RemoteServiceError) as exc:
            await client.remove_background(fake_png(b"in"))
        assert exc.value.status_code == status

    @pytest.mark.asyncio
    async def test_empty_body_raises(self):
        client = RelayClient(RELAY_URL, transport=_transport(content=b""))
        with pytest.raises(RemoteServiceError):
            await client.remove_background(fake_png(b"in"))

    @pytest.mark.asyncio
    async def test_transport_error_is_wrapped(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = RelayClient(RELAY_URL, transport=httpx.MockTransport(handler))
        with pytest.raises(RemoteServiceError) as exc:
            await client.remove_background(fake_png(b"in"))
        assert exc.value.status_code is None
        assert isinstance(exc.value.__cause__, httpx.ConnectError)


class TestRemoveBgApiClient:
    @pytest.mark.asyncio
    async def test_sends_key_and_size(self):
        seen = []
        client = RemoveBgApiClient(
            "secret-key", api_url=API_URL, transport=_transport(content=fake_png(b"cut"), seen=seen),
        )

        result = await client.remove_background(fake_png(b"in"), filename="shoe.png")

        assert result == fake_png(b"cut")
        request = seen[0]
        assert request.headers["x-api-key"] == "secret-key"
        assert b'name="image_file"; filename="shoe.png"' in request.content
        assert b'name="size"' in request.content
        assert b"auto" in request.content

    @pytest.mark.asyncio
    async def test_api_error_raises(self):
        client = RemoveBgApiClient(
            "bad-key",
            api_url=API_URL,
            transport=_transport(status=403, content=b'{"errors":[{"title":"Forbidden"}]}'),
        )
        with pytest.raises(RemoteServiceError) as exc:
            await client.remove_background(fake_png(b"in"))
        assert exc.value.status_code == 403
