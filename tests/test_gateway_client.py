import json
from collections.abc import AsyncIterator

import httpx
import pytest

from ai_code.config import GATEWAY_CHAT_COMPLETIONS_URL, GATEWAY_MODEL
from ai_code.errors import (
    ConfigurationError,
    TransportError,
    UpstreamOtherError,
    UpstreamRateLimited,
    UpstreamUnavailable,
)
from ai_code.gateway_client import GatewayClient


class DummyStream(httpx.AsyncByteStream):
    def __init__(self, chunks: list[bytes], fail_after: bool = False) -> None:
        self._chunks = chunks
        self._fail_after = fail_after
        self.closed = False

    async def __aiter__(self) -> AsyncIterator[bytes]:
        for chunk in self._chunks:
            yield chunk
        if self._fail_after:
            raise httpx.ReadError("connection lost")

    async def aclose(self) -> None:
        self.closed = True


async def collect(stream) -> list[bytes]:
    chunks: list[bytes] = []
    async for chunk in stream.aiter_bytes():
        chunks.append(chunk)
    return chunks


@pytest.mark.asyncio
async def test_open_stream_prepends_system_prompt_and_enables_streaming():
    captured: dict[str, object] = {}

    async def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["headers"] = dict(request.headers)
        captured["payload"] = json.loads(request.content.decode())
        return httpx.Response(200, headers={"Content-Type": "text/event-stream"}, content=b"")

    client = GatewayClient(api_key="secret", transport=httpx.MockTransport(handler))
    messages = [
        {"role": "user", "content": "first"},
        {"role": "assistant", "content": "second"},
        {"role": "user", "content": "third"},
    ]

    stream = await client.open_stream("You are a test prompt.", messages)
    await collect(stream)

    assert captured["url"] == GATEWAY_CHAT_COMPLETIONS_URL
    assert captured["headers"]["authorization"] == "Bearer secret"
    payload = captured["payload"]
    assert payload["model"] == GATEWAY_MODEL
    assert payload["stream"] is True
    assert payload["messages"] == [
        {"role": "system", "content": "You are a test prompt."},
        *messages,
    ]


@pytest.mark.asyncio
async def test_open_stream_relays_chunks_unchanged():
    chunks = [
        b'data: {"choices": [{"delta": {"content": "def"}}]}\n\n',
        b'data: {"choices": [{"delta": {"content": " main"}}]}\n',
        b"\n",
        b"data: [DONE]\n\n",
    ]
    upstream = DummyStream(chunks)

    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, headers={"Content-Type": "text/event-stream"}, stream=upstream)

    client = GatewayClient(api_key="secret", transport=httpx.MockTransport(handler))

    stream = await client.open_stream("prompt", [{"role": "user", "content": "hi"}])

    assert await collect(stream) == chunks
    assert upstream.closed is True


@pytest.mark.asyncio
async def test_upstream_drop_mid_stream_ends_relay_quietly():
    upstream = DummyStream([b"data: partial\n\n"], fail_after=True)

    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, stream=upstream)

    client = GatewayClient(api_key="secret", transport=httpx.MockTransport(handler))

    stream = await client.open_stream("prompt", [])

    assert await collect(stream) == [b"data: partial\n\n"]
    assert upstream.closed is True


def test_client_requires_api_key():
    with pytest.raises(ConfigurationError) as excinfo:
        GatewayClient(api_key=None)

    assert "LOVABLE_API_KEY" in str(excinfo.value)
    assert excinfo.value.status_code == 500


@pytest.mark.asyncio
async def test_rate_limit_is_raised_without_retry():
    attempts: list[int] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(1)
        return httpx.Response(429, headers={"Retry-After": "0"}, text="slow down")

    client = GatewayClient(api_key="secret", transport=httpx.MockTransport(handler))

    with pytest.raises(UpstreamRateLimited) as excinfo:
        await client.open_stream("prompt", [])

    assert excinfo.value.status_code == 429
    assert len(attempts) == 1


@pytest.mark.asyncio
async def test_payment_required_maps_to_unavailable():
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(402, json={"error": "credits exhausted"})

    client = GatewayClient(api_key="secret", transport=httpx.MockTransport(handler))

    with pytest.raises(UpstreamUnavailable) as excinfo:
        await client.open_stream("prompt", [])

    assert excinfo.value.status_code == 402
    assert "credits" not in excinfo.value.message


@pytest.mark.asyncio
async def test_other_status_keeps_upstream_detail_for_logging():
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="backend pool exhausted")

    client = GatewayClient(api_key="secret", transport=httpx.MockTransport(handler))

    with pytest.raises(UpstreamOtherError) as excinfo:
        await client.open_stream("prompt", [])

    error = excinfo.value
    assert error.status_code == 500
    assert error.upstream_status == 503
    assert error.upstream_body == "backend pool exhausted"
    assert "backend pool" not in error.message


@pytest.mark.asyncio
async def test_request_error_becomes_transport_error():
    async def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("name resolution failed", request=request)

    client = GatewayClient(api_key="secret", transport=httpx.MockTransport(handler))

    with pytest.raises(TransportError) as excinfo:
        await client.open_stream("prompt", [])

    assert excinfo.value.status_code == 500
    assert "name resolution failed" in excinfo.value.message
