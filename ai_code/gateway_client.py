import logging
from collections.abc import AsyncIterator
from typing import Optional

import httpx

from ai_code.config import GATEWAY_CHAT_COMPLETIONS_URL, GATEWAY_MODEL
from ai_code.errors import (
    ConfigurationError,
    TransportError,
    UpstreamOtherError,
    UpstreamRateLimited,
    UpstreamUnavailable,
)

logger = logging.getLogger(__name__)


class GatewayStream:
    """Open gateway response whose body is relayed without being read here."""

    def __init__(self, response: httpx.Response, client: httpx.AsyncClient) -> None:
        self._response = response
        self._client = client

    def aiter_bytes(self) -> AsyncIterator[bytes]:
        async def iterator() -> AsyncIterator[bytes]:
            try:
                async for chunk in self._response.aiter_bytes():
                    yield chunk
            except httpx.TransportError as exc:
                # An upstream drop mid-stream ends the relay like a normal EOF.
                logger.warning("AI gateway stream ended early: %r", exc)
            finally:
                await self._response.aclose()
                await self._client.aclose()

        return iterator()


class GatewayClient:
    def __init__(
        self,
        api_key: Optional[str],
        *,
        url: str = GATEWAY_CHAT_COMPLETIONS_URL,
        model: str = GATEWAY_MODEL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ) -> None:
        if not api_key:
            raise ConfigurationError("LOVABLE_API_KEY is not configured")
        self.api_key = api_key
        self.url = url
        self.model = model
        self._transport = transport
        self._timeout = timeout

    def build_payload(self, system_prompt: str, messages: list[dict]) -> dict:
        return {
            "model": self.model,
            "messages": [{"role": "system", "content": system_prompt}, *messages],
            "stream": True,
        }

    async def open_stream(self, system_prompt: str, messages: list[dict]) -> GatewayStream:
        """Send one streaming chat completion request to the gateway.

        Returns as soon as the response headers arrive. Non-success statuses
        are raised as the matching ``ai_code.errors`` class and the request is
        never retried.
        """

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload = self.build_payload(system_prompt, messages)

        client = httpx.AsyncClient(
            timeout=self._timeout,
            transport=self._transport,
            follow_redirects=True,
        )
        try:
            request = client.build_request("POST", self.url, headers=headers, json=payload)
            response = await client.send(request, stream=True)
        except httpx.RequestError as exc:
            await client.aclose()
            raise TransportError(str(exc) or "Failed to reach AI gateway") from exc
        except Exception:
            await client.aclose()
            raise

        if response.is_success:
            return GatewayStream(response, client)

        status_code = response.status_code
        try:
            if status_code == 429:
                raise UpstreamRateLimited()
            if status_code == 402:
                raise UpstreamUnavailable()
            await response.aread()
            raise UpstreamOtherError(status_code, response.text)
        finally:
            await response.aclose()
            await client.aclose()


__all__ = ["GatewayClient", "GatewayStream"]
