import logging
from typing import Optional

import httpx
from fastapi import Request, Response
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import ValidationError

from ai_code.config import GATEWAY_CHAT_COMPLETIONS_URL, GATEWAY_MODEL
from ai_code.errors import (
    InputError,
    ProxyError,
    TransportError,
    UpstreamOtherError,
    UpstreamRateLimited,
    UpstreamUnavailable,
)
from ai_code.gateway_client import GatewayClient
from ai_code.prompts import system_prompt_for
from ai_code.schemas import ChatRequest, ErrorResponse

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def error_response(
    status_code: int, message: str, headers: Optional[dict[str, str]] = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
        headers={**CORS_HEADERS, **(headers or {})},
    )


async def read_chat_request(request: Request) -> ChatRequest:
    body = await request.body()
    try:
        return ChatRequest.model_validate_json(body)
    except ValidationError as exc:
        first = exc.errors()[0]
        if first["type"] == "json_invalid":
            raise InputError(f"Malformed JSON body: {first['msg']}") from exc
        raise InputError(f"Invalid chat request: {first['msg']}") from exc


class ChatProxy:
    """Relays one chat request to the AI gateway.

    A new instance is built for every incoming call; nothing is shared between
    requests except the read-only prompt table.
    """

    def __init__(
        self,
        api_key: Optional[str],
        *,
        gateway_url: str = GATEWAY_CHAT_COMPLETIONS_URL,
        model: str = GATEWAY_MODEL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self._api_key = api_key
        self._gateway_url = gateway_url
        self._model = model
        self._transport = transport
        self._timeout = timeout

    async def handle(self, request: Request) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=204, headers=CORS_HEADERS)
        if request.method != "POST":
            return error_response(405, "Method not allowed", {"Allow": "OPTIONS, POST"})

        try:
            chat_request = await read_chat_request(request)
            client = GatewayClient(
                self._api_key,
                url=self._gateway_url,
                model=self._model,
                transport=self._transport,
                timeout=self._timeout,
            )
            stream = await client.open_stream(
                system_prompt_for(chat_request.mode),
                chat_request.upstream_messages(),
            )
        except UpstreamOtherError as exc:
            logger.error("AI gateway error: %s %s", exc.upstream_status, exc.upstream_body)
            return error_response(exc.status_code, exc.message)
        except (UpstreamRateLimited, UpstreamUnavailable) as exc:
            logger.warning("AI gateway refused request with %s", exc.status_code)
            return error_response(exc.status_code, exc.message)
        except TransportError as exc:
            logger.error("AI gateway unreachable: %s", exc.message, exc_info=exc)
            return error_response(exc.status_code, exc.message)
        except ProxyError as exc:
            logger.error("code AI error: %s", exc.message)
            return error_response(exc.status_code, exc.message)
        except Exception as exc:
            logger.exception("code AI error")
            return error_response(500, str(exc) or "Unknown error")

        return StreamingResponse(
            stream.aiter_bytes(),
            headers={**CORS_HEADERS, "Content-Type": "text/event-stream"},
        )


__all__ = ["CORS_HEADERS", "ChatProxy", "error_response", "read_chat_request"]
