from fastapi import Depends, FastAPI, Request, Response

from ai_code.config import Settings, configure_logging, get_settings
from ai_code.proxy import ChatProxy
from ai_code.schemas import HealthResponse

CHAT_ROUTE = "/functions/v1/ai-code"

configure_logging(get_settings().log_level)

app = FastAPI(title="AI Code Proxy")


def get_chat_proxy(settings: Settings = Depends(get_settings)) -> ChatProxy:
    return ChatProxy(
        settings.lovable_api_key,
        gateway_url=settings.gateway_url,
        model=settings.model,
        timeout=settings.upstream_timeout,
    )


@app.get("/health", response_model=HealthResponse)
async def health():
    return HealthResponse()


@app.api_route(CHAT_ROUTE, methods=["OPTIONS", "POST", "GET", "PUT", "PATCH", "DELETE"])
async def ai_code(request: Request, proxy: ChatProxy = Depends(get_chat_proxy)) -> Response:
    return await proxy.handle(request)
