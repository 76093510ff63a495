"""Failure classes raised inside the proxy.

Each carries the HTTP status and the caller-facing message it translates to,
so the request boundary can turn any of them into a JSON error response.
"""

from typing import Optional

RATE_LIMIT_MESSAGE = "Rate limit exceeded, please try again later 😅"
UNAVAILABLE_MESSAGE = "Service temporarily unavailable"
UPSTREAM_ERROR_MESSAGE = "AI service error"


class ProxyError(Exception):
    status_code = 500

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ConfigurationError(ProxyError):
    """A deployment secret or setting required to reach the gateway is missing."""


class InputError(ProxyError):
    """The request body could not be parsed into a chat request."""


class UpstreamRateLimited(ProxyError):
    status_code = 429

    def __init__(self) -> None:
        super().__init__(RATE_LIMIT_MESSAGE)


class UpstreamUnavailable(ProxyError):
    status_code = 402

    def __init__(self) -> None:
        super().__init__(UNAVAILABLE_MESSAGE)


class UpstreamOtherError(ProxyError):
    """Any other non-success gateway status.

    ``upstream_status`` and ``upstream_body`` are for server-side logs only;
    the caller only ever sees :data:`UPSTREAM_ERROR_MESSAGE`.
    """

    def __init__(self, upstream_status: int, upstream_body: str) -> None:
        super().__init__(UPSTREAM_ERROR_MESSAGE)
        self.upstream_status = upstream_status
        self.upstream_body = upstream_body


class TransportError(ProxyError):
    """The outbound call to the gateway could not be made."""


__all__ = [
    "ConfigurationError",
    "InputError",
    "ProxyError",
    "RATE_LIMIT_MESSAGE",
    "TransportError",
    "UNAVAILABLE_MESSAGE",
    "UPSTREAM_ERROR_MESSAGE",
    "UpstreamOtherError",
    "UpstreamRateLimited",
    "UpstreamUnavailable",
]
