"""OSSign API integration package."""

from signdispatch.infrastructure.ossign.client import (
    OSSignClient,
    parse_api_response,
    DEFAULT_API_BASE,
    DEFAULT_REQUEST_TIMEOUT,
    CHECK_ENDPOINTS,
)

__all__ = [
    "OSSignClient",
    "parse_api_response",
    "DEFAULT_API_BASE",
    "DEFAULT_REQUEST_TIMEOUT",
    "CHECK_ENDPOINTS",
]
