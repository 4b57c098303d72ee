"""HTTP client facade for the ACS admin API."""

from .api import (
    ApiClient,
    ApiError,
    FormData,
    InvalidResponse,
    SessionExpired,
    Unauthorized,
    get_api_client,
    read_csrf_token,
    reset_api_client,
)

__all__ = [
    "ApiClient",
    "ApiError",
    "FormData",
    "InvalidResponse",
    "SessionExpired",
    "Unauthorized",
    "get_api_client",
    "read_csrf_token",
    "reset_api_client",
]
