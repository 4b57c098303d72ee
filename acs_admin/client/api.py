from __future__ import annotations

import asyncio
import inspect
import logging
import time
import uuid
from typing import Any, Awaitable, Callable, List, Mapping, Optional, Tuple, Union

import httpx

from acs_admin.core.config import api_path, settings
from acs_admin.core.request_context import request_id_var

logger = logging.getLogger(__name__)

SessionExpiredHandler = Callable[[str], Union[Awaitable[None], None]]
JsonBody = Mapping[str, Any]


class ApiError(RuntimeError):
    """Base class for failures detected by the API facade."""

    def __init__(self, message: str, *, status_code: Optional[int] = None, url: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class SessionExpired(ApiError):
    """The request was redirected to the login page."""


class Unauthorized(ApiError):
    """The backend answered 401, or 307 without a followable location."""


class InvalidResponse(ApiError):
    """The backend answered with something other than JSON."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
        content_type: str = "",
    ):
        super().__init__(message, status_code=status_code, url=url)
        self.content_type = content_type


class FormData:
    """A multipart form body handed to the transport as-is.

    Plain fields are encoded as nameless-file parts so the body is always
    ``multipart/form-data``, even when no file is attached.
    """

    def __init__(self, fields: Optional[Mapping[str, str]] = None) -> None:
        self._parts: List[Tuple[str, Tuple[Any, ...]]] = []
        for name, value in (fields or {}).items():
            self.append(name, value)

    def append(self, name: str, value: str) -> None:
        self._parts.append((name, (None, str(value))))

    def append_file(
        self,
        name: str,
        filename: str,
        content: bytes,
        content_type: Optional[str] = None,
    ) -> None:
        if content_type:
            self._parts.append((name, (filename, content, content_type)))
        else:
            self._parts.append((name, (filename, content)))

    def fields(self) -> List[Tuple[str, str]]:
        """Return the non-file fields in insertion order."""
        return [(name, part[1]) for name, part in self._parts if part[0] is None]

    def parts(self) -> List[Tuple[str, Tuple[Any, ...]]]:
        return list(self._parts)

    def __len__(self) -> int:
        return len(self._parts)


def read_csrf_token(cookies: httpx.Cookies, name: Optional[str] = None) -> str:
    """Return the anti-forgery cookie value, or an empty string when absent."""
    cookie_name = name or settings.CSRF_COOKIE_NAME
    for cookie in cookies.jar:
        if cookie.name == cookie_name:
            return cookie.value or ""
    return ""


def log_session_expired(login_url: str) -> None:
    logger.warning("api_login_required", extra={"login_url": login_url})


class ApiClient:
    """Single choke point for calls to the ACS admin API.

    Every call resolves with the parsed JSON body or raises. Session death
    (redirect to the login page, 401 or 307) first invokes
    ``on_session_expired`` with the login page URL, then raises.
    """

    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        on_session_expired: Optional[SessionExpiredHandler] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        cookies: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self._on_session_expired = on_session_expired or log_session_expired
        self._http = httpx.AsyncClient(
            base_url=base_url or settings.ACS_BASE_URL,
            cookies=dict(cookies) if cookies else None,
            timeout=httpx.Timeout(timeout if timeout is not None else settings.ACS_REQUEST_TIMEOUT),
            follow_redirects=settings.ACS_FOLLOW_REDIRECTS,
            verify=settings.ACS_VERIFY_TLS,
            transport=transport,
        )

    @property
    def http(self) -> httpx.AsyncClient:
        """Underlying transport client; shares the cookie jar with the facade."""
        return self._http

    @property
    def cookies(self) -> httpx.Cookies:
        return self._http.cookies

    async def get(self, path: str, *, params: Optional[Mapping[str, Any]] = None, headers: Optional[Mapping[str, str]] = None) -> Any:
        return await self._request("GET", path, params=params, headers=headers)

    async def post(
        self,
        path: str,
        body: Union[JsonBody, FormData, None] = None,
        *,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        return await self._request("POST", path, body=body, headers=headers)

    async def post_form(self, path: str, data: Mapping[str, str], *, headers: Optional[Mapping[str, str]] = None) -> Any:
        return await self._request("POST", path, body=FormData(data), headers=headers)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def _build_headers(self, body: Union[JsonBody, FormData, None], headers: Optional[Mapping[str, str]]) -> httpx.Headers:
        merged = httpx.Headers(headers or {})
        # Facade headers are authoritative over caller headers
        merged[settings.CSRF_HEADER_NAME] = read_csrf_token(self._http.cookies)
        if isinstance(body, FormData):
            # The transport sets the boundary-bearing content type
            if "content-type" in merged:
                del merged["content-type"]
        elif body is not None:
            merged["Content-Type"] = "application/json"
        return merged

    async def _notify_session_expired(self) -> None:
        result = self._on_session_expired(settings.ACS_LOGIN_PAGE_URL)
        if inspect.isawaitable(result):
            await result

    async def _request(
        self,
        method: str,
        path: str,
        *,
        body: Union[JsonBody, FormData, None] = None,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        token = request_id_var.set(request_id_var.get() or uuid.uuid4().hex[:12])
        try:
            request_headers = self._build_headers(body, headers)
            kwargs: dict[str, Any] = {"headers": request_headers}
            if params:
                kwargs["params"] = params
            if isinstance(body, FormData) and not body:
                # httpx sends no body at all for an empty files list
                boundary = uuid.uuid4().hex
                request_headers["Content-Type"] = f"multipart/form-data; boundary={boundary}"
                kwargs["content"] = f"--{boundary}--\r\n".encode("ascii")
            elif isinstance(body, FormData):
                kwargs["files"] = body.parts()
            elif body is not None:
                kwargs["json"] = dict(body)

            url = api_path(path)
            start = time.perf_counter()
            logger.debug("api_request_start", extra={"method": method, "path": url})
            response = await self._http.request(method, url, **kwargs)
            logger.debug(
                "api_request_end",
                extra={
                    "method": method,
                    "path": url,
                    "status": response.status_code,
                    "duration_ms": round((time.perf_counter() - start) * 1000, 2),
                },
            )
            return await self._handle_response(response)
        finally:
            request_id_var.reset(token)

    async def _handle_response(self, response: httpx.Response) -> Any:
        final_url = str(response.url)

        if response.history and settings.ACS_LOGIN_PATH in final_url:
            logger.warning("api_session_expired", extra={"url": final_url})
            await self._notify_session_expired()
            raise SessionExpired("Session expired", status_code=response.status_code, url=final_url)

        if response.status_code in (401, 307):
            logger.warning("api_unauthorized", extra={"url": final_url, "code": response.status_code})
            await self._notify_session_expired()
            raise Unauthorized("Unauthorized", status_code=response.status_code, url=final_url)

        content_type = response.headers.get("content-type", "")
        if "json" not in content_type:
            logger.error("api_non_json_response", extra={"url": final_url, "content_type": content_type})
            raise InvalidResponse(
                "Invalid API response",
                status_code=response.status_code,
                url=final_url,
                content_type=content_type,
            )

        return response.json()


_client: Optional[ApiClient] = None
_client_lock = asyncio.Lock()


async def get_api_client() -> ApiClient:
    global _client
    if _client is not None:
        return _client
    async with _client_lock:
        if _client is None:
            _client = ApiClient()
        return _client


async def reset_api_client() -> None:
    global _client
    async with _client_lock:
        if _client is not None:
            await _client.aclose()
        _client = None


__all__ = [
    "ApiClient",
    "ApiError",
    "FormData",
    "InvalidResponse",
    "SessionExpired",
    "SessionExpiredHandler",
    "Unauthorized",
    "get_api_client",
    "log_session_expired",
    "read_csrf_token",
    "reset_api_client",
]
