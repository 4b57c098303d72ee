from __future__ import annotations

import logging
from urllib.parse import unquote, urlsplit

from acs_admin.client.api import ApiClient, FormData, read_csrf_token
from acs_admin.core.config import api_path, settings

logger = logging.getLogger(__name__)

LOGIN_FAILED = "Login failed"


class LoginFailed(RuntimeError):
    """Raised when the backend rejects a login attempt."""

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


def _error_from_location(location: str) -> str | None:
    """Return the ``errmsg`` carried by a login redirect, if any."""
    if "errmsg=" not in location:
        return None
    # Everything after the marker is the message; "+" is kept literally
    raw = location.split("errmsg=")[1]
    return unquote(raw) if raw else LOGIN_FAILED


class AuthService:
    """Session management against the backend's form login.

    Login is not routed through the facade: the login endpoint answers with
    redirects, which the facade would treat as session death. Both share
    the same cookie jar, so the session and CSRF cookies set here are used
    by every later facade call.
    """

    def __init__(self, client: ApiClient) -> None:
        self._client = client

    async def login(self, username: str, password: str) -> str:
        """Log in and return the CSRF token issued for the new session."""
        form = FormData({"username": username, "password": password})
        response = await self._client.http.post(
            api_path(settings.ACS_LOGIN_PATH),
            files=form.parts(),
            follow_redirects=False,
        )

        if response.status_code in (301, 302, 303):
            location = response.headers.get("location", "")
            error = _error_from_location(location)
            if error is not None:
                logger.warning("acs_login_rejected", extra={"username": username, "detail": error})
                raise LoginFailed(error, status_code=response.status_code)
            if urlsplit(location).path not in ("", "/"):
                logger.warning("acs_login_unexpected_redirect", extra={"location": location})
                raise LoginFailed(LOGIN_FAILED, status_code=response.status_code)
        elif not response.is_success:
            logger.warning("acs_login_failed", extra={"username": username, "code": response.status_code})
            raise LoginFailed(LOGIN_FAILED, status_code=response.status_code)

        token = read_csrf_token(self._client.cookies)
        logger.info("acs_login_ok", extra={"username": username, "csrf": bool(token)})
        return token

    async def logout(self) -> None:
        await self._client.http.get(api_path(settings.ACS_LOGOUT_PATH), follow_redirects=False)
        self._client.cookies.clear()
        logger.info("acs_logout")
