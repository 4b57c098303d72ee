"""Utilities for verifying that the ACS admin backend is usable.

This module provides async probes for backend reachability, session
validity and CSRF cookie presence.  The probes return structured results
that can be printed by diagnostics scripts so operators can quickly tell a
wrong base URL from an expired session before running automation jobs.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Awaitable, Callable, Iterable, List, Literal

import httpx

from acs_admin.client.api import ApiClient, InvalidResponse, SessionExpired, Unauthorized, read_csrf_token
from acs_admin.core.config import settings
from acs_admin.services.cpe_service import CpeService
from acs_admin.services.dashboard_service import DashboardService


CheckStatus = Literal["ok", "failed", "skipped"]


@dataclass(slots=True)
class BackendCheckResult:
    """Represents the outcome of one backend probe."""

    name: str
    status: CheckStatus
    detail: str

    def as_dict(self) -> dict[str, Any]:
        """Return a JSON-serialisable representation of the result."""

        return asdict(self)


def _skip(name: str, reason: str) -> BackendCheckResult:
    return BackendCheckResult(name=name, status="skipped", detail=reason)


def _failure(name: str, reason: str) -> BackendCheckResult:
    return BackendCheckResult(name=name, status="failed", detail=reason)


def _success(name: str, detail: str) -> BackendCheckResult:
    return BackendCheckResult(name=name, status="ok", detail=detail)


async def check_system_status(client: ApiClient) -> BackendCheckResult:
    """Fetch the ACS host status to prove the backend answers JSON."""

    try:
        info = await DashboardService(client).system_status()
    except (SessionExpired, Unauthorized):
        return _failure("backend", "login required")
    except InvalidResponse as exc:
        return _failure("backend", f"non-JSON response ({exc.content_type or 'no content-type'})")
    except httpx.RequestError as exc:
        return _failure("backend", f"unreachable: {exc.__class__.__name__}")
    return _success("backend", f"{info.hostname or 'unknown host'} up {info.uptime}s")


async def check_session(client: ApiClient) -> BackendCheckResult:
    """List a single CPE to confirm the session is authorised."""

    try:
        page = await CpeService(client).query(start=0, count=1)
    except (SessionExpired, Unauthorized):
        return _failure("session", "not authenticated")
    except InvalidResponse as exc:
        return _failure("session", f"non-JSON response ({exc.content_type or 'no content-type'})")
    except httpx.RequestError as exc:
        return _failure("session", f"unreachable: {exc.__class__.__name__}")
    return _success("session", f"{page.total_count} CPE visible")


async def check_csrf_cookie(client: ApiClient) -> BackendCheckResult:
    """Report whether the anti-forgery cookie is present in the jar."""

    if not client.cookies:
        return _skip("csrf", "no cookies; log in first")
    if not read_csrf_token(client.cookies):
        return _failure("csrf", f"{settings.CSRF_COOKIE_NAME} cookie missing")
    return _success("csrf", f"{settings.CSRF_COOKIE_NAME} present")


async def run_backend_checks(client: ApiClient) -> List[BackendCheckResult]:
    """Run all backend probes sequentially and collect results."""

    checks: Iterable[Callable[[ApiClient], Awaitable[BackendCheckResult]]] = (
        check_system_status,
        check_session,
        check_csrf_cookie,
    )
    results: List[BackendCheckResult] = []
    for check in checks:
        results.append(await check(client))
    return results


__all__ = [
    "CheckStatus",
    "BackendCheckResult",
    "check_system_status",
    "check_session",
    "check_csrf_cookie",
    "run_backend_checks",
]
