import os
import sys
from pathlib import Path
from typing import Callable, List

import httpx
import pytest

# Ensure repository root and the tests helpers are importable
ROOT = Path(__file__).resolve().parents[1]
TESTS = ROOT / "tests"
for p in (str(ROOT), str(TESTS)):
    if p not in sys.path:
        sys.path.insert(0, p)

# Default test environment
os.environ.setdefault("ACS_BASE_URL", "http://testserver")
os.environ.setdefault("LOG_LEVEL", "debug")

from acs_admin.client.api import ApiClient  # noqa: E402
from fake_acs import FakeAcsState, create_fake_acs  # noqa: E402

BASE_URL = "http://acs.test"


class NavRecorder:
    """Session-expired handler that records every login redirect it is asked for."""

    def __init__(self) -> None:
        self.calls: List[str] = []

    def __call__(self, login_url: str) -> None:
        self.calls.append(login_url)


@pytest.fixture
def nav() -> NavRecorder:
    return NavRecorder()


@pytest.fixture
def make_client(nav: NavRecorder) -> Callable[..., ApiClient]:
    """Build an ``ApiClient`` whose transport is a plain request handler."""

    def _make(handler, **kwargs) -> ApiClient:  # type: ignore[no-untyped-def]
        kwargs.setdefault("on_session_expired", nav)
        return ApiClient(base_url=BASE_URL, transport=httpx.MockTransport(handler), **kwargs)

    return _make


@pytest.fixture
def acs_state() -> FakeAcsState:
    return FakeAcsState()


@pytest.fixture
def acs_client(acs_state: FakeAcsState, nav: NavRecorder) -> Callable[[], ApiClient]:
    """Build an ``ApiClient`` wired to the in-process fake backend."""

    app = create_fake_acs(acs_state)

    def _make() -> ApiClient:
        return ApiClient(
            base_url="http://testserver",
            transport=httpx.ASGITransport(app=app),
            on_session_expired=nav,
        )

    return _make
