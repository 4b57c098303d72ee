from __future__ import annotations

import asyncio
import json
from typing import List

import httpx
import pytest

from acs_admin.client.api import (
    FormData,
    InvalidResponse,
    SessionExpired,
    Unauthorized,
    read_csrf_token,
)
from acs_admin.core.config import settings


def test_get_returns_parsed_body_without_navigation(make_client, nav) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"code": 0, "msg": "ok", "data": {"n": 1}})

    async def run():
        async with make_client(handler) as client:
            return await client.get("/admin/overview/data")

    body = asyncio.run(run())
    assert body == {"code": 0, "msg": "ok", "data": {"n": 1}}
    assert nav.calls == []


def test_post_and_post_form_resolve_with_body(make_client, nav) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"code": 0, "msg": "Reboot command sent"})

    async def run():
        async with make_client(handler) as client:
            first = await client.post("/admin/cpe/update", {"id": "1", "remark": "lab"})
            second = await client.post_form("/admin/supervise/reboot", {"devid": "1"})
            return first, second

    first, second = asyncio.run(run())
    assert first["code"] == 0
    assert second["msg"] == "Reboot command sent"
    assert nav.calls == []


def test_unauthorized_status_navigates_once(make_client, nav) -> None:
    seen: List[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(401, json={"code": 401, "msg": "unauthenticated"})

    async def run():
        async with make_client(handler) as client:
            await client.get("/admin/cpe/query?start=0&count=20")

    with pytest.raises(Unauthorized) as excinfo:
        asyncio.run(run())

    assert "unauthorized" in str(excinfo.value).lower()
    assert excinfo.value.status_code == 401
    assert nav.calls == ["/reactui/login"]
    assert seen == ["http://acs.test/admin/cpe/query?start=0&count=20"]


def test_temporary_redirect_status_is_unauthorized(make_client, nav) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        # no Location header, so the transport cannot follow it
        return httpx.Response(307, text="")

    async def run():
        async with make_client(handler) as client:
            await client.post_form("/admin/supervise/reboot", {"devid": "1"})

    with pytest.raises(Unauthorized):
        asyncio.run(run())
    assert nav.calls == ["/reactui/login"]


def test_redirect_to_login_is_session_expired_even_on_200(make_client, nav) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/login":
            return httpx.Response(200, json={"code": 0, "msg": "login page"})
        return httpx.Response(302, headers={"location": "/login"})

    async def run():
        async with make_client(handler) as client:
            await client.get("/admin/cpe/get?id=1")

    with pytest.raises(SessionExpired) as excinfo:
        asyncio.run(run())

    assert str(excinfo.value) == "Session expired"
    assert excinfo.value.status_code == 200
    assert excinfo.value.url == "http://acs.test/login"
    assert nav.calls == ["/reactui/login"]


def test_redirect_elsewhere_is_not_session_death(make_client, nav) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/admin/cpe/query":
            return httpx.Response(200, json={"total_count": 0, "pos": 0, "data": []})
        return httpx.Response(301, headers={"location": "/admin/cpe/query"})

    async def run():
        async with make_client(handler) as client:
            return await client.get("/admin/cpe/list")

    body = asyncio.run(run())
    assert body["total_count"] == 0
    assert nav.calls == []


def test_html_response_is_invalid_without_navigation(make_client, nav) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, html="<html>proxy error</html>")

    async def run():
        async with make_client(handler) as client:
            await client.get("/admin/sysstatus/data")

    with pytest.raises(InvalidResponse) as excinfo:
        asyncio.run(run())

    assert str(excinfo.value) == "Invalid API response"
    assert excinfo.value.content_type.startswith("text/html")
    assert nav.calls == []


def test_post_form_sends_multipart_fields(make_client) -> None:
    captured: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json={"code": 0, "msg": "ok"})

    async def run():
        async with make_client(handler, cookies={"csrf_token": "tok"}) as client:
            await client.post_form("/admin/settings/update", {"a": "1", "b": "2"})

    asyncio.run(run())
    request = captured[0]
    body = request.content
    assert request.headers["content-type"].startswith("multipart/form-data; boundary=")
    assert b'name="a"\r\n\r\n1\r\n' in body
    assert b'name="b"\r\n\r\n2\r\n' in body
    assert body.count(b"Content-Disposition") == 2
    assert b"filename" not in body
    assert request.headers["X-CSRF-Token"] == "tok"


def test_empty_form_is_still_multipart(make_client) -> None:
    captured: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json={"code": 0, "msg": "ok"})

    async def run():
        async with make_client(handler, cookies={"csrf_token": "tok"}) as client:
            await client.post_form("/admin/olt/delete", {})
            await client.post("/admin/olt/delete", FormData(), headers={"Content-Type": "text/plain"})

    asyncio.run(run())
    for request in captured:
        content_type = request.headers["content-type"]
        assert content_type.startswith("multipart/form-data; boundary=")
        boundary = content_type.split("boundary=", 1)[1]
        assert request.content == f"--{boundary}--\r\n".encode()
        assert request.headers["X-CSRF-Token"] == "tok"


def test_post_mapping_is_json(make_client) -> None:
    captured: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json={"code": 0, "msg": "OLT added"})

    async def run():
        async with make_client(handler) as client:
            await client.post("/admin/olt/add", {"name": "olt-1", "snmp_port": 161})

    asyncio.run(run())
    request = captured[0]
    assert request.headers["content-type"] == "application/json"
    assert json.loads(request.content) == {"name": "olt-1", "snmp_port": 161}


def test_post_prebuilt_form_keeps_transport_content_type(make_client) -> None:
    captured: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json={"code": 0, "msg": "Logo uploaded successfully"})

    form = FormData({"note": "x"})
    form.append_file("logo", "logo.png", b"\x89PNG", "image/png")

    async def run():
        async with make_client(handler) as client:
            await client.post("/admin/settings/logo/upload", form, headers={"Content-Type": "application/json"})

    asyncio.run(run())
    request = captured[0]
    assert request.headers["content-type"].startswith("multipart/form-data; boundary=")
    assert b'filename="logo.png"' in request.content
    assert b"\x89PNG" in request.content


def test_post_without_body_sends_no_content_type(make_client) -> None:
    captured: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json={"code": 0, "msg": "ok"})

    async def run():
        async with make_client(handler) as client:
            await client.post("/admin/olt/delete")

    asyncio.run(run())
    assert "content-type" not in captured[0].headers
    assert captured[0].content == b""


def test_repeated_get_is_structurally_identical(make_client) -> None:
    calls: List[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url.path)
        return httpx.Response(200, json={"code": 0, "msg": "ok", "data": [1, 2, 3]})

    async def run():
        async with make_client(handler, cookies={"csrf_token": "tok"}) as client:
            return await client.get("/admin/overview/data"), await client.get("/admin/overview/data")

    first, second = asyncio.run(run())
    assert first == second
    assert first is not second
    assert len(calls) == 2


def test_list_response_is_returned_as_is(make_client) -> None:
    payload = {
        "total_count": 42,
        "pos": 0,
        "data": [{"id": 1, "sn": "ABC123", "model": "HG8145V5"}],
    }
    seen: List[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, json=payload)

    async def run():
        async with make_client(handler) as client:
            return await client.get("/admin/cpe/query?start=0&count=20")

    body = asyncio.run(run())
    assert body["total_count"] == 42
    assert body["data"][0]["sn"] == "ABC123"
    assert seen == ["http://acs.test/admin/cpe/query?start=0&count=20"]


def test_csrf_cookie_is_reread_on_every_call(make_client) -> None:
    tokens: List[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        tokens.append(request.headers["X-CSRF-Token"])
        return httpx.Response(200, json={"code": 0, "msg": "ok"})

    async def run():
        async with make_client(handler) as client:
            await client.get("/admin/overview/data")
            client.cookies.set("csrf_token", "first")
            await client.post_form("/admin/supervise/reboot", {"devid": "1"})
            client.cookies.set("csrf_token", "second")
            await client.post_form("/admin/supervise/reboot", {"devid": "1"})

    asyncio.run(run())
    assert tokens == ["", "first", "second"]


def test_caller_header_cannot_override_csrf(make_client) -> None:
    captured: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json={"code": 0, "msg": "ok"})

    async def run():
        async with make_client(handler, cookies={"csrf_token": "from-cookie"}) as client:
            await client.post(
                "/admin/cpe/update",
                {"id": "1"},
                headers={"x-csrf-token": "forged", "Content-Type": "text/plain", "X-Trace": "t-1"},
            )

    asyncio.run(run())
    headers = captured[0].headers
    assert headers.get_list("X-CSRF-Token") == ["from-cookie"]
    assert headers["content-type"] == "application/json"
    assert headers["X-Trace"] == "t-1"


def test_transport_error_propagates_untouched(make_client, nav) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async def run():
        async with make_client(handler) as client:
            await client.get("/admin/sysstatus/data")

    with pytest.raises(httpx.ConnectError):
        asyncio.run(run())
    assert nav.calls == []


def test_async_session_handler_is_awaited(make_client) -> None:
    visited: List[str] = []

    async def go_to_login(url: str) -> None:
        await asyncio.sleep(0)
        visited.append(url)

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"code": 401, "msg": "unauthenticated"})

    async def run():
        async with make_client(handler, on_session_expired=go_to_login) as client:
            await client.get("/admin/cpe/query")

    with pytest.raises(Unauthorized):
        asyncio.run(run())
    assert visited == ["/reactui/login"]


def test_concurrent_calls_are_independent(make_client, nav) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/admin/cpe/params":
            return httpx.Response(401, json={"code": 401, "msg": "unauthenticated"})
        return httpx.Response(200, json={"path": request.url.path})

    async def run():
        async with make_client(handler) as client:
            return await asyncio.gather(
                client.get("/admin/cpe/get?id=1"),
                client.get("/admin/cpe/params?sn=ABC123"),
                client.get("/admin/settings/configlist"),
                return_exceptions=True,
            )

    device, params, config = asyncio.run(run())
    assert device == {"path": "/admin/cpe/get"}
    assert isinstance(params, Unauthorized)
    assert config == {"path": "/admin/settings/configlist"}
    assert nav.calls == ["/reactui/login"]


def test_api_prefix_is_prepended(make_client, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "ACS_API_PREFIX", "/acs")
    seen: List[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        return httpx.Response(200, json={"code": 0, "msg": "ok"})

    async def run():
        async with make_client(handler) as client:
            await client.get("/admin/overview/data")

    asyncio.run(run())
    assert seen == ["/acs/admin/overview/data"]


def test_read_csrf_token_missing_cookie_is_empty() -> None:
    cookies = httpx.Cookies()
    assert read_csrf_token(cookies) == ""
    cookies.set("csrf_token", "abc")
    assert read_csrf_token(cookies) == "abc"


def test_form_data_reports_plain_fields() -> None:
    form = FormData({"ctype": "system", "SystemTitle": "ACS"})
    form.append_file("logo", "logo.svg", b"<svg/>")
    assert form.fields() == [("ctype", "system"), ("SystemTitle", "ACS")]
    assert len(form) == 3
