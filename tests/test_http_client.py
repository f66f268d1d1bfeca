import asyncio
import json

import httpx
import pytest

from src.http_client import TransientHTTPError, below_server_error, http_get, http_post_json
from tests.conftest import use_mock_transport


def test_http_get_returns_body_and_lowercased_headers(monkeypatch):
    def handler(request):
        assert request.headers["User-Agent"] == "pulsepress-test"
        assert request.url.params["q"] == "x"
        return httpx.Response(200, headers={"Content-Type": "application/rss+xml"}, text="<rss/>")

    use_mock_transport(monkeypatch, handler)

    resp = asyncio.run(http_get("https://example.com/feed", headers={"User-Agent": "pulsepress-test"}, params={"q": "x"}))

    assert resp.status_code == 200
    assert resp.text == "<rss/>"
    assert resp.content == b"<rss/>"
    assert resp.content_type == "application/rss+xml"


def test_http_get_non_2xx_raises_with_status(monkeypatch):
    use_mock_transport(monkeypatch, lambda request: httpx.Response(503, text="down"))

    with pytest.raises(TransientHTTPError) as info:
        asyncio.run(http_get("https://example.com/"))

    assert info.value.status_code == 503
    assert "HTTP 503" in str(info.value)
    assert info.value.code == "FETCH_TRANSIENT"


def test_http_get_custom_acceptance_lets_4xx_through(monkeypatch):
    use_mock_transport(monkeypatch, lambda request: httpx.Response(403, text="nope"))

    resp = asyncio.run(http_get("https://example.com/", acceptable_status=below_server_error))

    assert resp.status_code == 403


def test_http_get_timeout_becomes_transient_error(monkeypatch):
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    use_mock_transport(monkeypatch, handler)

    with pytest.raises(TransientHTTPError) as info:
        asyncio.run(http_get("https://example.com/", timeout_s=2.5))

    assert "timeout after 2.5s" in str(info.value)
    assert info.value.code == "FETCH_TIMEOUT"
    assert info.value.status_code is None


def test_http_get_connection_error_becomes_transient_error(monkeypatch):
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    use_mock_transport(monkeypatch, handler)

    with pytest.raises(TransientHTTPError) as info:
        asyncio.run(http_get("https://example.com/"))

    assert "ConnectError" in str(info.value)


def test_http_get_follows_redirects(monkeypatch):
    def handler(request):
        if request.url.path == "/old":
            return httpx.Response(301, headers={"Location": "https://example.com/new"})
        return httpx.Response(200, text="moved here")

    use_mock_transport(monkeypatch, handler)

    resp = asyncio.run(http_get("https://example.com/old"))

    assert resp.text == "moved here"


def test_http_get_too_many_redirects_is_transient(monkeypatch):
    def handler(request):
        return httpx.Response(302, headers={"Location": "https://example.com/loop"})

    use_mock_transport(monkeypatch, handler)

    with pytest.raises(TransientHTTPError):
        asyncio.run(http_get("https://example.com/loop", max_redirects=2))


def test_http_post_json_sends_body(monkeypatch):
    seen = {}

    def handler(request):
        seen["method"] = request.method
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"ok": True})

    use_mock_transport(monkeypatch, handler)

    resp = asyncio.run(http_post_json("https://example.com/api", {"q": "hola"}))

    assert seen == {"method": "POST", "body": {"q": "hola"}}
    assert resp.json() == {"ok": True}
