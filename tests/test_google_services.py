import asyncio
import json

import httpx
import pytest

from src.clients.google_services import GoogleServiceError, check_oauth_handshake, translate
from src.http_client import TransientHTTPError
from tests.conftest import use_mock_transport


@pytest.fixture
def google_creds(monkeypatch):
    monkeypatch.setattr("src.config.GOOGLE_CLIENT_ID", "client-id")
    monkeypatch.setattr("src.config.GOOGLE_CLIENT_SECRET", "client-secret")
    monkeypatch.setattr("src.config.GOOGLE_TRANSLATE_API_KEY", "translate-key")


def test_oauth_without_credentials_fails_before_any_request(monkeypatch):
    monkeypatch.setattr("src.config.GOOGLE_CLIENT_ID", None)
    monkeypatch.setattr("src.config.GOOGLE_CLIENT_SECRET", "client-secret")

    def handler(request):
        raise AssertionError("no request expected")

    use_mock_transport(monkeypatch, handler)

    with pytest.raises(GoogleServiceError, match="not configured"):
        asyncio.run(check_oauth_handshake())


def test_oauth_discovery_document_ok(monkeypatch, google_creds):
    def handler(request):
        assert request.url.path == "/.well-known/openid-configuration"
        return httpx.Response(200, json={"authorization_endpoint": "https://accounts.google.com/o/oauth2/v2/auth"})

    use_mock_transport(monkeypatch, handler)

    out = asyncio.run(check_oauth_handshake())

    assert out == {"authorization_endpoint": "https://accounts.google.com/o/oauth2/v2/auth"}


def test_oauth_discovery_document_wrong_shape(monkeypatch, google_creds):
    use_mock_transport(monkeypatch, lambda request: httpx.Response(200, json={"issuer": "https://accounts.google.com"}))

    with pytest.raises(GoogleServiceError, match="authorization_endpoint"):
        asyncio.run(check_oauth_handshake())


def test_oauth_discovery_unreachable(monkeypatch, google_creds):
    use_mock_transport(monkeypatch, lambda request: httpx.Response(503))

    with pytest.raises(TransientHTTPError):
        asyncio.run(check_oauth_handshake())


def test_translate_sends_key_as_query_param(monkeypatch, google_creds):
    seen = {}

    def handler(request):
        seen["key"] = request.url.params["key"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"data": {"translations": [{"translatedText": "prueba"}]}})

    use_mock_transport(monkeypatch, handler)

    out = asyncio.run(translate("test", target="es"))

    assert out == "prueba"
    assert seen["key"] == "translate-key"
    assert seen["body"] == {"q": "test", "target": "es", "format": "text"}


def test_translate_without_key(monkeypatch):
    monkeypatch.setattr("src.config.GOOGLE_TRANSLATE_API_KEY", None)

    with pytest.raises(GoogleServiceError, match="not configured"):
        asyncio.run(translate("test", target="es"))


def test_translate_unexpected_shape(monkeypatch, google_creds):
    use_mock_transport(monkeypatch, lambda request: httpx.Response(200, json={"data": {"translations": []}}))

    with pytest.raises(GoogleServiceError, match="unexpected Translate response shape"):
        asyncio.run(translate("test", target="es"))
