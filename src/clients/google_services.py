# src/clients/google_services.py
"""Google OAuth handshake check and Translate v2 call, each a single testable request."""
from __future__ import annotations

from src import config
from src.http_client import http_post_json, http_get


class GoogleServiceError(Exception):
    """Google responded, but not with what the check expects (or it is not configured)."""


async def check_oauth_handshake() -> dict:
    """Confirm OAuth client credentials exist and the provider discovery document is reachable."""
    if not (config.GOOGLE_CLIENT_ID and config.GOOGLE_CLIENT_SECRET):
        raise GoogleServiceError("Google OAuth client id/secret not configured")

    resp = await http_get(config.GOOGLE_DISCOVERY_URL, timeout_s=config.GOOGLE_TIMEOUT_S)
    doc = resp.json()
    if not isinstance(doc, dict) or "authorization_endpoint" not in doc:
        raise GoogleServiceError("OAuth discovery document has no authorization_endpoint")
    return {"authorization_endpoint": doc["authorization_endpoint"]}


async def translate(text: str, *, target: str) -> str:
    """Translate `text` into `target` and return the translated string."""
    if not config.GOOGLE_TRANSLATE_API_KEY:
        raise GoogleServiceError("Google Translate API key not configured")

    resp = await http_post_json(
        config.GOOGLE_TRANSLATE_URL,
        {"q": text, "target": target, "format": "text"},
        params={"key": config.GOOGLE_TRANSLATE_API_KEY},
        timeout_s=config.GOOGLE_TIMEOUT_S,
    )
    body = resp.json()
    try:
        return body["data"]["translations"][0]["translatedText"]
    except (KeyError, IndexError, TypeError) as exc:
        raise GoogleServiceError("unexpected Translate response shape") from exc
