# src/http_client.py
"""Thin async HTTP layer over httpx. Every call carries an explicit timeout."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Callable

import httpx

from src.error_codes import FETCH_TIMEOUT, FETCH_TRANSIENT


class TransientHTTPError(Exception):
    """Network error, timeout, or a status the caller does not accept."""

    def __init__(self, message: str, *, status_code: int | None = None, code: str = FETCH_TRANSIENT):
        super().__init__(message)
        self.status_code = status_code
        self.code = code


@dataclass(frozen=True)
class HttpResponse:
    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    text: str = ""
    content: bytes = b""

    @property
    def content_type(self) -> str:
        return self.headers.get("content-type", "").lower()

    def json(self) -> Any:
        return json.loads(self.text)


def is_2xx(status: int) -> bool:
    return 200 <= status < 300


def below_server_error(status: int) -> bool:
    return status < 500


async def http_get(
    url: str,
    *,
    headers: dict[str, str] | None = None,
    params: dict[str, Any] | None = None,
    timeout_s: float = 10.0,
    max_redirects: int = 5,
    acceptable_status: Callable[[int], bool] = is_2xx,
) -> HttpResponse:
    """GET a URL and return the response. Raises TransientHTTPError on any failure."""
    return await _request(
        "GET",
        url,
        headers=headers,
        params=params,
        timeout_s=timeout_s,
        max_redirects=max_redirects,
        acceptable_status=acceptable_status,
    )


async def http_post_json(
    url: str,
    payload: Any,
    *,
    headers: dict[str, str] | None = None,
    params: dict[str, Any] | None = None,
    timeout_s: float = 10.0,
) -> HttpResponse:
    """POST a JSON body. Raises TransientHTTPError on any failure or non-2xx status."""
    return await _request(
        "POST",
        url,
        headers=headers,
        params=params,
        json_body=payload,
        timeout_s=timeout_s,
        max_redirects=5,
        acceptable_status=is_2xx,
    )


async def _request(
    method: str,
    url: str,
    *,
    headers: dict[str, str] | None,
    params: dict[str, Any] | None,
    timeout_s: float,
    max_redirects: int,
    acceptable_status: Callable[[int], bool],
    json_body: Any = None,
) -> HttpResponse:
    try:
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_s),
            follow_redirects=True,
            max_redirects=max_redirects,
        ) as client:
            resp = await client.request(method, url, headers=headers, params=params, json=json_body)
    # TimeoutException is a RequestError subclass, so it has to be caught first
    except httpx.TimeoutException as exc:
        raise TransientHTTPError(f"timeout after {timeout_s}s", code=FETCH_TIMEOUT) from exc
    except httpx.RequestError as exc:
        raise TransientHTTPError(f"request error: {type(exc).__name__}: {exc}") from exc

    if not acceptable_status(resp.status_code):
        raise TransientHTTPError(f"HTTP {resp.status_code}", status_code=resp.status_code)

    return HttpResponse(
        status_code=resp.status_code,
        headers={k.lower(): v for k, v in resp.headers.items()},
        text=resp.text,
        content=resp.content,
    )
