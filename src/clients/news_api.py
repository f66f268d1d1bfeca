# src/clients/news_api.py
"""Minimal provider requests used for liveness checks (one result each)."""
from __future__ import annotations

from typing import Any

from src import config
from src.http_client import http_get


def build_header(api_type: str = "newsapi") -> dict[str, str]:
    headers = {
        "Content-Type": "application/json",
        "User-Agent": "PulsePress/1.0",
    }
    # Guardian and NYTimes take their keys as query params, not headers
    if api_type == "newsapi" and config.NEWS_API_KEY:
        headers["X-Api-Key"] = config.NEWS_API_KEY
    return headers


async def fetch_top_headlines(*, country: str = "us", page_size: int = 1) -> dict[str, Any]:
    resp = await http_get(
        f"{config.NEWS_API_BASE_URL}/top-headlines",
        headers=build_header("newsapi"),
        params={"country": country, "pageSize": page_size},
        timeout_s=config.NEWS_API_TIMEOUT_S,
    )
    return resp.json()


async def search_guardian(q: str = "test", *, page_size: int = 1) -> dict[str, Any]:
    resp = await http_get(
        f"{config.GUARDIAN_BASE_URL}/search",
        headers=build_header("guardian"),
        params={"q": q, "page-size": page_size, "api-key": config.GUARDIAN_API_KEY or ""},
        timeout_s=config.NEWS_API_TIMEOUT_S,
    )
    return resp.json()


async def search_nytimes(q: str = "test") -> dict[str, Any]:
    resp = await http_get(
        f"{config.NYTIMES_BASE_URL}/search/v2/articlesearch.json",
        headers=build_header("nytimes"),
        params={"q": q, "api-key": config.NYTIMES_API_KEY or ""},
        timeout_s=config.NEWS_API_TIMEOUT_S,
    )
    return resp.json()
