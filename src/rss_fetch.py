# src/rss_fetch.py
from __future__ import annotations

import time

from src import config
from src.error_codes import FEED_UNAVAILABLE
from src.fallback import AllCandidatesExhausted, FallbackResult, try_with_fallback
from src.http_client import HttpResponse, below_server_error, http_get
from src.logging_utils import log_event
from src.rss_parse import parse_feed
from src.schemas import AttemptRecord, FeedItem


FEED_ACCEPT = "application/rss+xml, application/atom+xml, application/xml, text/xml;q=0.9, */*;q=0.8"


class FeedUnavailable(Exception):
    """Every client identity was blocked or errored for one feed URL."""

    def __init__(self, url: str, cause: AllCandidatesExhausted):
        super().__init__(f"{FEED_UNAVAILABLE}: {url}: {cause.last_error}")
        self.url = url
        self.cause = cause
        self.attempts: tuple[AttemptRecord, ...] = cause.attempts


# Fetch one feed with one client identity - this is the base function without fallback
async def fetch_rss(url: str, *, user_agent: str, timeout_s: float, max_redirects: int) -> HttpResponse:
    """GET a feed URL as `user_agent`. Any status below 500 counts as a response."""
    return await http_get(
        url,
        headers={"User-Agent": user_agent, "Accept": FEED_ACCEPT},
        timeout_s=timeout_s,
        max_redirects=max_redirects,
        acceptable_status=below_server_error,
    )


def is_blocked_response(resp: HttpResponse) -> bool:
    """An HTML page where a feed was expected is an anti-bot wall, not a feed."""
    return "text/html" in resp.content_type


async def fetch_rss_with_fallback(url: str) -> FallbackResult[HttpResponse]:
    """Fetch a feed, rotating through USER_AGENTS when blocked or failing."""

    async def attempt(user_agent: str) -> HttpResponse:
        return await fetch_rss(
            url,
            user_agent=user_agent,
            timeout_s=config.FEED_TIMEOUT_S,
            max_redirects=config.FEED_MAX_REDIRECTS,
        )

    try:
        return await try_with_fallback(
            config.USER_AGENTS,
            attempt,
            inter_attempt_delay_s=config.FEED_RETRY_DELAY_S,
            is_blocked=is_blocked_response,
            label=f"rss:{url}",
        )
    except AllCandidatesExhausted as exc:
        log_event("feed_unavailable", level="error", url=url, attempts=len(exc.attempts), error=str(exc.last_error))
        raise FeedUnavailable(url, exc) from exc


async def fetch_feed_with_attempts(url: str) -> tuple[list[FeedItem], tuple[AttemptRecord, ...]]:
    """Fetch + parse one feed. Returns the normalized items and the attempt log."""
    t0 = time.perf_counter()
    fetched = await fetch_rss_with_fallback(url)
    items = parse_feed(fetched.result.content or fetched.result.text, source_url=url)
    log_event(
        "feed_fetched",
        url=url,
        items=len(items),
        attempts=len(fetched.attempts),
        user_agent=fetched.candidate,
        latency_ms=int((time.perf_counter() - t0) * 1000),
    )
    return items, fetched.attempts


async def fetch_feed(url: str) -> list[FeedItem]:
    """Fetch and parse one RSS/Atom source into FeedItems. Raises FeedUnavailable or RSSParseError."""
    items, _ = await fetch_feed_with_attempts(url)
    return items
