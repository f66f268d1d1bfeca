# src/rss_parse.py
from __future__ import annotations

import html
import re
from datetime import datetime, timezone
from urllib.parse import urlparse

import feedparser

from src.error_codes import PARSE_ERROR
from src.schemas import FeedItem


class RSSParseError(ValueError):
    """Raised when a feed body cannot be read as RSS/Atom at all (maps to PARSE_ERROR)."""


_NEWLINES = re.compile(r"\s*[\r\n]+\s*")
_TAGS = re.compile(r"<[^>]+>")
_SPACES = re.compile(r"\s+")


def clean_text(value: str | None) -> str | None:
    """Trim and replace embedded newlines with single spaces. Empty -> None."""
    if value is None:
        return None
    text = _NEWLINES.sub(" ", value).strip()
    return text if text else None


def strip_markup(value: str | None) -> str | None:
    """Plain-text snippet of an HTML fragment."""
    if value is None:
        return None
    text = html.unescape(_TAGS.sub(" ", value))
    text = _SPACES.sub(" ", text).strip()
    return text if text else None


def parse_feed(body: str | bytes, *, source_url: str | None = None) -> list[FeedItem]:
    """
    Convert an RSS/Atom document into FeedItem objects.

    Rules:
    - link required, entries without one are skipped
    - text fields trimmed, embedded newlines collapsed
    - published (else updated) date -> UTC datetime, None if missing/unparseable
    - categories copied in order after cleanup
    - Preserve order
    - source name is the feed title, else the host of `source_url`
    - Unreadable body (no feed title, no entries) -> raise RSSParseError
    """
    # bytes so feedparser never mistakes the body for a path or URL
    if isinstance(body, str):
        body = body.encode("utf-8")
    parsed = feedparser.parse(body)

    feed_title = parsed.feed.get("title") if parsed.feed else None
    if parsed.bozo and not parsed.entries and not feed_title:
        raise RSSParseError(f"{PARSE_ERROR}: {parsed.get('bozo_exception', 'unreadable feed')}")

    source_name = clean_text(feed_title) or _host(source_url)
    out: list[FeedItem] = []

    for entry in parsed.entries:
        link = clean_text(entry.get("link"))
        if link is None:
            continue

        summary = entry.get("summary")
        content = _entry_content(entry) or summary

        out.append(
            FeedItem(
                source_name=source_name,
                creator=clean_text(entry.get("author")),
                title=clean_text(entry.get("title")),
                url=link,
                published_at=_entry_published_at(entry),
                content=clean_text(content),
                excerpt=clean_text(strip_markup(summary)),
                categories=_entry_categories(entry),
            )
        )

    return out


def _host(url: str | None) -> str | None:
    if not url:
        return None
    return urlparse(url).hostname


def _entry_content(entry) -> str | None:
    blocks = entry.get("content") or []
    for block in blocks:
        value = block.get("value")
        if value:
            return value
    return None


def _entry_published_at(entry) -> datetime | None:
    struct = entry.get("published_parsed") or entry.get("updated_parsed")
    if not struct:
        return None
    try:
        return datetime(*struct[:6], tzinfo=timezone.utc)
    except (TypeError, ValueError):
        return None


def _entry_categories(entry) -> list[str]:
    out: list[str] = []
    for tag in entry.get("tags") or []:
        term = clean_text(tag.get("term"))
        if term:
            out.append(term)
    return out
