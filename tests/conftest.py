# tests/conftest.py
from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def _isolate_db(tmp_path, monkeypatch):
    monkeypatch.setenv("NEWS_DB_PATH", str(tmp_path / "test.db"))
    yield
    from src.db import close_db
    close_db()


@pytest.fixture(autouse=True)
def _no_retry_delay(monkeypatch):
    """Identity rotation waits between attempts; tests should not."""
    monkeypatch.setattr("src.config.FEED_RETRY_DELAY_S", 0.0)


def make_probe(name: str, status: str = "healthy", **fields):
    """Build a nullary async probe that returns a fixed ProbeResult."""
    from src.schemas import ProbeResult

    async def probe():
        return ProbeResult(name=name, status=status, **fields)

    return probe


def use_mock_transport(monkeypatch, handler):
    """Route every AsyncClient src.http_client builds through an httpx.MockTransport."""
    import httpx

    real_client = httpx.AsyncClient

    def factory(**kwargs):
        return real_client(transport=httpx.MockTransport(handler), **kwargs)

    monkeypatch.setattr("src.http_client.httpx.AsyncClient", factory)
