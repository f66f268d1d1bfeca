# src/health.py
"""
Probe set: run named probes concurrently, each isolated from the others.

run_probe never raises. A probe that throws, times out, or returns something
other than a ProbeResult is reported as unhealthy and its siblings carry on.
"""
from __future__ import annotations

import asyncio
import functools
import time
from typing import Awaitable, Callable, Mapping

from src import config, probes
from src.aggregate import aggregate
from src.error_codes import AGGREGATION_INPUT_ERROR, PROBE_EXCEPTION, PROBE_TIMEOUT
from src.logging_utils import log_event
from src.schemas import AggregateReport, ProbeError, ProbeResult


Probe = Callable[[], Awaitable[ProbeResult]]


def default_probes() -> dict[str, Probe]:
    """The five subsystems behind the overall report. Looked up at call time."""
    return {
        "database": probes.check_database,
        "newsApi": probes.check_news_api,
        "rssFeeds": probes.check_rss_feeds,
        "googleServices": probes.check_google_services,
        "generativeAI": probes.check_generative_ai,
    }


def single_probes() -> dict[str, Probe]:
    """Route slug -> probe, for checking one subsystem at a time."""
    return {
        "database": probes.check_database,
        "news": probes.check_news_api,
        "guardian": probes.check_guardian_api,
        "nytimes": probes.check_nytimes_api,
        "rss": probes.check_rss_feeds,
        "google-service": probes.check_google_services,
        "generative-ai": probes.check_generative_ai,
    }


def ai_probes() -> dict[str, Probe]:
    """Route slug -> AI feature probe: one per configured service plus the composite checks."""
    out: dict[str, Probe] = {slug: functools.partial(probes.check_ai_service, slug) for slug in config.AI_SERVICES}
    out["question-answer"] = probes.check_ai_question_answer
    out["news-classification"] = probes.check_ai_news_classification
    return out


def _failed(name: str, t0: float, message: str, code: str) -> ProbeResult:
    return ProbeResult(
        name=name,
        status="unhealthy",
        elapsed_ms=int((time.perf_counter() - t0) * 1000),
        error=ProbeError(message=message, code=code),
    )


async def run_probe(name: str, probe: Probe, *, timeout_s: float | None = None) -> ProbeResult:
    """Run one probe with fault isolation and a hard time limit."""
    limit = config.PROBE_TIMEOUT_S if timeout_s is None else timeout_s
    t0 = time.perf_counter()

    try:
        result = await asyncio.wait_for(probe(), timeout=limit)
    except asyncio.TimeoutError:
        log_event("probe_timeout", level="error", probe=name, timeout_s=limit)
        return _failed(name, t0, f"probe timed out after {limit}s", PROBE_TIMEOUT)
    except Exception as exc:
        log_event("probe_crashed", level="error", probe=name, error_type=type(exc).__name__, error=str(exc))
        return _failed(name, t0, str(exc) or type(exc).__name__, PROBE_EXCEPTION)

    if not isinstance(result, ProbeResult):
        log_event("probe_bad_result", level="error", probe=name, result_type=type(result).__name__)
        return _failed(
            name, t0, f"probe returned {type(result).__name__}, expected ProbeResult", AGGREGATION_INPUT_ERROR
        )

    if result.name != name:
        result = result.model_copy(update={"name": name})

    log_event("probe_finished", probe=name, status=result.status, elapsed_ms=result.elapsed_ms)
    return result


async def run_probe_set(probe_set: Mapping[str, Probe]) -> dict[str, ProbeResult]:
    """Launch every probe at once and wait for all of them to settle."""
    names = list(probe_set)
    results = await asyncio.gather(*(run_probe(n, probe_set[n]) for n in names))
    return dict(zip(names, results))


async def check_overall_health(probe_set: Mapping[str, Probe] | None = None) -> AggregateReport:
    """Fan out over the probe set and reduce to one AggregateReport."""
    probe_set = default_probes() if probe_set is None else probe_set
    t0 = time.perf_counter()

    try:
        results = await run_probe_set(probe_set)
    except Exception as exc:
        log_event("health_check_failed", level="error", error_type=type(exc).__name__, error=str(exc))
        return AggregateReport(
            status="unhealthy",
            elapsed_ms=int((time.perf_counter() - t0) * 1000),
            probes={},
            message=f"Health check failed: {exc}",
        )

    report = aggregate(results, elapsed_ms=int((time.perf_counter() - t0) * 1000))
    log_event("health_summary", status=report.status, summary=report.message, elapsed_ms=report.elapsed_ms)
    return report
