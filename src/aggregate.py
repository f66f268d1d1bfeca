# src/aggregate.py
"""
Reduce per-probe outcomes to one status.
Pure functions: no I/O, no clock reads.
"""
from __future__ import annotations

from typing import Mapping

from src.schemas import AggregateReport, HealthStatus, ProbeResult


def overall_status(results: Mapping[str, ProbeResult]) -> HealthStatus:
    """
    Quorum over probe count (not weighted):
    - no healthy probe (or no probes at all) -> unhealthy
    - every probe healthy -> healthy
    - anything in between -> degraded
    """
    total = len(results)
    healthy = healthy_count(results)
    if healthy == 0:
        return "unhealthy"
    if healthy == total:
        return "healthy"
    return "degraded"


def healthy_count(results: Mapping[str, ProbeResult]) -> int:
    return sum(1 for r in results.values() if r.status == "healthy")


def aggregate(results: Mapping[str, ProbeResult], *, elapsed_ms: int = 0) -> AggregateReport:
    """Build the report. `elapsed_ms` is the caller's wall-clock time for the whole fan-out."""
    return AggregateReport(
        status=overall_status(results),
        elapsed_ms=elapsed_ms,
        probes=dict(results),
        message=f"{healthy_count(results)}/{len(results)} services healthy",
    )
