import pytest

from src.aggregate import aggregate, healthy_count, overall_status
from src.schemas import ProbeResult


def _results(*statuses: str) -> dict[str, ProbeResult]:
    return {f"p{i}": ProbeResult(name=f"p{i}", status=s) for i, s in enumerate(statuses)}


@pytest.mark.parametrize(
    "statuses, expected",
    [
        (("healthy",) * 5, "healthy"),
        (("healthy", "healthy", "healthy", "healthy", "unhealthy"), "degraded"),
        (("healthy", "unhealthy", "unhealthy", "unhealthy", "unhealthy"), "degraded"),
        (("unhealthy",) * 5, "unhealthy"),
        (("healthy", "degraded"), "degraded"),
        (("degraded", "degraded"), "unhealthy"),
        (("degraded", "unhealthy"), "unhealthy"),
        (("healthy",), "healthy"),
    ],
)
def test_overall_status_is_quorum_over_healthy_count(statuses, expected):
    assert overall_status(_results(*statuses)) == expected


def test_empty_probe_set_is_unhealthy():
    report = aggregate({})
    assert report.status == "unhealthy"
    assert report.message == "0/0 services healthy"
    assert report.probes == {}


def test_summary_counts_healthy_over_total():
    report = aggregate(_results("healthy", "healthy", "healthy", "unhealthy", "degraded"), elapsed_ms=42)

    assert report.message == "3/5 services healthy"
    assert report.status == "degraded"
    assert report.elapsed_ms == 42
    assert set(report.probes) == {"p0", "p1", "p2", "p3", "p4"}


def test_aggregate_is_pure():
    results = _results("healthy", "unhealthy")
    first = aggregate(results, elapsed_ms=7)
    second = aggregate(results, elapsed_ms=7)

    assert first == second
    assert healthy_count(results) == 1
    # Inputs untouched
    assert [r.status for r in results.values()] == ["healthy", "unhealthy"]
