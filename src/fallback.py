# src/fallback.py
"""
Ordered fallback execution.

Tries one operation against a ranked list of candidates (client identities,
model names, ...) until one works. Candidates are attempted strictly in order
and never concurrently; each is tried at most once per call.
"""
from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, Sequence, TypeVar

from src.error_codes import ALL_CANDIDATES_EXHAUSTED, FETCH_BLOCKED
from src.logging_utils import log_event
from src.schemas import AttemptRecord


C = TypeVar("C")
R = TypeVar("R")


class BlockedResponse(Exception):
    """The operation returned, but the result is a disguised failure (e.g. an anti-bot page)."""

    code = FETCH_BLOCKED


class AllCandidatesExhausted(Exception):
    """Every candidate failed. Carries the last error and the full attempt log."""

    def __init__(self, message: str, *, last_error: BaseException | None, attempts: Sequence[AttemptRecord]):
        super().__init__(message)
        self.last_error = last_error
        self.code = ALL_CANDIDATES_EXHAUSTED
        self.attempts = tuple(attempts)


@dataclass(frozen=True)
class FallbackResult(Generic[R]):
    result: R
    candidate: str
    attempts: tuple[AttemptRecord, ...]


async def try_with_fallback(
    candidates: Sequence[C],
    operation: Callable[[C], Awaitable[R]],
    *,
    inter_attempt_delay_s: float = 0.0,
    is_blocked: Callable[[R], bool] | None = None,
    label: str = "fallback",
) -> FallbackResult[R]:
    """
    Run `operation` for each candidate in order until one succeeds.

    A candidate fails when the operation raises, or when `is_blocked(result)`
    is true. After a failure we wait `inter_attempt_delay_s` before the next
    candidate (never after the last one).

    Returns:
        FallbackResult with the winning result and every attempt made.

    Raises:
        ValueError: no candidates were given.
        AllCandidatesExhausted: every candidate failed.
    """
    if not candidates:
        raise ValueError(f"{label}: at least one candidate is required")

    attempts: list[AttemptRecord] = []
    last_error: BaseException | None = None

    for i, candidate in enumerate(candidates):
        t0 = time.perf_counter()
        try:
            result = await operation(candidate)
            if is_blocked is not None and is_blocked(result):
                raise BlockedResponse(f"blocked response for candidate {candidate!r}")
        except Exception as exc:
            last_error = exc
            attempts.append(
                AttemptRecord(
                    candidate=str(candidate),
                    outcome="failure",
                    elapsed_ms=_elapsed_ms(t0),
                    error=f"{type(exc).__name__}: {exc}",
                )
            )
            log_event(
                "fallback_attempt_failed",
                level="warning",
                label=label,
                candidate=str(candidate),
                attempt=i + 1,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            if i < len(candidates) - 1 and inter_attempt_delay_s > 0:
                await asyncio.sleep(inter_attempt_delay_s)
            continue

        attempts.append(
            AttemptRecord(candidate=str(candidate), outcome="success", elapsed_ms=_elapsed_ms(t0))
        )
        log_event("fallback_attempt_ok", label=label, candidate=str(candidate), attempt=i + 1)
        return FallbackResult(result=result, candidate=str(candidate), attempts=tuple(attempts))

    log_event("fallback_exhausted", level="error", label=label, total_attempts=len(attempts))
    raise AllCandidatesExhausted(
        f"{label}: all {len(candidates)} candidates failed",
        last_error=last_error,
        attempts=attempts,
    )


def _elapsed_ms(t0: float) -> int:
    """Calculate elapsed milliseconds since t0."""
    return int((time.perf_counter() - t0) * 1000)
