from __future__ import annotations

import time
from typing import Sequence

from src import config
from src.error_codes import LLM_API_FAIL, LLM_DISABLED, NO_WORKING_MODEL
from src.fallback import AllCandidatesExhausted, try_with_fallback
from src.http_client import TransientHTTPError, http_post_json
from src.logging_utils import log_event
from src.schemas import ModelCheckResult


class LLMError(Exception):
    """Raised when a chat completion cannot be produced. `code` is an error_codes value."""

    def __init__(self, message: str, *, code: str = LLM_API_FAIL):
        super().__init__(message)
        self.code = code


class NoWorkingModel(Exception):
    """Every model in a ranked list failed the test prompt."""

    def __init__(self, service_name: str, cause: AllCandidatesExhausted):
        if cause.attempts:
            message = f"All {len(cause.attempts)} models failed for {service_name}"
        else:
            message = f"No models configured for {service_name}"
        super().__init__(message)
        self.code = NO_WORKING_MODEL
        self.service_name = service_name
        self.cause = cause
        self.attempted_models = [a.candidate for a in cause.attempts]


async def generate(model: str, prompt: str, *, timeout_s: float | None = None, max_tokens: int = 64) -> str:
    """
    Run one chat completion and return the message text.

    Contract:
    - Raises LLMError(code=LLM_DISABLED) when no API key is configured
    - Raises LLMError(code=LLM_API_FAIL) on timeout, non-2xx, or a malformed body
    - Logs latency on every call
    """
    if not config.OPENAI_API_KEY:
        log_event("llm_disabled", reason="OPENAI_API_KEY not set")
        raise LLMError("OPENAI_API_KEY not set", code=LLM_DISABLED)

    payload = {
        "model": model,
        "messages": [{"role": "user", "content": prompt}],
        "temperature": 0.0,
        "max_tokens": max_tokens,
    }

    t0 = time.perf_counter()
    try:
        resp = await http_post_json(
            config.OPENAI_URL,
            payload,
            headers={
                "Authorization": f"Bearer {config.OPENAI_API_KEY}",
                "Content-Type": "application/json",
            },
            timeout_s=config.LLM_TIMEOUT_S if timeout_s is None else timeout_s,
        )
        body = resp.json()
        content = body["choices"][0]["message"]["content"]
    except TransientHTTPError as exc:
        _log_call(model=model, latency_ms=_elapsed_ms(t0), status="api_fail", error=str(exc))
        raise LLMError(f"{model}: {exc}") from exc
    except (ValueError, KeyError, IndexError, TypeError) as exc:
        _log_call(model=model, latency_ms=_elapsed_ms(t0), status="bad_body", error=str(exc))
        raise LLMError(f"{model}: malformed completion body") from exc

    _log_call(model=model, latency_ms=_elapsed_ms(t0), status="ok")
    return content


async def check_models_with_fallback(
    models: Sequence[str],
    *,
    service_name: str,
    test_prompt: str = "test",
    timeout_s: float | None = None,
) -> ModelCheckResult:
    """
    Try each model in rank order against `test_prompt` until one answers.

    Returns which model worked, its response time, and every model attempted.
    Raises NoWorkingModel when the whole list fails.
    """

    async def attempt(model: str) -> str:
        return await generate(model, test_prompt, timeout_s=timeout_s)

    if not models:
        raise NoWorkingModel(
            service_name,
            AllCandidatesExhausted(f"{service_name}: no models configured", last_error=None, attempts=()),
        )

    try:
        outcome = await try_with_fallback(models, attempt, label=service_name)
    except AllCandidatesExhausted as exc:
        raise NoWorkingModel(service_name, exc) from exc

    return ModelCheckResult(
        service_name=service_name,
        working_model=outcome.candidate,
        response_ms=outcome.attempts[-1].elapsed_ms,
        attempted_models=[a.candidate for a in outcome.attempts],
        total_attempts=len(outcome.attempts),
    )


def _log_call(*, model: str, latency_ms: int, status: str, **extra):
    """Log every LLM call with latency."""
    log_event("llm_call", model=model, latency_ms=latency_ms, status=status, **extra)


def _elapsed_ms(t0: float) -> int:
    """Calculate elapsed milliseconds since t0."""
    return int((time.perf_counter() - t0) * 1000)
