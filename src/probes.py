# src/probes.py
"""
Individual health probes.

Each probe is a nullary coroutine returning one ProbeResult. Expected failures
(network errors, timeouts, non-2xx, missing config) become an unhealthy result
here; anything unexpected is left to the isolation wrapper in src.health.
"""
from __future__ import annotations

import asyncio
import sqlite3
import time
from typing import Any, Awaitable, Callable, Iterable

from src import config, db, rss_fetch
from src.clients import google_services, huggingface, news_api
from src.clients.llm_openai import LLMError, NoWorkingModel, check_models_with_fallback, generate
from src.error_codes import (
    DB_DISCONNECTED,
    NO_WORKING_MODEL,
    NOT_CONFIGURED,
    TRANSIENT_PROBE_FAILURE,
)
from src.feeds import all_feed_urls
from src.http_client import TransientHTTPError
from src.logging_utils import log_event
from src.schemas import ProbeError, ProbeResult


GENERATIVE_AI_TEST_PROMPT = "Summarize this text: This is a test article for health checking"


def _elapsed_ms(t0: float) -> int:
    return int((time.perf_counter() - t0) * 1000)


def _healthy(name: str, t0: float, *, message: str | None = None, data: Any = None) -> ProbeResult:
    return ProbeResult(name=name, status="healthy", elapsed_ms=_elapsed_ms(t0), message=message, data=data)


def _unhealthy(
    name: str,
    t0: float,
    error: str,
    *,
    code: str = TRANSIENT_PROBE_FAILURE,
    details: Any = None,
    message: str | None = None,
    data: Any = None,
) -> ProbeResult:
    log_event("probe_unhealthy", level="warning", probe=name, code=code, error=error)
    return ProbeResult(
        name=name,
        status="unhealthy",
        elapsed_ms=_elapsed_ms(t0),
        message=message,
        error=ProbeError(message=error, code=code, details=details),
        data=data,
    )


# --- Database ---

async def check_database() -> ProbeResult:
    """Healthy only if the shared connection is open and answers a ping."""
    name = "database"
    t0 = time.perf_counter()

    health = db.get_db_health()
    if not health["connected"]:
        return _unhealthy(
            name, t0, f"Database not connected. State: {health['ready_state']}", code=DB_DISCONNECTED, data=health
        )

    try:
        await asyncio.wait_for(asyncio.to_thread(db.ping_db), timeout=config.DB_PING_TIMEOUT_S)
    except asyncio.TimeoutError:
        return _unhealthy(name, t0, f"database ping timed out after {config.DB_PING_TIMEOUT_S}s", data=db.get_db_health())
    except sqlite3.Error as exc:
        return _unhealthy(name, t0, str(exc), data=db.get_db_health())

    return _healthy(name, t0, data=health)


# --- News providers ---

async def _check_provider(name: str, call: Callable[[], Awaitable[dict]], summarize: Callable[[dict], dict]) -> ProbeResult:
    t0 = time.perf_counter()
    try:
        body = await call()
    except TransientHTTPError as exc:
        return _unhealthy(name, t0, str(exc))
    except ValueError as exc:
        return _unhealthy(name, t0, f"unreadable response body: {exc}")
    return _healthy(name, t0, data=summarize(body))


async def check_news_api() -> ProbeResult:
    """One real top-headlines request: single result, fixed country."""
    return await _check_provider(
        "newsApi",
        lambda: news_api.fetch_top_headlines(country="us", page_size=1),
        lambda body: {"total_results": body.get("totalResults")},
    )


async def check_guardian_api() -> ProbeResult:
    return await _check_provider(
        "guardianApi",
        lambda: news_api.search_guardian("test", page_size=1),
        lambda body: {"total_results": (body.get("response") or {}).get("total")},
    )


async def check_nytimes_api() -> ProbeResult:
    return await _check_provider(
        "nyTimesApi",
        lambda: news_api.search_nytimes("test"),
        lambda body: {"status": body.get("status")},
    )


# --- RSS reachability ---

async def check_rss_feeds(urls: Iterable[str] | None = None) -> ProbeResult:
    """
    Fetch every configured feed concurrently and wait for all of them.

    none ok -> unhealthy, some ok -> degraded, all ok -> healthy.
    """
    name = "rssFeeds"
    t0 = time.perf_counter()
    feed_urls = all_feed_urls() if urls is None else list(urls)
    total = len(feed_urls)

    if total == 0:
        return _unhealthy(name, t0, "No RSS feeds configured", code=NOT_CONFIGURED, message="0/0 RSS feeds working")

    sem = asyncio.Semaphore(max(1, config.FEED_FETCH_CONCURRENCY))

    async def fetch_one(url: str):
        async with sem:
            return await rss_fetch.fetch_feed(url)

    results = await asyncio.gather(*(fetch_one(u) for u in feed_urls), return_exceptions=True)

    failed = []
    for url, result in zip(feed_urls, results):
        if isinstance(result, Exception):
            failed.append({"url": url, "error": f"{type(result).__name__}: {result}"})
            log_event("rss_feed_failed", level="warning", url=url, error=str(result))
        elif isinstance(result, BaseException):
            # cancellation is not a feed outcome
            raise result

    successful = total - len(failed)
    message = f"{successful}/{total} RSS feeds working"
    log_event("rss_health_summary", successful=successful, total=total)

    if successful == 0:
        return _unhealthy(name, t0, "All RSS feeds failed", details=failed, message=message)
    if failed:
        return ProbeResult(
            name=name,
            status="degraded",
            elapsed_ms=_elapsed_ms(t0),
            message=message,
            data={"failed": failed},
        )
    return _healthy(name, t0, message=message)


# --- Google services ---

async def check_google_services() -> ProbeResult:
    """OAuth handshake + one translation, run side by side. Either failing -> unhealthy."""
    name = "googleServices"
    t0 = time.perf_counter()

    checks = ("oauth", "translate")
    results = await asyncio.gather(
        google_services.check_oauth_handshake(),
        google_services.translate("test", target="es"),
        return_exceptions=True,
    )

    failures = []
    for check, result in zip(checks, results):
        if isinstance(result, Exception):
            failures.append({"check": check, "error": f"{type(result).__name__}: {result}"})
        elif isinstance(result, BaseException):
            raise result

    if failures:
        return _unhealthy(name, t0, f"{len(failures)} Google service(s) failed", details=failures)
    return _healthy(name, t0, data={"oauth": results[0], "translated": results[1]})


# --- Generative AI ---

async def check_generative_ai() -> ProbeResult:
    """Trivial prompt against the primary summarization model."""
    name = "generativeAI"
    t0 = time.perf_counter()
    model = config.AI_SUMMARIZATION_MODELS[0]

    try:
        await generate(model, GENERATIVE_AI_TEST_PROMPT, timeout_s=config.LLM_TIMEOUT_S)
    except LLMError as exc:
        return _unhealthy(name, t0, str(exc), code=exc.code, data={"model": model})

    return _healthy(name, t0, data={"model": model, "response_ms": _elapsed_ms(t0)})


async def check_ai_service(slug: str) -> ProbeResult:
    """Ranked-model fallback check for one AI feature (see config.AI_SERVICES)."""
    service_name, models, prompt = config.AI_SERVICES[slug]
    name = f"ai-{slug}"
    t0 = time.perf_counter()

    try:
        found = await check_models_with_fallback(models, service_name=service_name, test_prompt=prompt)
    except NoWorkingModel as exc:
        return _unhealthy(
            name,
            t0,
            str(exc),
            code=NO_WORKING_MODEL,
            data={
                "service_name": service_name,
                "available_models": list(models),
                "attempted_models": exc.attempted_models,
                "total_attempts": len(exc.attempted_models),
            },
        )

    return _healthy(
        name,
        t0,
        data={
            "service_name": service_name,
            "working_model": found.working_model,
            "available_models": list(models),
            "attempted_models": found.attempted_models,
            "total_attempts": found.total_attempts,
            "model_response_ms": found.response_ms,
        },
    )


# --- Composite AI checks ---

QA_SAMPLE_ARTICLE = (
    "Artificial intelligence is transforming healthcare through machine learning algorithms that can "
    "analyze medical data, assist in diagnosis, and predict patient outcomes. AI systems are being "
    "integrated into hospitals to improve efficiency and accuracy in medical decision-making."
)
QA_TEST_QUESTIONS = (
    "What is artificial intelligence transforming?",
    "How do AI systems help in medical decision-making?",
    "What can machine learning algorithms analyze?",
)

CLASSIFICATION_TEST_TEXT = (
    "This is a test article about artificial intelligence breakthroughs in healthcare technology "
    "for classification health checking"
)
CLASSIFICATION_LABELS = ("technology", "healthcare", "artificial intelligence", "other")


async def check_ai_question_answer() -> ProbeResult:
    """
    Question generation through the ranked models, then every test question
    answered concurrently (each with its own model fallback).

    Healthy only when generation works and all answers come back.
    """
    name = "ai-question-answer"
    service_name = "AI Question Answer Service"
    models = config.QUESTION_ANSWER_MODELS
    t0 = time.perf_counter()

    try:
        generated = await check_models_with_fallback(
            models,
            service_name="AI Question Generation",
            test_prompt=f"Generate 3 relevant questions based on this text: {QA_SAMPLE_ARTICLE}",
        )
    except NoWorkingModel as exc:
        return _unhealthy(
            name,
            t0,
            f"Question generation failed: {exc}",
            code=NO_WORKING_MODEL,
            data={
                "service_name": service_name,
                "available_models": list(models),
                "attempted_models": exc.attempted_models,
                "total_attempts": len(exc.attempted_models),
                "failed_at": "question_generation",
            },
        )

    answers = await asyncio.gather(
        *(
            check_models_with_fallback(
                models,
                service_name="AI Question Answering",
                test_prompt=f"Answer this question based on the text: {q}\n\nText: {QA_SAMPLE_ARTICLE}",
            )
            for q in QA_TEST_QUESTIONS
        ),
        return_exceptions=True,
    )
    for result in answers:
        if isinstance(result, BaseException) and not isinstance(result, Exception):
            raise result

    answered = sum(1 for r in answers if not isinstance(r, BaseException))
    total = len(QA_TEST_QUESTIONS)
    data = {
        "service_name": service_name,
        "available_models": list(models),
        "working_model": generated.working_model,
        "attempted_models": generated.attempted_models,
        "total_attempts": generated.total_attempts,
        "question_generation_ms": generated.response_ms,
        "questions_answered": f"{answered}/{total}",
    }

    if answered < total:
        return _unhealthy(
            name,
            t0,
            f"Question answering failed: {answered}/{total} successful",
            code=NO_WORKING_MODEL,
            details=[f"{type(r).__name__}: {r}" for r in answers if isinstance(r, BaseException)],
            data={**data, "failed_at": "question_answering"},
        )
    return _healthy(name, t0, data={**data, "test_questions": list(QA_TEST_QUESTIONS)})


async def check_ai_news_classification() -> ProbeResult:
    """Hosted zero-shot classifier first; the ranked summarization models if it is missing or fails."""
    name = "ai-news-classification"
    service_name = "AI News Classification Service"
    t0 = time.perf_counter()
    classifier_configured = bool(config.HUGGINGFACE_API_TOKEN)

    primary_error = None
    try:
        result = await huggingface.classify(CLASSIFICATION_TEST_TEXT, CLASSIFICATION_LABELS)
    except (huggingface.ClassificationError, TransientHTTPError, ValueError) as exc:
        primary_error = f"classifier failed: {exc}"
        log_event("classification_primary_failed", level="warning", error=str(exc))
    else:
        return _healthy(
            name,
            t0,
            data={
                "service_name": service_name,
                "working_method": "classifier (primary)",
                "top_label": result["labels"][0],
                "classifier_configured": classifier_configured,
            },
        )

    try:
        found = await check_models_with_fallback(
            config.AI_SUMMARIZATION_MODELS,
            service_name="AI News Classification (model fallback)",
            test_prompt=f"Classify this news article into appropriate categories: {CLASSIFICATION_TEST_TEXT}",
        )
    except NoWorkingModel as exc:
        return _unhealthy(
            name,
            t0,
            f"Both classification methods failed: {primary_error}, models failed: {exc}",
            code=NO_WORKING_MODEL,
            data={
                "service_name": service_name,
                "classifier_configured": classifier_configured,
                "attempted_models": exc.attempted_models,
                "failed_at": "both_methods",
            },
        )

    return _healthy(
        name,
        t0,
        data={
            "service_name": service_name,
            "working_method": f"model fallback ({found.working_model})",
            "classifier_configured": classifier_configured,
            "primary_error": primary_error,
            "attempted_models": found.attempted_models,
        },
    )
