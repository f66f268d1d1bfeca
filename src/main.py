# Load .env file BEFORE other imports (so env vars are available)
from dotenv import load_dotenv
load_dotenv()

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.db import close_db, connect_db
from src.error_codes import FEED_UNAVAILABLE, PARSE_ERROR
from src.errors import problem
from src.feeds import RSS_SOURCES
from src.health import ai_probes, check_overall_health, run_probe, single_probes
from src.logging_utils import log_event
from src.middleware import request_id_middleware
from src.rss_fetch import FeedUnavailable, fetch_feed_with_attempts
from src.rss_parse import RSSParseError
from src.schemas import AggregateReport, FeedResponse, ProbeResult


@asynccontextmanager
async def lifespan(app: FastAPI):
    connect_db()
    try:
        yield
    finally:
        close_db()


app = FastAPI(title="pulsepress-health", lifespan=lifespan)

#Register middleware
app.middleware("http")(request_id_middleware)


def _status_code(status: str) -> int:
    # healthy and degraded are still serving; only unhealthy is 503
    return 503 if status == "unhealthy" else 200


def _health_response(request: Request, health: AggregateReport | ProbeResult) -> JSONResponse:
    log_event("health_check", request_id=request.state.request_id, status=health.status)
    return JSONResponse(status_code=_status_code(health.status), content=health.model_dump(mode="json"))


@app.get("/health")
async def health(request: Request):
    report = await check_overall_health()
    return _health_response(request, report)


@app.get("/health/ai/{service}")
async def health_ai_service(request: Request, service: str):
    probe = ai_probes().get(service)
    if probe is None:
        raise HTTPException(status_code=404, detail=f"Unknown AI service: {service}")
    result = await run_probe(f"ai-{service}", probe)
    return _health_response(request, result)


@app.get("/health/{probe_name}")
async def health_probe(request: Request, probe_name: str):
    probe = single_probes().get(probe_name)
    if probe is None:
        raise HTTPException(status_code=404, detail=f"Unknown health check: {probe_name}")
    result = await run_probe(probe_name, probe)
    return _health_response(request, result)


@app.get("/feeds/sources")
def feed_sources():
    return RSS_SOURCES


@app.get("/feeds")
async def get_feed(request: Request, url: str):
    request_id = request.state.request_id
    try:
        items, attempts = await fetch_feed_with_attempts(url)
    except FeedUnavailable as exc:
        payload = problem(
            status=502,
            code=FEED_UNAVAILABLE,
            message=str(exc),
            request_id=request_id,
            details={"attempts": [a.model_dump(mode="json") for a in exc.attempts]},
        )
        log_event("feed_request_failed", request_id=request_id, url=url, code=FEED_UNAVAILABLE)
        return JSONResponse(status_code=502, content=payload.model_dump(exclude_none=True))
    except RSSParseError as exc:
        payload = problem(status=502, code=PARSE_ERROR, message=str(exc), request_id=request_id)
        log_event("feed_request_failed", request_id=request_id, url=url, code=PARSE_ERROR)
        return JSONResponse(status_code=502, content=payload.model_dump(exclude_none=True))

    return FeedResponse(url=url, total=len(items), items=items, attempts=list(attempts))


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    rid = request.state.request_id
    payload = problem(
        status=exc.status_code,
        code="http_error",
        message=str(exc.detail),
        request_id=rid,
    )
    log_event("http_error", request_id=rid, status=exc.status_code, message=str(exc.detail))
    resp = JSONResponse(status_code=exc.status_code, content=payload.model_dump(exclude_none=True))
    resp.headers["X-Request-ID"] = rid
    return resp


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    rid = request.state.request_id
    payload = problem(
        status=500,
        code="internal_error",
        message="Internal server error",
        request_id=rid,
    )
    # Don't leak details to the client, but do log them
    log_event("internal_error", level="error", request_id=rid, error_type=type(exc).__name__, error=str(exc))
    resp = JSONResponse(status_code=500, content=payload.model_dump(exclude_none=True))
    resp.headers["X-Request-ID"] = rid
    return resp


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Return ProblemDetails for request validation errors."""
    rid = request.state.request_id

    # Extract first error for a clean message
    errors = exc.errors()
    if errors:
        first = errors[0]
        loc = ".".join(str(x) for x in first.get("loc", []))  #e.g., "query.url"
        msg = first.get("msg", "Validation error")
        message = f"{loc}: {msg}"
    else:
        message = "Validation error"

    payload = problem(
        status=422,
        code="validation_error",
        message=message,
        request_id=rid,
    )

    log_event("validation_error", request_id=rid, message=message)
    resp = JSONResponse(status_code=422, content=payload.model_dump(exclude_none=True))
    resp.headers["X-Request-ID"] = rid
    return resp
