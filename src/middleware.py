import re
import time
import uuid

from fastapi import Request

from src.logging_utils import log_event


_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9-]{8,64}$")


async def request_id_middleware(request: Request, call_next):
    # Reuse a well-formed upstream id so logs line up across services
    incoming = request.headers.get("X-Request-ID", "")
    request_id = incoming if _VALID_REQUEST_ID.match(incoming) else uuid.uuid4().hex

    # Lives for this request only
    request.state.request_id = request_id

    t0 = time.perf_counter()
    response = await call_next(request)

    response.headers["X-Request-ID"] = request_id
    log_event(
        "http_request",
        request_id=request_id,
        method=request.method,
        path=request.url.path,
        status=response.status_code,
        latency_ms=int((time.perf_counter() - t0) * 1000),
    )
    return response
