"""Per-IP rate limiting for the RSVP endpoint.

slowapi (a Starlette wrapper around the `limits` library) with a moving
window, so the budget is "N requests in any 60 seconds" per client IP.
Counters live in process memory unless RATE_LIMIT_STORAGE_URI points at a
shared store, and are lost on restart.
"""

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from .config import (
    RATE_LIMIT_ENABLED,
    RATE_LIMIT_PER_MINUTE,
    RATE_LIMIT_STORAGE_URI,
)
from .logging import log_evt

RATE_LIMIT_MESSAGE = "Rate limit exceeded"
RSVP_LIMIT = f"{RATE_LIMIT_PER_MINUTE}/minute"

limiter = Limiter(
    key_func=get_remote_address,
    strategy="moving-window",
    storage_uri=RATE_LIMIT_STORAGE_URI,
    headers_enabled=True,
    enabled=RATE_LIMIT_ENABLED,
)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    log_evt("warning", "rate_limited", ip=get_remote_address(request), path=request.url.path, limit=exc.detail)
    response = JSONResponse(status_code=429, content={"ok": False, "error": RATE_LIMIT_MESSAGE})
    # Same header injection slowapi's default handler performs
    return request.app.state.limiter._inject_headers(response, request.state.view_rate_limit)
