"""Exception handlers rendering every failure as the {ok, error} envelope.

- SubmissionInvalid / RequestValidationError -> 400, first error only
- PayloadTooLarge -> 413
- RateLimitExceeded -> 429 (see app.core.rate_limit)
- HTTPException -> its own status and detail
- anything else -> 500, details stay in the server log
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.schemas import SubmissionInvalid, first_error_message
from app.core.logging import log_evt, logger
from app.core.middleware import PAYLOAD_TOO_LARGE_MESSAGE, PayloadTooLarge
from app.core.rate_limit import rate_limit_exceeded_handler

INTERNAL_ERROR_MESSAGE = "Internal server error"


def error_response(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"ok": False, "error": message}, headers=headers)


async def submission_invalid_handler(request: Request, exc: SubmissionInvalid) -> JSONResponse:
    log_evt("warning", "rsvp_invalid", path=request.url.path, error=exc.message)
    return error_response(400, exc.message)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = first_error_message(exc.errors())
    log_evt("warning", "rsvp_invalid", path=request.url.path, error=message)
    return error_response(400, message)


async def payload_too_large_handler(request: Request, exc: PayloadTooLarge) -> JSONResponse:
    log_evt("warning", "payload_too_large", path=request.url.path, size=exc.size, limit=exc.limit)
    return error_response(413, PAYLOAD_TOO_LARGE_MESSAGE)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("UNHANDLED ERROR method=%s path=%s", request.method, request.url.path)
    return error_response(500, INTERNAL_ERROR_MESSAGE)


def setup_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SubmissionInvalid, submission_invalid_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(PayloadTooLarge, payload_too_large_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
