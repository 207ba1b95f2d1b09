import json

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from slowapi.util import get_remote_address
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from app.api.errors import INTERNAL_ERROR_MESSAGE, error_response
from app.api.schemas import SubmissionInvalid, parse_submission
from app.core.logging import log_evt
from app.core.middleware import read_body_capped
from app.core.rate_limit import RSVP_LIMIT, limiter
from app.db.session import get_db
from app.services.rsvps import save_rsvp

router = APIRouter(prefix="/api", tags=["rsvp"])


@router.post("/rsvp")
@limiter.limit(RSVP_LIMIT)
async def submit_rsvp(request: Request, db: Session = Depends(get_db)):
    # Body is decoded here rather than by FastAPI so the limiter runs first
    try:
        data = json.loads(await read_body_capped(request))
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise SubmissionInvalid("payload: Invalid JSON") from None

    submission = parse_submission(data)

    ip = get_remote_address(request)
    try:
        await run_in_threadpool(
            save_rsvp,
            db,
            submission,
            ip=ip,
            user_agent=request.headers.get("user-agent"),
        )
    except Exception:
        log_evt("error", "rsvp_save_failed", ip=ip, exc_info=True)
        return error_response(500, INTERNAL_ERROR_MESSAGE)

    return JSONResponse({"ok": True})
