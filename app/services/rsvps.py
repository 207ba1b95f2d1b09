from typing import Optional

from sqlalchemy.orm import Session

from app.api.schemas import RsvpSubmission
from app.core.logging import log_evt
from app.db.models import Rsvp


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    return value or None


def save_rsvp(
    db: Session,
    submission: RsvpSubmission,
    ip: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> Rsvp:
    """Insert one validated submission as a new row.

    Storage errors propagate after the session is rolled back; the caller
    decides what the client gets to see.
    """
    r = Rsvp(
        name=submission.rsvp.name,
        attending=submission.rsvp.attending,
        guests=submission.rsvp.guests,
        diet=_blank_to_none(submission.rsvp.diet),
        note=_blank_to_none(submission.rsvp.note),
        wedding_groom=submission.wedding.groom,
        wedding_bride=submission.wedding.bride,
        wedding_date_iso=submission.wedding.date_iso,
        source=submission.source,
        ip=_blank_to_none(ip),
        user_agent=_blank_to_none(user_agent),
    )
    # Column default (server time) applies when the client sent none
    if submission.submitted_at is not None:
        r.submitted_at = submission.submitted_at

    try:
        db.add(r)
        db.commit()
        db.refresh(r)
    except Exception:
        db.rollback()
        raise

    log_evt("info", "rsvp_saved", rsvp_id=r.id, ip=r.ip, source=r.source, guests=r.guests)
    return r
