import re
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_core import PydanticCustomError

# Date-time with a mandatory offset: seconds required, fraction optional,
# offset as Z, +HH, +HHMM or +HH:MM.
ISO_DATETIME_RE = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<frac>\d+))?"
    r"(?P<tz>Z|[+-]\d{2}(?::?\d{2})?)$"
)


def parse_iso_datetime(value: str) -> datetime:
    """Parse an offset-qualified ISO-8601 string into an aware UTC datetime.

    Raises ValueError when the shape is wrong or the calendar values are
    impossible (e.g. February 30th).
    """
    m = ISO_DATETIME_RE.match(value)
    if not m:
        raise ValueError(f"not an ISO-8601 date-time with offset: {value!r}")

    frac = (m.group("frac") or "")[:6].ljust(6, "0")
    tz = m.group("tz")
    if tz == "Z":
        tz = "+00:00"
    else:
        digits = tz[1:].replace(":", "").ljust(4, "0")
        tz = f"{tz[0]}{digits[:2]}:{digits[2:]}"

    parsed = datetime.fromisoformat(f"{m.group('base')}.{frac}{tz}")
    return parsed.astimezone(timezone.utc)


class _Trimmed(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)


class WeddingInfo(_Trimmed):
    groom: str = Field(..., min_length=1, max_length=100)
    bride: str = Field(..., min_length=1, max_length=100)
    date_iso: str = Field(..., alias="dateISO", min_length=1, max_length=50)


class RsvpInfo(_Trimmed):
    name: str = Field(..., min_length=1, max_length=200)
    attending: str = Field(..., min_length=1, max_length=20)
    guests: int = Field(..., ge=1, le=6, strict=True)
    diet: Optional[str] = Field(default=None, max_length=1000)
    note: Optional[str] = Field(default=None, max_length=2000)

    @field_validator("guests", mode="before")
    @classmethod
    def _integral_float_guests(cls, v: Any):
        # JSON has one number type: 2.0 is a whole number, 2.5 is not
        if isinstance(v, float) and v.is_integer():
            return int(v)
        return v

    @field_validator("diet", "note", mode="before")
    @classmethod
    def _reject_null(cls, v: Any):
        # omitted is fine, null is not
        if v is None:
            raise PydanticCustomError("string_type", "Input should be a valid string")
        return v


class RsvpSubmission(_Trimmed):
    wedding: WeddingInfo
    rsvp: RsvpInfo
    submitted_at: Optional[datetime] = Field(default=None, alias="submittedAtISO")
    source: str = Field(default="web", max_length=50)

    @field_validator("submitted_at", mode="before")
    @classmethod
    def _parse_submitted_at(cls, v: Any):
        if not isinstance(v, str):
            raise PydanticCustomError("string_type", "Input should be a valid string")
        try:
            return parse_iso_datetime(v.strip())
        except ValueError:
            raise PydanticCustomError("datetime_format", "Invalid datetime")


class SubmissionInvalid(Exception):
    """Payload rejected by validation; str() is the client-facing message."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def first_error_message(errors: list) -> str:
    """Render the first pydantic/FastAPI error as '<field.path>: <message>'."""
    if not errors:
        return "payload: Invalid payload"
    first = errors[0]
    if first.get("type") == "json_invalid":
        return "payload: Invalid JSON"

    loc = [str(p) for p in first.get("loc", ())]
    # FastAPI prefixes body errors with the location name
    if loc and loc[0] == "body":
        loc = loc[1:]
    path = ".".join(loc) if loc else "payload"
    return f"{path}: {first.get('msg', 'Invalid value')}"


def parse_submission(data: Any) -> RsvpSubmission:
    """Validate a decoded JSON body, raising SubmissionInvalid on the first violation."""
    try:
        return RsvpSubmission.model_validate(data)
    except ValidationError as exc:
        raise SubmissionInvalid(first_error_message(exc.errors())) from None
