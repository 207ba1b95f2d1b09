from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Rsvp(Base):
    __tablename__ = "rsvps"

    id = Column(Integer, primary_key=True, index=True)

    # Client-supplied time if valid, otherwise when we received it
    submitted_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    name = Column(String(200), nullable=False)
    attending = Column(String(20), nullable=False)  # free-form, e.g. yes/no/maybe
    guests = Column(Integer, nullable=False)
    diet = Column(Text, nullable=True)
    note = Column(Text, nullable=True)

    # Wedding metadata, denormalized onto every row
    wedding_groom = Column(String(100), nullable=False)
    wedding_bride = Column(String(100), nullable=False)
    wedding_date_iso = Column(String(50), nullable=False)

    source = Column(String(50), nullable=False, default="web")
    ip = Column(String(120), nullable=True)
    user_agent = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
