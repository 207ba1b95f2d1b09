import ssl
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import DATABASE_URL
from app.core.logging import log_evt


PG8000_SCHEME = "postgresql+pg8000://"


def _sanitize_database_url(url: str) -> str:
    """Strip query params like sslmode=require and pin PostgreSQL URLs to pg8000.

    Hosted Postgres providers hand out "postgres://" / "postgresql://" URLs
    with libpq query options; pg8000 takes SSL through connect_args instead.
    """
    if not url:
        return url
    if "?" in url:
        url = url.split("?", 1)[0]
    for prefix in ("postgres://", "postgresql://"):
        if url.startswith(prefix):
            return PG8000_SCHEME + url[len(prefix):]
    return url


def _make_engine():
    if not DATABASE_URL:
        raise RuntimeError("DATABASE_URL is not set")

    url = _sanitize_database_url(DATABASE_URL)

    connect_args = {}
    if url.startswith(PG8000_SCHEME):
        connect_args["ssl_context"] = ssl.create_default_context()
    elif url.startswith("sqlite"):
        connect_args["check_same_thread"] = False

    return create_engine(url, pool_pre_ping=True, connect_args=connect_args)


engine = _make_engine()
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def close_engine() -> None:
    """Release pooled connections; called once on application shutdown."""
    engine.dispose()
    log_evt("info", "db_closed", backend=engine.url.get_backend_name())
