import importlib
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

REPO_ROOT = str(Path(__file__).resolve().parents[1])


def load_app_module(monkeypatch, database_url: str, **env):
    """Import app.main from scratch against the given database and env.

    Config is read at import time, so every app.* module is dropped first;
    this also gives each test its own limiter counters.
    """
    monkeypatch.setenv("DATABASE_URL", database_url)
    monkeypatch.setenv("RATE_LIMIT_ENABLED", "1")
    monkeypatch.setenv("RATE_LIMIT_PER_MINUTE", "30")
    monkeypatch.setenv("RATE_LIMIT_STORAGE_URI", "memory://")
    monkeypatch.delenv("CORS_ORIGIN", raising=False)
    monkeypatch.delenv("MAX_BODY_BYTES", raising=False)
    monkeypatch.delenv("FORWARDED_ALLOW_IPS", raising=False)
    for key, value in env.items():
        monkeypatch.setenv(key, str(value))

    if REPO_ROOT not in sys.path:
        sys.path.insert(0, REPO_ROOT)

    for mod in [m for m in list(sys.modules) if m == "app" or m.startswith("app.")]:
        sys.modules.pop(mod, None)

    return importlib.import_module("app.main")


@pytest.fixture
def load_app(monkeypatch, tmp_path):
    def _load(**env):
        return load_app_module(monkeypatch, f"sqlite:///{tmp_path}/test.db", **env)

    return _load


@pytest.fixture
def app_module(load_app):
    return load_app()


@pytest.fixture
def client(app_module):
    with TestClient(app_module.app) as c:
        yield c


@pytest.fixture
def fetch_rsvps():
    def _fetch():
        from app.db.models import Rsvp
        from app.db.session import SessionLocal

        with SessionLocal() as db:
            return db.query(Rsvp).order_by(Rsvp.id).all()

    return _fetch


def make_payload(**overrides) -> dict:
    payload = {
        "wedding": {"groom": "Marko", "bride": "Ana", "dateISO": "2025-09-13"},
        "rsvp": {
            "name": "Ivana Horvat",
            "attending": "yes",
            "guests": 2,
            "diet": "vegetarian",
            "note": "Can't wait!",
        },
        "submittedAtISO": "2025-06-01T12:00:00+02:00",
        "source": "web",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def payload():
    return make_payload()
