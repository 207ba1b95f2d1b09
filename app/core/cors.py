from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import DEFAULT_CORS_ORIGIN


def cors_options(raw: Optional[str]) -> dict:
    """Translate the CORS_ORIGIN env value into CORSMiddleware kwargs."""
    if not raw or not raw.strip():
        return {
            "allow_origins": [DEFAULT_CORS_ORIGIN],
            "allow_methods": ["GET", "HEAD", "PUT", "PATCH", "POST", "DELETE"],
            "allow_headers": ["*"],
        }

    if raw.strip() == "*":
        return {
            "allow_origins": ["*"],
            "allow_methods": ["*"],
            "allow_headers": ["*"],
        }

    origins = [o.strip() for o in raw.split(",") if o.strip()]
    return {
        "allow_origins": origins,
        "allow_methods": ["GET", "POST", "OPTIONS"],
        "allow_headers": ["Content-Type"],
    }


def setup_cors(app: FastAPI, raw: Optional[str]) -> None:
    app.add_middleware(CORSMiddleware, **cors_options(raw))
