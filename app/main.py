from fastapi import FastAPI

from app.api.errors import setup_exception_handlers
from app.api.routers import health as health_router
from app.api.routers import rsvp as rsvp_router
from app.core.config import CORS_ORIGIN
from app.core.cors import setup_cors
from app.core.logging import log_evt
from app.core.middleware import body_size_middleware
from app.core.rate_limit import limiter
from app.db.models import Base
from app.db.session import close_engine, engine


def create_app() -> FastAPI:
    app = FastAPI(title="Wedding RSVP API")

    # slowapi looks the limiter up on app state
    app.state.limiter = limiter

    # Middleware (last added runs first: CORS wraps the size guard)
    app.middleware("http")(body_size_middleware)
    setup_cors(app, CORS_ORIGIN)

    setup_exception_handlers(app)

    # Routers
    app.include_router(health_router.router)
    app.include_router(rsvp_router.router)

    @app.on_event("startup")
    def _startup():
        # No migration tooling: create missing tables only
        Base.metadata.create_all(bind=engine)
        log_evt("info", "startup", db=engine.url.get_backend_name())

    @app.on_event("shutdown")
    def _shutdown():
        # uvicorn maps SIGINT/SIGTERM onto this event
        log_evt("info", "shutdown")
        close_engine()

    return app


app = create_app()
