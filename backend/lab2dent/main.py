"""FastAPI application."""
import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import DEV_JWT_SECRET_KEY, Settings, get_settings
from .domain_errors import DomainError
from .problem_details import domain_error_handler
from .routers import admin, auth, clinic, lab, uploads, users
from .seed_data import seed
from .services.order_store import OrderStore
from .services.session_store import build_session_store
from .services.user_store import UserStore

VERSION = "1.0.0"
logger = logging.getLogger(__name__)


def _check_production_settings(settings: Settings) -> None:
    """Fail closed on insecure production config."""
    if settings.ENV.lower() != "production":
        return
    if settings.JWT_SECRET_KEY == DEV_JWT_SECRET_KEY:
        raise RuntimeError("JWT_SECRET_KEY must be set in production (the development default is public).")
    if not settings.cors_origins:
        raise RuntimeError("ALLOWED_ORIGINS must be set in production (explicit frontend origin required).")
    if any(origin.strip() == "*" for origin in settings.cors_origins):
        raise RuntimeError("ALLOWED_ORIGINS must be explicit in production (no wildcard when using credentials).")
    if any(
        origin.startswith("http://localhost") or origin.startswith("http://127.0.0.1")
        for origin in settings.cors_origins
    ):
        raise RuntimeError("ALLOWED_ORIGINS contains localhost in production; set it to your real frontend origin.")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=logging.DEBUG if settings.DEBUG else logging.INFO)
    _check_production_settings(settings)

    app = FastAPI(
        title=settings.APP_NAME,
        version=VERSION,
        description="Backend API for dental lab order tracking",
    )

    # CORS
    cors_methods = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
    cors_headers = ["Authorization", "Content-Type"]
    if settings.ENV.lower() != "production":
        cors_headers = ["*"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=cors_methods,
        allow_headers=cors_headers,
    )

    app.state.settings = settings
    app.state.order_store = OrderStore(
        number_prefix=settings.ORDER_NUMBER_PREFIX,
        number_width=settings.ORDER_NUMBER_WIDTH,
        enforce_forward_transitions=settings.ENFORCE_FORWARD_TRANSITIONS,
    )
    app.state.user_store = UserStore()
    app.state.session_store = build_session_store(
        backend=settings.SESSION_BACKEND,
        redis_url=settings.REDIS_URL,
        key_prefix=settings.SESSION_KEY_PREFIX,
        ttl_seconds=settings.SESSION_TTL_SECONDS,
    )
    seed(app.state.order_store, app.state.user_store, include_samples=settings.SEED_SAMPLE_DATA)

    app.add_exception_handler(DomainError, domain_error_handler)

    # Include routers
    app.include_router(auth.router, prefix="/api/v1")
    app.include_router(clinic.router, prefix="/api/v1")
    app.include_router(lab.router, prefix="/api/v1")
    app.include_router(admin.router, prefix="/api/v1")
    app.include_router(users.router, prefix="/api/v1")
    app.include_router(uploads.router, prefix="/api/v1")

    @app.get("/api/v1/system/health")
    def health_check():
        """Health check endpoint."""
        return {
            "status": "ok",
            "version": VERSION,
            "orders": len(app.state.order_store),
            "sessions": settings.SESSION_BACKEND,
        }

    @app.get("/")
    def root():
        """Root endpoint."""
        return {
            "message": f"{settings.APP_NAME} API",
            "version": VERSION,
            "docs": "/docs",
        }

    logger.info("app.created env=%s session_backend=%s", settings.ENV, settings.SESSION_BACKEND)
    return app


app = create_app()
