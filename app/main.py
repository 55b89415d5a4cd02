"""Token Auth API - FastAPI application entrypoint."""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from app.config import AppConfig, load_config, log_config_snapshot
from app.errors import register_exception_handlers
from app.routers import users
from auth.middleware import AuthGate
from auth.service import AccountService
from auth.tokens import ensure_random_source
from persistence.accounts import AccountStore
from persistence.db import Database

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Reject requests exceeding size limit to prevent payload bombs."""

    def __init__(self, app, max_bytes: int) -> None:
        super().__init__(app)
        self.max_bytes = max_bytes

    async def dispatch(self, request: Request, call_next):
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > self.max_bytes:
            return JSONResponse(
                status_code=413,
                content={"message": "Request entity too large", "error": "Body exceeds size limit"},
            )
        return await call_next(request)


def create_app(config: Optional[AppConfig] = None) -> FastAPI:
    """
    Build the application.

    The database, store, service and gate are created in the lifespan
    handler and kept on app.state; the database is closed on shutdown.
    """
    config = config or load_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        log_config_snapshot(config)
        # Refuse to start without a secure random source
        ensure_random_source()

        db = Database(config.db_path)
        db.connect()
        store = AccountStore(db)

        app.state.db = db
        app.state.account_store = store
        app.state.account_service = AccountService(store, bcrypt_rounds=config.bcrypt_rounds)
        app.state.auth_gate = AuthGate(store)
        app.state.started_at = datetime.now(timezone.utc)
        try:
            yield
        finally:
            db.close()

    app = FastAPI(
        title="Token Auth API",
        description="Account registration, login and bearer-token gate",
        version=config.service_version,
        lifespan=lifespan,
    )
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestSizeLimitMiddleware, max_bytes=config.max_request_size_bytes)

    register_exception_handlers(app)
    app.include_router(users.router)

    @app.get("/health")
    async def health():
        """Health check."""
        return {
            "status": "healthy",
            "service": config.service_name,
            "version": config.service_version,
            "environment": config.environment,
            "started_at": app.state.started_at.isoformat(),
        }

    return app


app = create_app()
