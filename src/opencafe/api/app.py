"""
opencafe.api.app

FastAPI app factory for the OpenCafe service.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Initialize and dispose shared infrastructure (DB engine, session factory, ciphers).
- Map domain errors onto HTTP responses.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from opencafe import __version__
from opencafe.api.routers.admins import router as admins_router
from opencafe.api.routers.cards import router as cards_router
from opencafe.api.routers.catalog import router as catalog_router
from opencafe.api.routers.customers import router as customers_router
from opencafe.api.routers.health import router as health_router
from opencafe.api.routers.images import router as images_router
from opencafe.api.routers.instance import router as instance_router
from opencafe.api.routers.issues import router as issues_router
from opencafe.api.routers.points import router as points_router
from opencafe.api.routers.strings import router as strings_router
from opencafe.auth.crypto import KeyedEncryptionProvider
from opencafe.db.init_db import init_db
from opencafe.db.session import create_engine, create_sessionmaker
from opencafe.errors import OpenCafeError
from opencafe.observability.logging import configure_logging, get_logger
from opencafe.observability.middleware import RequestContextMiddleware
from opencafe.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        # Key problems surface here rather than on the first request.
        app.state.encryption = KeyedEncryptionProvider.from_settings(settings)
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            # Prod relies on Alembic migrations.
            await init_db(engine)
        try:
            yield
        finally:
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="OpenCafe",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    @app.exception_handler(OpenCafeError)
    async def _domain_error(request: Request, exc: OpenCafeError) -> JSONResponse:
        if exc.status_code >= 500:
            log.error("request.failed", error=type(exc).__name__, detail=exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.payload if exc.payload is not None else {"detail": exc.detail},
        )

    app.add_middleware(RequestContextMiddleware)
    app.include_router(health_router, tags=["health"])
    app.include_router(admins_router)
    app.include_router(customers_router)
    app.include_router(cards_router)
    app.include_router(catalog_router)
    app.include_router(points_router)
    app.include_router(issues_router)
    app.include_router(instance_router)
    app.include_router(strings_router)
    app.include_router(images_router)
    return app


# --- Module Notes -----------------------------------------------------------
# App composition stays here; business logic stays in the service layer.
