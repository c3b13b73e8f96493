"""
Application factory.

The store adapter is created once here and handed to the catalog and
asset services, which route handlers receive through dependencies.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from . import __version__
from .assets import AssetService
from .catalog import CatalogService
from .config import Settings
from .errors import CatalogError
from .health import router as health_router
from .response import ResourceBuilder
from .routes import router as catalog_router
from .store import InMemoryStore, PostgresStore

logger = logging.getLogger(__name__)


def build_store(settings: Settings):
    """Store adapter selected by ``ASSETSVC_STORE``."""
    if settings.store_backend == "memory":
        if settings.seed_file:
            return InMemoryStore.from_file(settings.seed_file)
        return InMemoryStore()
    if settings.store_backend == "postgres":
        return PostgresStore.connect(settings)
    raise ValueError(f"Unknown store backend: {settings.store_backend}")


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(CatalogError)
    async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
        logger.log(exc.log_level, f"{request.method} {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.http_status, content={"detail": exc.message})


def create_app(settings: Optional[Settings] = None, store=None) -> FastAPI:
    """
    Build the service.

    ``store`` must implement both ChartRepository and ChartFilesRepository;
    when omitted it is built from ``settings``.
    """
    settings = settings or Settings.from_env()
    if store is None:
        store = build_store(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        close = getattr(store, "close", None)
        if close is not None:
            close()

    app = FastAPI(
        title="Chart Asset Service",
        description="Read-only catalog of Helm charts, chart versions and chart assets",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.catalog = CatalogService(store, store, ResourceBuilder(settings.path_prefix))
    app.state.assets = AssetService(store, store)

    register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(catalog_router, prefix=settings.path_prefix)

    logger.info(f"Asset service ready: store={settings.store_backend} prefix={settings.path_prefix}")
    return app
