"""
FastAPI application factory.

Creates and configures the main application instance.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from moleculex.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from moleculex.api.middleware.error_handler import setup_exception_handlers
from moleculex.api.routes import (
    backup_router,
    catalog_router,
    dashboard_router,
    families_router,
    formulas_router,
    health_router,
    materials_router,
    notes_router,
    products_router,
    wishlist_router,
)
from moleculex.application.services import get_domain_store, get_remote_store
from moleculex.config import configure_logging, get_logger, get_settings
from moleculex.core.exceptions import StorageError

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan handler.

    Prepares the remote store and loads the working set on startup,
    releases connections on shutdown.
    """
    settings = get_settings()

    logger.info(
        "application_starting",
        host=settings.api.host,
        port=settings.api.port,
        backend=settings.remote.backend,
    )

    if settings.remote.backend == "sqlite":
        from moleculex.infrastructure.storage.sqlite import get_pool
        from moleculex.infrastructure.storage.sqlite.migrations import run_migrations

        try:
            await run_migrations()
            logger.info("database_initialized")

            await get_pool()
            logger.info("connection_pool_ready")

        except Exception as e:
            logger.error("database_init_failed", error=str(e))
            raise

    # A failed initial load leaves an empty working set; /api/catalog/reload retries it.
    try:
        await get_domain_store().load()
    except StorageError as e:
        logger.warning("initial_load_failed", error=e.message)

    logger.info("application_started")

    yield

    logger.info("application_stopping")

    await get_remote_store().close()

    if settings.remote.backend == "sqlite":
        from moleculex.infrastructure.storage.sqlite import close_pool

        await close_pool()
        logger.info("connection_pool_closed")

    logger.info("application_stopped")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()
    configure_logging()

    app = FastAPI(
        title="MoleculeX API",
        description="Perfumery materials, inventory batches and formulation",
        version=settings.app_version,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url="/redoc" if settings.api.debug else None,
        lifespan=lifespan,
    )

    app.add_middleware(LoggingMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)

    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    setup_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(materials_router)
    app.include_router(formulas_router)
    app.include_router(products_router)
    app.include_router(notes_router)
    app.include_router(wishlist_router)
    app.include_router(families_router)
    app.include_router(dashboard_router)
    app.include_router(catalog_router)
    app.include_router(backup_router)

    @app.get("/health")
    async def root_health() -> dict[str, str]:
        """Simple health check at root level."""
        return {"status": "healthy", "version": settings.app_version}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "moleculex.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
    )
