"""
FastAPI application setup for the shortlink favorites service.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
from contextlib import asynccontextmanager
from typing import Optional

from app.config.settings import get_settings
from app.core.error_handlers import setup_error_handlers
from app.core.kv_store import KVStore, create_kv_store
from app.core.logging import configure_logging
from app.middleware import RequestContextMiddleware

# Get application settings
settings = get_settings()

configure_logging(
    level=settings.log_level.value,
    json_output=settings.log_json,
    log_format=settings.log_format,
    log_file=settings.log_file,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Bind the key-value store on startup and release it on shutdown.

    A store that cannot be reached is left unbound so requests fail with a
    configuration error instead of the process refusing to start.
    """
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")

    owned_store: Optional[KVStore] = None
    if getattr(app.state, "kv_store", None) is None:
        store = create_kv_store(settings.kv)
        if await store.connect():
            app.state.kv_store = owned_store = store
            logger.info(f"Key-value store bound ({store.backend_name})")
        else:
            app.state.kv_store = None
            logger.error("Key-value store unavailable, favorite endpoints will fail until restart")

    logger.info("Application startup complete")
    try:
        yield
    finally:
        logger.info("Shutting down application")
        if owned_store is not None:
            await owned_store.disconnect()
            app.state.kv_store = None
        logger.info("Application shutdown complete")


def create_app(kv_store: Optional[KVStore] = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        kv_store: Store to bind instead of the one built from settings

    Returns:
        FastAPI: Configured application instance
    """
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan
    )
    app.state.kv_store = kv_store

    app.add_middleware(
        CORSMiddleware,
        **settings.get_cors_config()
    )
    app.add_middleware(RequestContextMiddleware)

    setup_error_handlers(app)

    from app.api.link_endpoints import router as link_router
    from app.api.health_endpoints import router as health_router
    app.include_router(link_router)
    app.include_router(health_router)

    @app.get("/")
    async def root():
        """Root endpoint for basic liveness check."""
        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.app_version,
            "status": "running"
        }

    return app


# Create application instance
app = create_app()
