"""
FastAPI Application Factory

Creates and configures the ordering API application.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from foodchop.config import Settings, get_settings
from foodchop.config.logging import configure_logging
from foodchop.serving.api.middleware import (
    RateLimitMiddleware,
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)
from foodchop.serving.api.routes import (
    carts_router,
    health_router,
    orders_router,
    products_router,
    reviews_router,
)
from foodchop.services import FoodMarketplace
from foodchop.storage import create_backend

logger = structlog.get_logger(__name__)


def create_api_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure FastAPI application.
    
    The storage backend is opened and the marketplace built, with the
    configured owner identity, when the application starts.
    
    Args:
        settings: Application settings (cached settings if omitted)
    
    Returns:
        Configured FastAPI app instance
    """
    settings = settings or get_settings()
    
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        configure_logging(settings=settings)
        logger.info("Starting FoodChop Ordering API", environment=settings.app_env)
        
        backend = create_backend(settings)
        await backend.connect()
        logger.info("Storage initialized", backend=backend.name)
        
        app.state.backend = backend
        app.state.marketplace = FoodMarketplace(backend, owner=settings.security.owner_id)
        
        yield
        
        logger.info("Shutting down...")
        app.state.marketplace = None
        await backend.close()
    
    app = FastAPI(
        title="FoodChop Ordering API",
        description="Food catalog, ordering and reviews",
        version=settings.version,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.security.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(
        RequestLoggingMiddleware,
        caller_header=settings.security.caller_header,
        anonymous=settings.security.anonymous_principal,
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        RateLimitMiddleware,
        max_requests=settings.security.rate_limit_requests,
        window_seconds=settings.security.rate_limit_window_seconds,
    )
    
    app.include_router(health_router, prefix="/api/v1", tags=["Health"])
    app.include_router(products_router, prefix="/api/v1/products", tags=["Products"])
    app.include_router(orders_router, prefix="/api/v1/orders", tags=["Orders"])
    app.include_router(reviews_router, prefix="/api/v1/reviews", tags=["Reviews"])
    app.include_router(carts_router, prefix="/api/v1/carts", tags=["Carts"])
    
    @app.get("/api/v1/info")
    async def api_info():
        """API information endpoint."""
        return {
            "name": "FoodChop Ordering API",
            "version": settings.version,
            "environment": settings.app_env,
            "storage": settings.storage.backend,
            "documentation": "/docs",
        }
    
    return app
