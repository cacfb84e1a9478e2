"""Main application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

# Rate limiting
from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from .core import BaseError, Settings, get_settings
from .infrastructure import StoreBundle, build_stores, create_schema
from .api.v1.api import api_v1_router
from .api.v1.middleware import base_error_handler, unhandled_error_handler, validation_exception_handler
from .services import RouteService

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, stores: StoreBundle | None = None) -> FastAPI:
    """Build the API. *stores* overrides the backend chosen by settings."""
    settings = settings or get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events."""
        # Startup
        bundle = stores or build_stores(settings)
        if bundle.engine is not None:
            await create_schema(bundle.engine)
        if settings.SEED_DEMO_ROUTES:
            await RouteService(bundle.inventory).seed_demo_routes()
        app.state.stores = bundle

        yield

        # Shutdown
        await bundle.close()

    app = FastAPI(
        title="Busline API",
        description="Bus ticket booking and attendance tracking API",
        version="1.0.0",
        lifespan=lifespan
    )

    # Attach rate-limiter
    app.state.limiter = Limiter(
        key_func=get_remote_address,
        default_limits=[settings.RATE_LIMIT_DEFAULT],
        enabled=settings.RATE_LIMIT_ENABLED,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"]
    )

    # Rate limiting
    @app.exception_handler(RateLimitExceeded)
    async def ratelimit_handler(request, exc: RateLimitExceeded):
        return PlainTextResponse("Too many requests", status_code=429)

    app.add_middleware(SlowAPIMiddleware)

    # Exception handling
    app.add_exception_handler(BaseError, base_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # Include v1 API with all endpoints
    app.include_router(api_v1_router, prefix="/api/v1")

    # Health check
    @app.get("/healthz")
    async def healthz():
        """Health check endpoint."""
        ok = await app.state.stores.ping()
        return {"store": "ok" if ok else "error"}

    # Root endpoint
    @app.get("/")
    async def root():
        """API root."""
        return {
            "message": "Welcome to Busline API",
            "docs": "/docs",
            "health": "/healthz"
        }

    return app


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
