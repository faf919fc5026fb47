"""
FastAPI application entry point.
Assembles the app with routers, middleware, lifespan handlers, and exception handlers.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.api.v1.router import api_router
from app.core.config import settings
from app.core.exceptions import setup_exception_handlers
from app.core.logging import setup_logging
from app.core.rate_limit import limiter
from app.db.session import init_db, close_db
from app.deps.di_container import build_container
from app.core.integrations.observability import setup_observability


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    Initializes logging, telemetry, DB, and the DI container.
    """
    # Startup
    setup_logging()
    setup_observability()

    await init_db()

    container = build_container()
    app.state.container = container

    import app.deps.di_container as di_module
    di_module._container = container

    yield

    # Shutdown
    await container.notification_client().close()
    await close_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="Order workflow, invoicing, and referral API",
        openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    app.include_router(api_router, prefix=settings.API_V1_PREFIX)

    # Root-level health endpoint for load balancers
    from app.api.v1.endpoints.health import router as health_router
    app.include_router(health_router, include_in_schema=False)

    setup_exception_handlers(app)

    return app


app = create_app()
