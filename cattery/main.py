"""Cattery API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map CatteryError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Persistence gateway built on startup via lifespan, disposed on shutdown

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Gateway stored on app.state, handed to engines by dependencies (no module global)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cattery.api.error_handlers import register_error_handlers
from cattery.api.routes import cats, health, users
from cattery.config import get_settings
from cattery.infrastructure.observability import setup_logging
from cattery.infrastructure.persistence import PersistenceGateway

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format, settings.database_echo)
    app.state.gateway = PersistenceGateway(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        echo=settings.database_echo,
    )
    if settings.auto_create_schema:
        await app.state.gateway.create_schema()
    logger.info(f"Cattery API started ({settings.environment})")
    yield
    await app.state.gateway.dispose()
    logger.info("Cattery API shutting down")


app = FastAPI(
    title="Cattery API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(cats.router)
app.include_router(users.router)

register_error_handlers(app, expose_details=not settings.is_production)
