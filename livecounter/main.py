"""livecounter — FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from livecounter.adapters.persistence.database import engine
from livecounter.config import settings
from livecounter.infrastructure.api.dependencies import get_actor_registry
from livecounter.infrastructure.api.routes_counter import router as counter_router
from livecounter.infrastructure.api.routes_health import router as health_router
from livecounter.infrastructure.api.routes_realtime import router as realtime_router
from livecounter.logging_config import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    try:
        async with engine.begin():
            pass  # Connection pool warmed up
        logger.info("Database connection established")
    except Exception as e:
        logger.warning("Database not available on startup: %s", e)
    yield
    registry = app.dependency_overrides.get(get_actor_registry, get_actor_registry)()
    await registry.shutdown()
    await engine.dispose()


def create_app() -> FastAPI:
    configure_logging(settings.log_level)

    app = FastAPI(
        title="livecounter",
        description="Shared counter with realtime broadcast to every viewer",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routers
    app.include_router(realtime_router)
    app.include_router(health_router, prefix="/api")
    app.include_router(counter_router, prefix="/api")

    return app


app = create_app()
