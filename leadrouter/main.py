"""leadrouter — FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from leadrouter.adapters.persistence.database import engine
from leadrouter.config import settings
from leadrouter.infrastructure.api.dependencies import seed_memory_store
from leadrouter.infrastructure.api.routes_agents import router as agents_router
from leadrouter.infrastructure.api.routes_assignments import router as assignments_router
from leadrouter.infrastructure.api.routes_health import router as health_router
from leadrouter.infrastructure.api.routes_leads import router as leads_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    if settings.storage_backend == "memory":
        if settings.seed_csv:
            await seed_memory_store(Path(settings.seed_csv))
    else:
        try:
            async with engine.begin():
                pass  # Connection pool warmed up
            logger.info("Database connection established")
        except Exception as e:
            logger.warning("Database not available on startup: %s", e)
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    app = FastAPI(
        title="leadrouter — loan lead assignment engine",
        description="Weighted agent matching, round-robin fallback and capacity-safe claims",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS for the admin dashboard
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routers
    app.include_router(health_router, prefix="/api")
    app.include_router(leads_router, prefix="/api")
    app.include_router(assignments_router, prefix="/api")
    app.include_router(agents_router, prefix="/api")

    return app


app = create_app()
