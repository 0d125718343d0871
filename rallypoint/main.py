import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rallypoint.config import get_settings
from rallypoint.infrastructure.database import engine, initialize_database
from rallypoint.interfaces.api.dependencies import get_push_gateway
from rallypoint.interfaces.api.routes import register_routes
from rallypoint.scheduler import shutdown_scheduler, start_scheduler


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and start the sweep on startup; release resources on shutdown."""

    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())
    initialize_database()
    gateway = get_push_gateway()
    if settings.scheduler_enabled:
        start_scheduler(gateway, settings)
    yield
    shutdown_scheduler()
    gateway.close()
    get_push_gateway.cache_clear()
    engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = get_settings()
    app = FastAPI(title="Rallypoint notifications", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_routes(app)
    return app


app = create_app()
