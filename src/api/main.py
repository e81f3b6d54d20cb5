"""FastAPI application entry point."""
from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.errors import register_error_handlers
from src.api.routes import admin, chat, health, listings
from src.config import settings
from src.infrastructure.database.connection import dispose_engine
from src.logging_config import configure_logging

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    configure_logging(settings.log_level)
    logger.info("marketplace_starting")
    yield
    await dispose_engine()
    logger.info("marketplace_stopping")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Baraholka Marketplace",
        description="Classified listings with moderation, discovery and buyer/seller chat.",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    app.include_router(health.router)
    app.include_router(listings.router)
    app.include_router(chat.router)
    app.include_router(admin.router)

    return app


app = create_app()
