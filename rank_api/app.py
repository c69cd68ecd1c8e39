"""
FastAPI application entry point for the rank API.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from rank_api.errors import setup_exception_handlers
from rank_api.metrics import install_metrics_middleware
from rank_api.routes import router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting rank API")
    yield
    logger.info("Shutting down rank API")


def create_app() -> FastAPI:
    app = FastAPI(title="Rank API", version="0.1.0", lifespan=lifespan)
    setup_exception_handlers(app)
    install_metrics_middleware(app)
    app.include_router(router)
    return app
