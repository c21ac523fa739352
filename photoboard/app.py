"""
FastAPI application entry point for the photoboard backend.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from photoboard.config import Settings, get_settings
from photoboard.context import AppContext, build_context
from photoboard.errors import DatabaseUnavailableError
from photoboard.routes import router

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None, context: Optional[AppContext] = None
) -> FastAPI:
    """
    Build the app. ``context`` short-circuits backend construction (tests);
    otherwise backends are connected in the lifespan and closed on shutdown.
    """
    settings = settings or (context.settings if context else get_settings())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        ctx = context
        if ctx is None:
            try:
                ctx = build_context(settings)
            except DatabaseUnavailableError as exc:
                logger.critical("Database connection error: %s", exc)
                raise
        app.state.context = ctx
        try:
            yield
        finally:
            ctx.close()

    app = FastAPI(title="Photoboard Backend", version="0.1.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router, prefix=settings.api_prefix)
    return app
