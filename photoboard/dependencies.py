"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

from fastapi import Request

from photoboard.config import Settings
from photoboard.context import AppContext
from photoboard.db import DbClient
from photoboard.media import MediaRelay
from photoboard.tokens import TokenIssuer


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def get_db_client(request: Request) -> DbClient:
    return get_context(request).db


def get_media_relay(request: Request) -> MediaRelay:
    return get_context(request).media


def get_token_issuer(request: Request) -> TokenIssuer:
    return get_context(request).tokens


def get_app_settings(request: Request) -> Settings:
    return get_context(request).settings
