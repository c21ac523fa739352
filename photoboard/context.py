"""
Application context: the database client, media relay and token issuer
shared by every request, created on startup and closed on shutdown.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from photoboard.config import Settings
from photoboard.db import DbClient, InMemoryDbClient, PostgresDbClient
from photoboard.errors import DatabaseUnavailableError
from photoboard.media import InMemoryMediaRelay, MediaRelay, S3MediaRelay
from photoboard.tokens import TokenIssuer

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    settings: Settings
    db: DbClient
    media: MediaRelay
    tokens: TokenIssuer

    def close(self) -> None:
        self.db.close()


def build_db_client(settings: Settings) -> DbClient:
    if settings.use_in_memory_backends:
        return InMemoryDbClient()
    if not settings.database_url:
        raise DatabaseUnavailableError("DATABASE_URL is not configured")
    db = PostgresDbClient(settings.database_url)
    db.connect()
    return db


def build_media_relay(settings: Settings) -> MediaRelay:
    if settings.use_in_memory_backends or not settings.media_bucket:
        if not settings.use_in_memory_backends:
            logger.warning("MEDIA_BUCKET is not set; uploads are kept in memory")
        return InMemoryMediaRelay(key_prefix=settings.media_key_prefix)
    return S3MediaRelay(
        bucket=settings.media_bucket,
        region=settings.media_region or "",
        endpoint=settings.media_endpoint or "",
        access_key_id=settings.aws_access_key_id or "",
        secret_access_key=settings.aws_secret_access_key or "",
        public_base_url=settings.media_public_base_url,
        key_prefix=settings.media_key_prefix,
    )


def build_context(settings: Settings) -> AppContext:
    """
    Connect every backend named by ``settings``.

    Raises DatabaseUnavailableError when the database cannot be reached.
    """
    return AppContext(
        settings=settings,
        db=build_db_client(settings),
        media=build_media_relay(settings),
        tokens=TokenIssuer(
            secret_key=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            expires_in=settings.token_expires_in,
        ),
    )
