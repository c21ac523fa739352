"""
Bearer token issuance for logged-in accounts.
"""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from photoboard.errors import InvalidTokenError

logger = logging.getLogger(__name__)


class TokenIssuer:
    """Signs and verifies short-lived JWTs carrying a ``userId`` claim."""

    def __init__(
        self,
        secret_key: Optional[str] = None,
        algorithm: str = "HS256",
        expires_in: int = 3600,
    ):
        if not secret_key:
            logger.warning(
                "No JWT_SECRET provided - using generated secret. "
                "Tokens will not survive a restart."
            )
            secret_key = secrets.token_urlsafe(64)
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expires_in = expires_in

    def issue(self, user_id: str) -> str:
        now = datetime.now(tz=timezone.utc)
        payload = {
            "userId": user_id,
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(seconds=self.expires_in)).timestamp()),
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def decode(self, token: str) -> dict:
        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except jwt.PyJWTError as exc:
            raise InvalidTokenError(str(exc)) from exc
