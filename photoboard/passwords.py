"""
Credential hashing and account lookup by username/password.
"""

from __future__ import annotations

import logging

import bcrypt

from photoboard.db import AccountRecord, DbClient
from photoboard.errors import InvalidCredentialsError

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of a password.
BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str, *, rounds: int) -> str:
    """Hash with the work factor configured by ``Settings.bcrypt_rounds``."""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_encode(password), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is malformed")
        return False


def find_account_by_credentials(
    db: DbClient, username: str, password: str
) -> AccountRecord:
    """
    Return the first account with ``username`` whose password matches.

    Usernames are not unique, so every candidate is checked in store order.
    """
    for account in db.find_accounts_by_username(username):
        if verify_password(password, account.password_hash):
            return account
    raise InvalidCredentialsError(username)
