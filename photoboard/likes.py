"""
Like/unlike toggle for photos.

The effect of a toggle is decided by the current membership of the actor in
``liked_by``: a member is removed (unlike), anyone else is appended (like).
Stores call :func:`apply_toggle` inside their own per-photo critical section
so concurrent toggles on the same photo cannot lose updates.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING

from photoboard.errors import LikeInvariantError

if TYPE_CHECKING:
    from photoboard.db import DbClient, PhotoRecord

logger = logging.getLogger(__name__)


def check_like_invariant(photo: "PhotoRecord") -> None:
    if len(set(photo.liked_by)) != len(photo.liked_by):
        raise LikeInvariantError(f"Duplicate likers on photo {photo.photo_id}")
    if photo.likes != len(photo.liked_by):
        raise LikeInvariantError(
            f"Photo {photo.photo_id} has likes={photo.likes} "
            f"but {len(photo.liked_by)} likers"
        )


def apply_toggle(photo: "PhotoRecord", actor_id: str) -> "PhotoRecord":
    """
    Return a copy of ``photo`` with ``actor_id`` liked or unliked.

    The input record is left untouched.
    """
    liked_by = list(photo.liked_by)
    if actor_id in liked_by:
        liked_by.remove(actor_id)
    else:
        liked_by.append(actor_id)
    toggled = replace(photo, liked_by=liked_by, likes=len(liked_by))
    check_like_invariant(toggled)
    return toggled


def toggle_like(db: "DbClient", photo_id: str, actor_id: str) -> "PhotoRecord":
    """Toggle ``actor_id``'s like on a stored photo and return the new state."""
    photo = db.toggle_like(photo_id, actor_id)
    logger.debug(
        "Toggled like on photo %s by %s (likes=%d)", photo_id, actor_id, photo.likes
    )
    return photo
