"""
Domain errors raised by the stores, the like toggle and the media relay.

Routes translate these into HTTP status codes; nothing here is retried.
"""

from __future__ import annotations


class PhotoboardError(Exception):
    """Base class for every error raised by the photoboard package."""


class PhotoNotFoundError(PhotoboardError):
    def __init__(self, photo_id: str):
        super().__init__(f"Photo not found: {photo_id}")
        self.photo_id = photo_id


class InvalidCredentialsError(PhotoboardError):
    """No account matches the supplied username/password pair."""


class InvalidTokenError(PhotoboardError):
    """A bearer token failed signature or expiry checks."""


class MediaRelayError(PhotoboardError):
    """The media host rejected or failed an upload."""


class DatabaseUnavailableError(PhotoboardError):
    """The database could not be reached at startup."""


class LikeInvariantError(PhotoboardError):
    """A photo's like count disagrees with its set of likers."""
