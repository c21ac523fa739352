"""
Media relay for uploaded images: S3-compatible object storage and an
in-memory double for testing.
"""

from __future__ import annotations

import logging
import mimetypes
import os
import uuid
from dataclasses import dataclass, field
from typing import Optional, Protocol

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from photoboard.errors import MediaRelayError

logger = logging.getLogger(__name__)


class MediaRelay(Protocol):
    """Forwards image bytes to a media host and returns their public URL."""

    def upload(
        self, data: bytes, *, filename: str | None = None, content_type: str | None = None
    ) -> str:
        ...


def _object_key(prefix: str, filename: str | None, content_type: str | None) -> str:
    ext = os.path.splitext(filename or "")[1].lower()
    if not ext and content_type:
        ext = mimetypes.guess_extension(content_type) or ""
    key = f"{uuid.uuid4().hex}{ext}"
    prefix = prefix.strip("/")
    return f"{prefix}/{key}" if prefix else key


@dataclass
class InMemoryMediaRelay:
    """Test double for media uploads."""

    base_url: str = "https://media.example.test"
    key_prefix: str = "photos"
    fail_uploads: bool = False
    stored_objects: dict = field(default_factory=dict)

    def upload(
        self, data: bytes, *, filename: str | None = None, content_type: str | None = None
    ) -> str:
        if self.fail_uploads:
            raise MediaRelayError("In-memory relay configured to fail")
        key = _object_key(self.key_prefix, filename, content_type)
        self.stored_objects[key] = data
        return f"{self.base_url}/{key}"


@dataclass
class S3MediaRelay:
    """
    Uploads images to an S3-compatible bucket with public-read URLs.
    """

    bucket: str
    region: str = ""
    endpoint: str = ""
    access_key_id: str = ""
    secret_access_key: str = ""
    public_base_url: Optional[str] = None
    key_prefix: str = "photos"

    def __post_init__(self):
        config = Config(signature_version="s3v4")
        self._client = boto3.client(
            "s3",
            endpoint_url=self.endpoint or None,
            region_name=self.region or None,
            aws_access_key_id=self.access_key_id or None,
            aws_secret_access_key=self.secret_access_key or None,
            config=config,
        )

    def public_url(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url.rstrip('/')}/{key}"
        if self.endpoint:
            return f"{self.endpoint.rstrip('/')}/{self.bucket}/{key}"
        region = self.region or "us-east-1"
        return f"https://{self.bucket}.s3.{region}.amazonaws.com/{key}"

    def upload(
        self, data: bytes, *, filename: str | None = None, content_type: str | None = None
    ) -> str:
        key = _object_key(self.key_prefix, filename, content_type)
        try:
            self._client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type or "application/octet-stream",
            )
        except (BotoCoreError, ClientError) as exc:
            raise MediaRelayError(f"Upload of {key} failed: {exc}") from exc
        return self.public_url(key)
