"""Attachment storage backends.

Ticket uploads are written once and never rewritten; both backends return a
storage key (``<folder>/<filename>``) that is later turned into a URL by
``download_url``.
"""

import uuid
from pathlib import Path
from typing import Any, Protocol

import boto3
from botocore.config import Config as BotoConfig

from helpdesk.core.config import settings

# S3 presign maximum
PRESIGNED_URL_EXPIRES_SECONDS = 7 * 24 * 3600


class StorageBackend(Protocol):
    def upload(
        self, file_content: bytes, folder: str, filename: str, content_type: str | None = None
    ) -> str:
        """Store the file and return its key."""
        ...

    def download_url(self, path: str) -> str:
        """Return a URL the file can be fetched from."""
        ...


class LocalStorage:
    """Files under ``base_dir``, served by the app's /uploads static mount."""

    def __init__(self, base_dir: str, public_base_url: str | None = None) -> None:
        self.base_dir = Path(base_dir).resolve()
        self.public_base_url = (public_base_url or f"{settings.BACKEND_URL}/uploads").rstrip("/")

    def upload(
        self, file_content: bytes, folder: str, filename: str, content_type: str | None = None
    ) -> str:
        key = f"{folder}/{filename}"
        target = self._path_for(key)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(file_content)
        return key

    def download_url(self, path: str) -> str:
        return f"{self.public_base_url}/{path}"

    def _path_for(self, key: str) -> Path:
        target = (self.base_dir / key).resolve()
        if not target.is_relative_to(self.base_dir) or target == self.base_dir:
            raise ValueError(f"Path traversal attempt detected: {key}")
        return target


class R2Storage:
    """Cloudflare R2 bucket accessed through the S3 API."""

    def __init__(self, client: Any, bucket: str, public_url: str = "") -> None:
        self.client = client
        self.bucket = bucket
        self.public_url = public_url.rstrip("/")

    @classmethod
    def from_settings(cls) -> "R2Storage":
        client = boto3.client(
            "s3",
            endpoint_url=settings.r2_endpoint_url,
            aws_access_key_id=settings.R2_ACCESS_KEY_ID,
            aws_secret_access_key=settings.R2_SECRET_ACCESS_KEY,
            config=BotoConfig(
                signature_version="s3v4",
                retries={"max_attempts": 3, "mode": "standard"},
            ),
            region_name="auto",
        )
        return cls(client, settings.R2_BUCKET_NAME, settings.R2_PUBLIC_URL)

    def upload(
        self, file_content: bytes, folder: str, filename: str, content_type: str | None = None
    ) -> str:
        key = f"{folder}/{filename}"
        extra: dict[str, str] = {"ContentType": content_type} if content_type else {}
        self.client.put_object(Bucket=self.bucket, Key=key, Body=file_content, **extra)
        return key

    def download_url(self, path: str) -> str:
        if self.public_url:
            return f"{self.public_url}/{path}"
        url: str = self.client.generate_presigned_url(
            "get_object",
            Params={"Bucket": self.bucket, "Key": path},
            ExpiresIn=PRESIGNED_URL_EXPIRES_SECONDS,
        )
        return url


def get_storage() -> StorageBackend:
    if settings.STORAGE_BACKEND == "r2":
        return R2Storage.from_settings()
    return LocalStorage(settings.UPLOAD_DIR)


def generate_unique_filename(original_filename: str) -> str:
    extension = Path(original_filename).suffix.lower()
    return f"{uuid.uuid4()}{extension}"
