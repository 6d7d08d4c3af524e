"""Storage for uploaded fan art: local disk or an S3-compatible object store.

Both backends expose ``put(data, filename) -> str`` and return where the file
ended up (a filesystem path for local disk, a URL for the object store).
Blocking I/O runs in a worker thread so uploads don't stall the event loop.
"""

import asyncio
import logging
import mimetypes
import time
from pathlib import Path
from typing import Protocol

import boto3

from creator_api.config import STORAGE_BACKENDS, Settings

logger = logging.getLogger(__name__)


class BlobStore(Protocol):
    async def put(self, data: bytes, filename: str) -> str: ...

    async def delete(self, location: str) -> None: ...


def stored_name(filename: str) -> str:
    """Timestamp-prefixed, path-free object name: ``<epoch-ms>-<basename>``."""
    base = Path(filename or "upload").name or "upload"
    return f"{int(time.time() * 1000)}-{base}"


class LocalBlobStore:
    def __init__(self, upload_dir: str | Path):
        self.upload_dir = Path(upload_dir)

    async def put(self, data: bytes, filename: str) -> str:
        path = self.upload_dir / stored_name(filename)
        await asyncio.to_thread(self._write, path, data)
        logger.info("Stored upload on disk: %s (%d bytes)", path, len(data))
        return str(path)

    async def delete(self, location: str) -> None:
        await asyncio.to_thread(Path(location).unlink, missing_ok=True)
        logger.info("Removed upload from disk: %s", location)

    @staticmethod
    def _write(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)


class ObjectStoreBlobStore:
    """S3-compatible bucket. Credentials come from the standard AWS env/config chain."""

    def __init__(
        self,
        bucket: str,
        endpoint_url: str | None = None,
        region: str | None = None,
        public_url: str | None = None,
        client=None,
    ):
        self.bucket = bucket
        self.endpoint_url = endpoint_url
        self.public_url = public_url
        self._client = client or boto3.client("s3", endpoint_url=endpoint_url, region_name=region)

    async def put(self, data: bytes, filename: str) -> str:
        key = stored_name(filename)
        content_type = mimetypes.guess_type(key)[0] or "application/octet-stream"
        await asyncio.to_thread(
            self._client.put_object,
            Bucket=self.bucket,
            Key=key,
            Body=data,
            ContentType=content_type,
        )
        logger.info("Stored upload in bucket %s: %s (%d bytes)", self.bucket, key, len(data))
        return self.url_for(key)

    async def delete(self, location: str) -> None:
        # Keys are flat (see stored_name), so the last path segment is the key.
        key = location.rsplit("/", 1)[-1]
        await asyncio.to_thread(self._client.delete_object, Bucket=self.bucket, Key=key)
        logger.info("Removed upload from bucket %s: %s", self.bucket, key)

    def url_for(self, key: str) -> str:
        if self.public_url:
            return f"{self.public_url.rstrip('/')}/{key}"
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket}/{key}"
        return f"https://{self.bucket}.s3.amazonaws.com/{key}"


def build_blob_store(settings: Settings) -> BlobStore:
    """Pick the storage backend named by STORAGE_BACKEND."""
    backend = settings.storage_backend
    if backend == "local":
        return LocalBlobStore(settings.upload_dir)
    if backend == "objectStore":
        if not settings.object_store_bucket:
            raise ValueError("STORAGE_BACKEND=objectStore requires OBJECT_STORE_BUCKET")
        return ObjectStoreBlobStore(
            bucket=settings.object_store_bucket,
            endpoint_url=settings.object_store_endpoint_url,
            region=settings.object_store_region,
            public_url=settings.object_store_public_url,
        )
    raise ValueError(f"Unknown STORAGE_BACKEND: {backend}. Supported: {sorted(STORAGE_BACKENDS)}")
