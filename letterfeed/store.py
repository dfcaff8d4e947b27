"""Object stores holding serialized feed documents.

The core only needs byte-addressable ``get``/``put`` by key.  There are no
transactions and no conditional writes.  All blocking calls are wrapped
with ``asyncio.to_thread()`` to keep the event loop free.
"""

from __future__ import annotations

import abc
import asyncio
import contextlib
import os
import tempfile
from pathlib import Path

import boto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError

from .config import StorageConfig
from .errors import FeedNotFoundError, StoreError

logger = structlog.get_logger()

_NOT_FOUND_CODES = {"NoSuchKey", "404", "NotFound"}


class ObjectStore(abc.ABC):
    """Byte-addressable key/value backend for feed documents."""

    async def start(self) -> None:
        """Acquire backend resources.  The default does nothing."""

    async def stop(self) -> None:
        """Release backend resources.  The default does nothing."""

    @property
    def is_ready(self) -> bool:
        return True

    @abc.abstractmethod
    async def get(self, key: str) -> bytes:
        """Return the bytes stored under *key*.

        Raises :class:`FeedNotFoundError` for unknown keys and
        :class:`StoreError` for any other backend failure.
        """

    @abc.abstractmethod
    async def put(self, key: str, data: bytes) -> None:
        """Store *data* under *key*, replacing any previous value.

        Raises :class:`StoreError` on backend failure.
        """


class S3FeedStore(ObjectStore):
    """Feed documents in an S3-compatible bucket."""

    def __init__(self, config: StorageConfig) -> None:
        self._config = config
        self._client = None  # type: ignore[assignment]

    @property
    def is_ready(self) -> bool:
        return self._client is not None

    async def start(self) -> None:
        """Create the boto3 S3 client."""
        kwargs: dict = {"region_name": self._config.region}
        if self._config.endpoint_url:
            kwargs["endpoint_url"] = self._config.endpoint_url
        self._client = await asyncio.to_thread(boto3.client, "s3", **kwargs)
        logger.info("feed_store_started", backend="s3", bucket=self._config.bucket)

    async def stop(self) -> None:
        """Clean up the boto3 client."""
        self._client = None
        logger.info("feed_store_stopped", backend="s3")

    def _object_key(self, key: str) -> str:
        prefix = self._config.prefix.strip("/")
        return f"{prefix}/{key}" if prefix else key

    async def get(self, key: str) -> bytes:
        assert self._client is not None, "S3 client not started"
        object_key = self._object_key(key)
        try:
            response = await asyncio.to_thread(
                self._client.get_object,
                Bucket=self._config.bucket,
                Key=object_key,
            )
            data: bytes = await asyncio.to_thread(response["Body"].read)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "")
            if error_code in _NOT_FOUND_CODES:
                raise FeedNotFoundError(key) from e
            raise StoreError(f"Failed to read s3://{self._config.bucket}/{object_key}: {error_code}") from e
        except BotoCoreError as e:
            raise StoreError(f"Failed to read s3://{self._config.bucket}/{object_key}: {e}") from e
        logger.debug("feed_downloaded", key=object_key, size=len(data))
        return data

    async def put(self, key: str, data: bytes) -> None:
        assert self._client is not None, "S3 client not started"
        object_key = self._object_key(key)
        try:
            await asyncio.to_thread(
                self._client.put_object,
                Bucket=self._config.bucket,
                Key=object_key,
                Body=data,
                ContentType="application/atom+xml",
            )
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            raise StoreError(f"Failed to write s3://{self._config.bucket}/{object_key}: {error_code}") from e
        except BotoCoreError as e:
            raise StoreError(f"Failed to write s3://{self._config.bucket}/{object_key}: {e}") from e
        logger.debug("feed_uploaded", key=object_key, size=len(data))


class LocalFeedStore(ObjectStore):
    """Feed documents as files in a local directory, for development."""

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)

    async def start(self) -> None:
        await asyncio.to_thread(self._root.mkdir, parents=True, exist_ok=True)
        logger.info("feed_store_started", backend="local", path=str(self._root))

    def _path(self, key: str) -> Path:
        path = self._root / key
        if path.parent != self._root:
            raise StoreError(f"Invalid feed key: {key!r}")
        return path

    async def get(self, key: str) -> bytes:
        path = self._path(key)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except FileNotFoundError as e:
            raise FeedNotFoundError(key) from e
        except OSError as e:
            raise StoreError(f"Failed to read {path}: {e}") from e

    async def put(self, key: str, data: bytes) -> None:
        path = self._path(key)
        try:
            await asyncio.to_thread(_replace_file, path, data)
        except OSError as e:
            raise StoreError(f"Failed to write {path}: {e}") from e


def _replace_file(path: Path, data: bytes) -> None:
    """Write *data* beside *path*, then swap it in with one rename.

    Readers see either the previous document or the new one, never a
    partial write.
    """
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as tmp:
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(tmp_name)
        raise


def create_store(config: StorageConfig) -> ObjectStore:
    """Build the store selected by ``config.backend``."""
    if config.backend == "local":
        return LocalFeedStore(config.local_path)
    return S3FeedStore(config)
