"""
Object storage for original uploaded files.

S3Storage talks to any S3-compatible service (AWS S3, MinIO) through boto3.
LocalStorage keeps objects on disk for development and tests.
"""

import logging
from pathlib import Path
from typing import Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..config import Settings, get_settings

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when an object storage operation fails."""

    pass


class Storage(Protocol):
    """Interface shared by storage backends."""

    def upload(self, key: str, data: bytes, content_type: str) -> None: ...

    def download(self, key: str) -> bytes: ...

    def delete(self, key: str) -> None: ...


def build_storage_key(document_id: str, filename: str) -> str:
    """Storage key for a document's original file."""
    name = Path(filename.replace("\\", "/")).name or "document"
    return f"documents/{document_id}/{name}"


class S3Storage:
    """Storage backed by an S3-compatible bucket."""

    def __init__(
        self,
        bucket: str,
        client=None,
        endpoint_url: str | None = None,
        region: str | None = None,
        access_key_id: str | None = None,
        secret_access_key: str | None = None,
    ):
        """
        Initialize the S3 storage.

        Args:
            bucket: Bucket name.
            client: Pre-built boto3 S3 client. If None, one is created.
            endpoint_url: Custom endpoint (e.g. MinIO). None for AWS.
            region: AWS region name.
            access_key_id: Static access key. None uses the default chain.
            secret_access_key: Static secret key.
        """
        self.bucket = bucket
        self.client = client or boto3.client(
            "s3",
            endpoint_url=endpoint_url,
            region_name=region,
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
        )

    def ensure_bucket(self) -> None:
        """Create the bucket if it does not exist."""
        try:
            self.client.head_bucket(Bucket=self.bucket)
            return
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code")
            if code not in ("404", "NoSuchBucket", "NotFound"):
                raise StorageError(f"Failed to check bucket existence: {e}") from e
        except BotoCoreError as e:
            raise StorageError(f"Failed to check bucket existence: {e}") from e

        logger.info("Creating bucket %s", self.bucket)
        try:
            self.client.create_bucket(Bucket=self.bucket)
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"Failed to create bucket: {e}") from e

    def upload(self, key: str, data: bytes, content_type: str) -> None:
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error("Failed to upload %s to S3: %s", key, e)
            raise StorageError(f"Failed to upload to S3: {e}") from e

    def download(self, key: str) -> bytes:
        try:
            obj = self.client.get_object(Bucket=self.bucket, Key=key)
            return obj["Body"].read()
        except (BotoCoreError, ClientError) as e:
            logger.error("Failed to download %s from S3: %s", key, e)
            raise StorageError(f"Failed to get object from S3: {e}") from e

    def delete(self, key: str) -> None:
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            logger.error("Failed to delete %s from S3: %s", key, e)
            raise StorageError(f"Failed to delete from S3: {e}") from e


class LocalStorage:
    """Storage backed by a local directory."""

    def __init__(self, base_dir: str | Path):
        self.base_dir = Path(base_dir).resolve()

    def _path(self, key: str) -> Path:
        path = (self.base_dir / key).resolve()
        if not path.is_relative_to(self.base_dir):
            raise StorageError(f"Invalid storage key: {key}")
        return path

    def upload(self, key: str, data: bytes, content_type: str) -> None:
        path = self._path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise StorageError(f"Failed to store {key}: {e}") from e

    def download(self, key: str) -> bytes:
        try:
            return self._path(key).read_bytes()
        except OSError as e:
            raise StorageError(f"Failed to read {key}: {e}") from e

    def delete(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to delete {key}: {e}") from e


def create_storage(settings: Settings) -> Storage:
    """Build the storage backend selected in settings."""
    if settings.storage_backend == "s3":
        storage = S3Storage(
            bucket=settings.s3_bucket_name,
            endpoint_url=settings.s3_endpoint_url,
            region=settings.s3_region,
            access_key_id=settings.s3_access_key_id,
            secret_access_key=settings.s3_secret_access_key,
        )
        storage.ensure_bucket()
        return storage
    return LocalStorage(settings.local_storage_dir)


# Singleton instance for convenience
_storage: Storage | None = None


def get_storage() -> Storage:
    """Get or create the storage singleton."""
    global _storage
    if _storage is None:
        _storage = create_storage(get_settings())
    return _storage
