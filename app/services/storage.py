import logging
import mimetypes
import uuid
from abc import ABC, abstractmethod
from functools import lru_cache
from pathlib import Path
from typing import Optional

import boto3
from botocore.exceptions import ClientError

from app.core.config import settings
from app.core.exceptions import BlobStorageError

logger = logging.getLogger(__name__)


def generate_key(prefix: str, filename: Optional[str] = None, content_type: Optional[str] = None) -> str:
    extension = Path(filename).suffix.lower() if filename else ""
    if not extension and content_type:
        extension = mimetypes.guess_extension(content_type) or ""
    return f"{prefix}/{uuid.uuid4().hex}{extension}"


class BlobStorage(ABC):
    """Binary content addressed by generated keys."""

    @abstractmethod
    def put(self, content: bytes, *, prefix: str, filename: Optional[str] = None, content_type: Optional[str] = None) -> str:
        pass

    @abstractmethod
    def get(self, key: str) -> bytes:
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        pass

    @abstractmethod
    def exists(self, key: str) -> bool:
        pass

    @abstractmethod
    def url_for(self, key: str) -> str:
        pass


class S3BlobStorage(BlobStorage):
    def __init__(self, bucket_name: Optional[str] = None, region: Optional[str] = None):
        self.region = region or settings.AWS_REGION
        self.bucket_name = bucket_name or settings.S3_BUCKET_NAME
        if not self.bucket_name:
            raise BlobStorageError("S3_BUCKET_NAME must be set when STORAGE_BACKEND is 's3'")
        self.s3_client = boto3.client('s3', region_name=self.region)

    def put(self, content: bytes, *, prefix: str, filename: Optional[str] = None, content_type: Optional[str] = None) -> str:
        key = generate_key(prefix, filename, content_type)
        content_type = content_type or mimetypes.guess_type(key)[0] or 'application/octet-stream'
        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=content,
                ContentType=content_type,
            )
        except ClientError as e:
            raise BlobStorageError(f"Failed to upload object: {str(e)}", key=key)
        return key

    def get(self, key: str) -> bytes:
        try:
            response = self.s3_client.get_object(Bucket=self.bucket_name, Key=key)
            return response['Body'].read()
        except ClientError as e:
            raise BlobStorageError(f"Failed to read object: {str(e)}", key=key)

    def delete(self, key: str) -> None:
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=key)
        except ClientError as e:
            raise BlobStorageError(f"Failed to delete object: {str(e)}", key=key)

    def exists(self, key: str) -> bool:
        try:
            self.s3_client.head_object(Bucket=self.bucket_name, Key=key)
            return True
        except ClientError as e:
            if e.response.get('Error', {}).get('Code') in ('404', 'NoSuchKey', 'NotFound'):
                return False
            raise BlobStorageError(f"Failed to check object: {str(e)}", key=key)

    def url_for(self, key: str) -> str:
        return f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com/{key}"


class LocalBlobStorage(BlobStorage):
    """Stores blobs as files under a root directory; used for development and tests."""

    def __init__(self, root: Optional[str] = None):
        self.root = Path(root or settings.LOCAL_STORAGE_PATH).resolve()
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if self.root not in path.parents:
            raise BlobStorageError("Invalid storage key", key=key)
        return path

    def put(self, content: bytes, *, prefix: str, filename: Optional[str] = None, content_type: Optional[str] = None) -> str:
        key = generate_key(prefix, filename, content_type)
        path = self._path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)
        except OSError as e:
            raise BlobStorageError(f"Failed to write blob: {str(e)}", key=key)
        return key

    def get(self, key: str) -> bytes:
        try:
            return self._path(key).read_bytes()
        except OSError as e:
            raise BlobStorageError(f"Failed to read blob: {str(e)}", key=key)

    def delete(self, key: str) -> None:
        try:
            self._path(key).unlink()
        except FileNotFoundError:
            logger.warning(f"Blob {key} already absent")
        except OSError as e:
            raise BlobStorageError(f"Failed to delete blob: {str(e)}", key=key)

    def exists(self, key: str) -> bool:
        return self._path(key).is_file()

    def url_for(self, key: str) -> str:
        return self._path(key).as_uri()


@lru_cache()
def get_blob_storage() -> BlobStorage:
    if settings.STORAGE_BACKEND == "s3":
        return S3BlobStorage()
    if settings.STORAGE_BACKEND == "local":
        return LocalBlobStorage()
    raise BlobStorageError(f"Unknown storage backend: {settings.STORAGE_BACKEND}")
