"""
File storage for uploaded recordings and documents.

Files are addressed by a relative key such as ``recordings/<uuid>.webm`` and exposed to
clients as ``/uploads/<key>``. The local backend writes under UPLOADS_DIR; the R2 backend
stores objects in a Cloudflare R2 bucket under the same keys.
"""

import logging
from pathlib import Path, PurePosixPath
from typing import Optional

import boto3
from botocore.client import Config
from botocore.exceptions import ClientError

from . import config

logger = logging.getLogger(__name__)

UPLOADS_URL_PREFIX = "/uploads/"

CONTENT_TYPES = {
    ".webm": "audio/webm",
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".ogg": "audio/ogg",
    ".pdf": "application/pdf",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
}


class UnsafePathError(ValueError):
    """Raised when a storage key would escape the uploads root"""


def content_type_for(key: str) -> str:
    return CONTENT_TYPES.get(PurePosixPath(key).suffix.lower(), "application/octet-stream")


def url_for_key(key: str) -> str:
    return f"{UPLOADS_URL_PREFIX}{key}"


def key_from_url(url: str) -> str:
    if url.startswith(UPLOADS_URL_PREFIX):
        return url[len(UPLOADS_URL_PREFIX):]
    return url.lstrip("/")


def validate_key(key: str) -> str:
    """Reject absolute keys, traversal segments and control characters"""
    if not key or key.startswith(("/", "\\")) or "\\" in key or "\x00" in key:
        raise UnsafePathError(f"Invalid storage key: {key!r}")
    if any(part in ("", ".", "..") for part in key.split("/")):
        raise UnsafePathError(f"Invalid storage key: {key!r}")
    return key


class LocalStorage:
    def __init__(self, root: str):
        self.root = Path(root)

    def _path(self, key: str) -> Path:
        validate_key(key)
        root = self.root.resolve()
        path = (root / key).resolve()
        if root not in path.parents:
            raise UnsafePathError(f"Storage key escapes uploads root: {key!r}")
        return path

    def save(self, key: str, data: bytes, content_type: Optional[str] = None) -> None:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        logger.info(f"💾 Stored {len(data)} bytes at {key}")

    def read(self, key: str) -> bytes:
        return self._path(key).read_bytes()

    def exists(self, key: str) -> bool:
        return self._path(key).is_file()

    def delete(self, key: str) -> bool:
        path = self._path(key)
        try:
            path.unlink()
        except FileNotFoundError:
            logger.warning(f"⚠️ File already missing, nothing to delete: {key}")
            return False
        logger.info(f"🗑️ Deleted {key}")
        return True


class R2Storage:
    def __init__(self, bucket: str):
        self.bucket = bucket
        self.client = boto3.client(
            "s3",
            endpoint_url=f"https://{config.R2_ACCOUNT_ID}.r2.cloudflarestorage.com",
            aws_access_key_id=config.R2_ACCESS_KEY_ID,
            aws_secret_access_key=config.R2_SECRET_ACCESS_KEY,
            config=Config(signature_version="s3v4"),
            region_name="auto",
        )

    def save(self, key: str, data: bytes, content_type: Optional[str] = None) -> None:
        validate_key(key)
        self.client.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=data,
            ContentType=content_type or content_type_for(key),
        )
        logger.info(f"✅ Uploaded {len(data)} bytes to R2: {key}")

    def read(self, key: str) -> bytes:
        validate_key(key)
        try:
            response = self.client.get_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in ("NoSuchKey", "404"):
                raise FileNotFoundError(key) from e
            raise
        return response["Body"].read()

    def exists(self, key: str) -> bool:
        validate_key(key)
        try:
            self.client.head_object(Bucket=self.bucket, Key=key)
            return True
        except ClientError:
            return False

    def delete(self, key: str) -> bool:
        validate_key(key)
        self.client.delete_object(Bucket=self.bucket, Key=key)
        logger.info(f"🗑️ Deleted R2 object {key}")
        return True


_storage = None


def get_storage():
    """Return the configured storage backend (created on first use)"""
    global _storage
    if _storage is None:
        if config.STORAGE_BACKEND == "r2":
            _storage = R2Storage(config.R2_BUCKET_NAME)
        else:
            _storage = LocalStorage(config.UPLOADS_DIR)
        logger.info(f"📁 Storage backend: {config.STORAGE_BACKEND}")
    return _storage


def reset_storage() -> None:
    global _storage
    _storage = None
