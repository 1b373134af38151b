"""Helpers for interacting with the object storage backing dataroom files."""

from __future__ import annotations

import logging
import os
import re
from datetime import timedelta
from typing import Optional
from uuid import uuid4

from minio import Minio
from minio.error import S3Error

# purpose: issue upload targets, download URLs and deletions for stored PDFs
# status: active

logger = logging.getLogger(__name__)

_MINIO_CLIENT: Optional[Minio] = None
_OBJECT_NAME = re.compile(r"[A-Za-z0-9_.-]+")
LOCAL_OBJECT_ROUTE = "/api/storage/objects"


def _get_upload_dir() -> str:
    """Return the configured upload directory, creating it when needed."""

    upload_dir = os.getenv("UPLOAD_DIR", "uploaded_files")
    os.makedirs(upload_dir, exist_ok=True)
    return upload_dir


def _bucket() -> str:
    return os.getenv("MINIO_BUCKET", "uploads")


def _url_expiry() -> timedelta:
    return timedelta(seconds=int(os.getenv("STORAGE_URL_EXPIRES_SECONDS", "3600")))


def _ensure_minio_client() -> Optional[Minio]:
    """Initialize and return a MinIO client when configuration is present."""

    global _MINIO_CLIENT
    endpoint = os.getenv("MINIO_ENDPOINT", "").strip()
    access_key = os.getenv("MINIO_ACCESS_KEY")
    secret_key = os.getenv("MINIO_SECRET_KEY")
    if not endpoint or not access_key or not secret_key:
        return None
    if _MINIO_CLIENT is None:
        client = Minio(
            endpoint,
            access_key=access_key,
            secret_key=secret_key,
            secure=endpoint.startswith("https"),
        )
        bucket = _bucket()
        if not client.bucket_exists(bucket):
            client.make_bucket(bucket)
        _MINIO_CLIENT = client
    return _MINIO_CLIENT


def _split_s3_ref(storage_ref: str) -> tuple[str, str]:
    _, _, remainder = storage_ref.partition("s3://")
    bucket, _, object_name = remainder.partition("/")
    if not bucket or not object_name:
        raise FileNotFoundError(f"Invalid s3 storage reference: {storage_ref}")
    return bucket, object_name


def local_path(object_name: str) -> str:
    """Resolve a local object name to its path inside the upload directory."""

    if not _OBJECT_NAME.fullmatch(object_name) or object_name.startswith("."):
        raise FileNotFoundError(f"Invalid object name: {object_name}")
    return os.path.join(_get_upload_dir(), object_name)


def _local_url(object_name: str) -> str:
    base = os.getenv("APP_BASE_URL", "").rstrip("/")
    return f"{base}{LOCAL_OBJECT_ROUTE}/{object_name}"


def generate_upload_target() -> tuple[str, str]:
    """Reserve a fresh object key and return ``(storage_ref, upload_url)``.

    The client PUTs the PDF bytes to ``upload_url`` and then registers the
    file with ``storage_ref``.
    """

    object_name = uuid4().hex
    client = _ensure_minio_client()
    if client:
        bucket = _bucket()
        url = client.presigned_put_object(bucket, object_name, expires=_url_expiry())
        return f"s3://{bucket}/{object_name}", url
    return object_name, _local_url(object_name)


def get_url(storage_ref: str) -> str | None:
    """Return a download URL for the stored object, or None when it is gone."""

    if storage_ref.startswith("s3://"):
        client = _ensure_minio_client()
        if not client:
            raise FileNotFoundError("Object storage client unavailable for presigned URL")
        bucket, object_name = _split_s3_ref(storage_ref)
        if not object_exists(storage_ref):
            return None
        return client.presigned_get_object(bucket, object_name, expires=_url_expiry())
    if not object_exists(storage_ref):
        return None
    return _local_url(storage_ref)


def object_exists(storage_ref: str) -> bool:
    if storage_ref.startswith("s3://"):
        client = _ensure_minio_client()
        if not client:
            raise FileNotFoundError("Object storage client unavailable for s3 path")
        bucket, object_name = _split_s3_ref(storage_ref)
        try:
            client.stat_object(bucket, object_name)
        except S3Error as exc:
            if exc.code in ("NoSuchKey", "NoSuchObject"):
                return False
            raise
        return True
    try:
        path = local_path(storage_ref)
    except FileNotFoundError:
        return False
    return os.path.exists(path)


def delete_object(storage_ref: str) -> None:
    """Release a stored object. Missing objects are ignored."""

    if storage_ref.startswith("s3://"):
        client = _ensure_minio_client()
        if not client:
            raise FileNotFoundError("Object storage client unavailable for s3 path")
        bucket, object_name = _split_s3_ref(storage_ref)
        client.remove_object(bucket, object_name)
        logger.debug("released object %s", storage_ref)
        return
    try:
        path = local_path(storage_ref)
    except FileNotFoundError:
        logger.warning("skipping release of malformed storage reference %r", storage_ref)
        return
    if os.path.exists(path):
        os.remove(path)
        logger.debug("released object %s", storage_ref)


def save_object(object_name: str, data: bytes) -> int:
    """Write an uploaded payload to the local backend and return its size."""

    path = local_path(object_name)
    with open(path, "wb") as handle:
        handle.write(data)
    return len(data)


def load_object(object_name: str) -> bytes:
    path = local_path(object_name)
    with open(path, "rb") as handle:
        return handle.read()
