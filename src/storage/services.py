"""S3-compatible storage: content-addressed uploads and presigned URLs."""

import hashlib
import logging
import posixpath
import re

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from django.conf import settings
from rest_framework import status
from rest_framework.exceptions import APIException

from .models import StoredObject

logger = logging.getLogger(__name__)

_EXTENSION_RE = re.compile(r"[a-z0-9]+")


class StorageNotConfigured(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "S3 configuration is missing"
    default_code = "storage_not_configured"


class StorageError(APIException):
    """The S3 endpoint rejected the request; detail carries the SDK message."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Storage request failed"
    default_code = "storage_error"


def _require_config(*names: str) -> None:
    if not all(getattr(settings, name, "") for name in names):
        raise StorageNotConfigured()


def get_s3_client():
    """Build a boto3 S3 client from the ``S3_*`` settings."""
    addressing = "path" if settings.S3_FORCE_PATH_STYLE else "auto"
    return boto3.client(
        "s3",
        endpoint_url=settings.S3_ENDPOINT or None,
        region_name=settings.S3_REGION or None,
        aws_access_key_id=settings.S3_ACCESS_KEY_ID,
        aws_secret_access_key=settings.S3_SECRET_ACCESS_KEY,
        config=Config(signature_version="s3v4", s3={"addressing_style": addressing}),
    )


def content_key(digest: str, filename: str, folder: str = "") -> str:
    """``<folder>/<sha1>.<ext>``; the extension comes from the client's name.

    Only an alphanumeric extension is kept, anything else is dropped.
    """
    suffix = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    if not _EXTENSION_RE.fullmatch(suffix):
        suffix = ""
    name = f"{digest}.{suffix}" if suffix else digest
    return posixpath.join(folder, name) if folder else name


def public_url(key: str) -> str:
    return f"{settings.S3_ACCESS_HOST.rstrip('/')}/{key}"


def sha1_of(upload) -> str:
    sha = hashlib.sha1()
    for chunk in upload.chunks():
        sha.update(chunk)
    upload.seek(0)
    return sha.hexdigest()


def store_upload(upload, filename: str, uploader=None) -> tuple[StoredObject, bool]:
    """Upload a file unless the same bytes are already stored.

    Returns ``(stored_object, created)``. Identical bytes always map to the
    same key, so a repeated upload is answered from the database without
    touching the bucket.
    """
    _require_config("S3_BUCKET", "S3_ACCESS_KEY_ID", "S3_SECRET_ACCESS_KEY", "S3_ACCESS_HOST")

    digest = sha1_of(upload)
    key = content_key(digest, filename, settings.S3_FOLDER)
    existing = StoredObject.objects.filter(key=key).first()
    if existing is not None:
        logger.info("Upload %s already stored as %s", filename, key)
        return existing, False

    content_type = getattr(upload, "content_type", "") or "application/octet-stream"
    try:
        get_s3_client().put_object(
            Bucket=settings.S3_BUCKET,
            Key=key,
            Body=upload.read(),
            ContentType=content_type,
        )
    except (BotoCoreError, ClientError) as exc:
        logger.error("Upload of %s failed: %s", key, exc)
        raise StorageError(str(exc)) from exc

    stored, created = StoredObject.objects.get_or_create(
        key=key,
        defaults={
            "sha1": digest,
            "size": upload.size,
            "content_type": content_type,
            "original_name": filename[:255],
            "uploader": uploader,
        },
    )
    logger.info("Stored %s (%d bytes) as %s", filename, stored.size, key)
    return stored, created


def presigned_url(object_key: str, expires_in: int | None = None) -> str:
    """Time-limited GET URL for a private object."""
    _require_config("S3_BUCKET", "S3_ACCESS_KEY_ID", "S3_SECRET_ACCESS_KEY")
    try:
        return get_s3_client().generate_presigned_url(
            "get_object",
            Params={"Bucket": settings.S3_BUCKET, "Key": object_key},
            ExpiresIn=expires_in or settings.S3_PRESIGN_EXPIRES,
        )
    except (BotoCoreError, ClientError) as exc:
        logger.error("Presigning %s failed: %s", object_key, exc)
        raise StorageError(str(exc)) from exc


__all__ = [
    "StorageError",
    "StorageNotConfigured",
    "content_key",
    "get_s3_client",
    "presigned_url",
    "public_url",
    "store_upload",
]
