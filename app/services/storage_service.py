"""
Object storage service for poster/backdrop uploads (MinIO / S3-compatible)

Features:
- Presigned PUT URLs so clients upload straight to the bucket
- Public read URL for each uploaded object
- Object deletion from a bare key or a full URL
- Bucket bootstrap with a public-read policy
"""

import json
import logging
import os
import uuid
from typing import Optional, Tuple
from urllib.parse import urlparse

import boto3
from botocore.client import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from app.config import settings

logger = logging.getLogger(__name__)

PRESIGNED_URL_EXPIRY = 15 * 60  # seconds
DEFAULT_CONTENT_TYPE = "image/jpeg"


class StorageError(Exception):
    """Object store operation failed"""


def build_object_key(filename: str) -> str:
    """
    Unique object key derived from a client filename.

    'poster.jpg' -> 'poster_1a2b3c4d.jpg'; directory parts are dropped.
    """
    base = os.path.basename(filename.replace("\\", "/")).strip()
    stem, ext = os.path.splitext(base)
    if not ext and base.startswith(".") and base.count(".") == 1:
        # ".jpg" is an extension with an empty stem
        stem, ext = "", base
    return f"{stem}_{uuid.uuid4().hex[:8]}{ext}"


def object_key_from_path(path: str) -> str:
    """Trailing path segment of a key or URL, without any query string"""
    key = path.split("?", 1)[0]
    return key.split("/")[-1]


class StorageService:
    """
    Thin wrapper around a boto3 S3 client bound to one bucket

    Usage:
        storage = StorageService()
        presigned_url, public_url, key = storage.generate_presigned_url("poster.jpg", "image/jpeg")
        storage.delete_file(public_url)
    """

    def __init__(self, client=None, bucket: Optional[str] = None, public_url: Optional[str] = None):
        self.bucket = bucket or settings.STORAGE_BUCKET
        self.public_url = public_url or settings.STORAGE_PUBLIC_URL
        self.client = client or self._create_client()

    @staticmethod
    def _create_client():
        endpoint = settings.STORAGE_ENDPOINT
        for prefix in ("https://", "http://"):
            if endpoint.startswith(prefix):
                endpoint = endpoint[len(prefix):]
        scheme = "https" if settings.STORAGE_USE_SSL else "http"

        return boto3.client(
            "s3",
            endpoint_url=f"{scheme}://{endpoint}",
            aws_access_key_id=settings.STORAGE_ACCESS_KEY_ID or None,
            aws_secret_access_key=settings.STORAGE_SECRET_ACCESS_KEY or None,
            region_name=settings.STORAGE_REGION,
            config=BotoConfig(signature_version="s3v4", s3={"addressing_style": "path"}),
        )

    # ============================================
    # Bucket bootstrap
    # ============================================

    def ensure_bucket(self) -> None:
        """Create the bucket if missing and allow anonymous reads of its objects"""
        try:
            self.client.head_bucket(Bucket=self.bucket)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code")
            if code not in ("404", "NoSuchBucket", "NotFound"):
                raise StorageError(f"failed to check bucket existence: {str(e)}") from e
            try:
                self.client.create_bucket(Bucket=self.bucket)
            except (ClientError, BotoCoreError) as create_error:
                raise StorageError(f"failed to create bucket: {str(create_error)}") from create_error
            logger.info(f"Bucket created: {self.bucket}")
        except BotoCoreError as e:
            raise StorageError(f"failed to check bucket existence: {str(e)}") from e

        policy = {
            "Version": "2012-10-17",
            "Statement": [
                {
                    "Effect": "Allow",
                    "Principal": {"AWS": ["*"]},
                    "Action": ["s3:GetObject"],
                    "Resource": [f"arn:aws:s3:::{self.bucket}/*"],
                }
            ],
        }
        try:
            self.client.put_bucket_policy(Bucket=self.bucket, Policy=json.dumps(policy))
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"failed to set bucket policy: {str(e)}") from e
        logger.info(f"Bucket policy set to public read: {self.bucket}")

    # ============================================
    # Uploads
    # ============================================

    def build_public_url(self, object_key: str) -> str:
        """<scheme>://<host of STORAGE_PUBLIC_URL>/<bucket>/<key>"""
        parsed = urlparse(self.public_url if "://" in self.public_url else f"http://{self.public_url}")
        scheme = parsed.scheme or "http"
        return f"{scheme}://{parsed.netloc}/{self.bucket}/{object_key}"

    def generate_presigned_url(
        self,
        filename: str,
        content_type: str = DEFAULT_CONTENT_TYPE
    ) -> Tuple[str, str, str]:
        """
        Issue a short-lived PUT URL for a fresh object key.

        Returns:
            (presigned_url, public_url, object_key)

        Raises:
            StorageError: If the URL cannot be signed
        """
        object_key = build_object_key(filename)

        try:
            presigned_url = self.client.generate_presigned_url(
                "put_object",
                Params={
                    "Bucket": self.bucket,
                    "Key": object_key,
                    "ContentType": content_type or DEFAULT_CONTENT_TYPE,
                },
                ExpiresIn=PRESIGNED_URL_EXPIRY,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to generate presigned URL for {filename}: {str(e)}")
            raise StorageError(f"failed to generate presigned URL: {str(e)}") from e

        logger.info(f"Generated presigned URL: filename={filename} key={object_key} expiry={PRESIGNED_URL_EXPIRY}s")
        return presigned_url, self.build_public_url(object_key), object_key

    # ============================================
    # Deletion
    # ============================================

    def is_managed_url(self, path: Optional[str]) -> bool:
        """True for http(s) URLs pointing into this bucket, False for TMDB paths"""
        if not path:
            return False
        return path.startswith(("http://", "https://")) and self.bucket in path

    def delete_file(self, path: str) -> None:
        """
        Delete an object given its key or any URL ending in the key.

        Raises:
            StorageError: On any failure, missing objects included
        """
        object_key = object_key_from_path(path)
        if not object_key:
            raise StorageError(f"cannot derive object key from '{path}'")

        try:
            self.client.delete_object(Bucket=self.bucket, Key=object_key)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to delete object {object_key}: {str(e)}")
            raise StorageError(f"failed to delete file: {str(e)}") from e

        logger.info(f"Deleted object from storage: {object_key}")


_storage_service: Optional[StorageService] = None


def get_storage_service() -> StorageService:
    """FastAPI dependency; the boto3 client is created once per process"""
    global _storage_service
    if _storage_service is None:
        _storage_service = StorageService()
    return _storage_service
