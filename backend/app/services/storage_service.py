"""
Storage Service - Handles media objects in S3/MinIO
Works against AWS S3 or any S3-compatible endpoint (MinIO, Backblaze B2)
"""

import hashlib
from typing import Dict, Literal, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from app.core.config import settings
from app.core.exceptions import PresignedUrlError, StorageUploadError
from app.core.logging_config import logger

PresignOperation = Literal["get", "put"]

_PRESIGN_METHODS = {
    "get": "get_object",
    "put": "put_object",
}


class StorageService:
    """
    Thin wrapper over a boto3 S3 client.

    The client is created lazily so importing the module never touches
    the network; tests pass a stub client to the constructor.
    """

    def __init__(self, client=None, bucket_name: Optional[str] = None):
        self._client = client
        self._bucket_name = bucket_name or settings.S3_BUCKET_NAME

    @property
    def bucket_name(self) -> str:
        return self._bucket_name

    def _get_client(self):
        """Lazy initialization of the S3 client"""
        if self._client is None:
            kwargs = {"region_name": settings.AWS_REGION}

            if settings.S3_ENDPOINT_URL:
                # MinIO / B2 need path-style addressing and v4 signatures
                kwargs["endpoint_url"] = settings.S3_ENDPOINT_URL
                kwargs["config"] = Config(signature_version="s3v4", s3={"addressing_style": "path"})

            if settings.AWS_ACCESS_KEY_ID and settings.AWS_SECRET_ACCESS_KEY:
                kwargs["aws_access_key_id"] = settings.AWS_ACCESS_KEY_ID
                kwargs["aws_secret_access_key"] = settings.AWS_SECRET_ACCESS_KEY
            else:
                logger.info("S3 client using IAM role credentials")

            self._client = boto3.client("s3", **kwargs)

        return self._client

    @staticmethod
    def calculate_hash(content: bytes) -> str:
        return hashlib.sha256(content).hexdigest()

    def public_url(self, key: str) -> str:
        """Stable (unsigned) URL of an object"""
        if settings.S3_PUBLIC_BASE_URL:
            return f"{settings.S3_PUBLIC_BASE_URL.rstrip('/')}/{key}"
        if settings.S3_ENDPOINT_URL:
            return f"{settings.S3_ENDPOINT_URL.rstrip('/')}/{self._bucket_name}/{key}"
        return f"https://{self._bucket_name}.s3.{settings.AWS_REGION}.amazonaws.com/{key}"

    async def upload_bytes(
        self,
        key: str,
        content: bytes,
        content_type: str = "application/octet-stream",
        metadata: Optional[Dict[str, str]] = None,
    ) -> dict:
        """
        Upload an object.

        Returns:
            dict with key, url, size_bytes, content_hash, etag

        Raises:
            StorageUploadError: the store rejected the upload
        """
        content_hash = self.calculate_hash(content)

        try:
            response = self._get_client().put_object(
                Bucket=self._bucket_name,
                Key=key,
                Body=content,
                ContentType=content_type,
                Metadata={**(metadata or {}), "content_hash": content_hash},
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"[S3-Upload] ✗ Failed for {key}: {e}")
            raise StorageUploadError(key, str(e)) from e

        logger.info(f"[S3-Upload] ✓ Uploaded: {key} ({len(content)} bytes)")
        return {
            "key": key,
            "url": self.public_url(key),
            "size_bytes": len(content),
            "content_hash": content_hash,
            "etag": (response or {}).get("ETag", "").strip('"'),
        }

    async def delete_object(self, key: str) -> bool:
        try:
            self._get_client().delete_object(Bucket=self._bucket_name, Key=key)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to delete object from S3: {key}: {e}")
            return False

        logger.info(f"Deleted object from S3: {key}")
        return True

    async def generate_presigned_url(
        self,
        key: str,
        operation: PresignOperation = "get",
        expires_in: Optional[int] = None,
    ) -> str:
        """Signed URL allowing a browser to GET or PUT the object directly"""
        method = _PRESIGN_METHODS.get(operation)
        if method is None:
            raise PresignedUrlError(key, f"unsupported operation '{operation}'")

        expires_in = expires_in or settings.STORAGE_URL_EXPIRY
        try:
            return self._get_client().generate_presigned_url(
                method,
                Params={"Bucket": self._bucket_name, "Key": key},
                ExpiresIn=expires_in,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to generate presigned URL for {key}: {e}")
            raise PresignedUrlError(key, str(e)) from e


# Singleton instance
storage_service = StorageService()
