"""
Photo storage backed by a private S3 bucket.

This module provides functionality for:
- Creating the bucket on startup if it does not exist yet
- Uploading photos and logos under generated filenames
- Generating presigned URLs for time-limited access to private objects
- Removing objects when their awardee is deleted

The bucket is never public; clients only ever see presigned URLs.
"""

from __future__ import annotations

import logging
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .configuration import Settings
from .errors import StorageError

logger = logging.getLogger(__name__)

_MISSING_BUCKET_CODES = {"404", "NoSuchBucket", "NotFound"}


class PhotoStorage:
    """Thin wrapper over an S3 client bound to one bucket."""

    def __init__(self, bucket_name: str, client=None, region: Optional[str] = None, endpoint_url: Optional[str] = None):
        self.bucket_name = bucket_name
        self.region = region
        self._client = client or boto3.client("s3", region_name=region, endpoint_url=endpoint_url)

    @classmethod
    def from_settings(cls, settings: Settings) -> "PhotoStorage":
        return cls(settings.bucket_name, region=settings.s3_region, endpoint_url=settings.s3_endpoint_url)

    def ensure_bucket(self) -> bool:
        """
        Create the bucket if it is absent.

        Returns:
            True if the bucket was created, False if it already existed
        """
        try:
            self._client.head_bucket(Bucket=self.bucket_name)
            return False
        except ClientError as e:
            code = str(e.response.get("Error", {}).get("Code", ""))
            if code not in _MISSING_BUCKET_CODES:
                raise StorageError(f"Failed to check bucket {self.bucket_name}: {e}") from e
        except BotoCoreError as e:
            raise StorageError(f"Failed to check bucket {self.bucket_name}: {e}") from e

        params = {"Bucket": self.bucket_name}
        if self.region and self.region != "us-east-1":
            params["CreateBucketConfiguration"] = {"LocationConstraint": self.region}
        try:
            self._client.create_bucket(**params)
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"Failed to create bucket {self.bucket_name}: {e}") from e
        logger.info(f"Created private bucket: {self.bucket_name}")
        return True

    def upload(self, filename: str, data: bytes, content_type: Optional[str] = None) -> str:
        """Store ``data`` under ``filename`` and return the storage path."""
        params = {"Bucket": self.bucket_name, "Key": filename, "Body": data}
        if content_type:
            params["ContentType"] = content_type
        try:
            logger.info(f"Uploading {filename} to s3://{self.bucket_name}")
            self._client.put_object(**params)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Storage upload error: {e}")
            raise StorageError(str(e)) from e
        return filename

    def signed_url(self, path: str, expires_in: int = 3600) -> str:
        """Generate a presigned GET URL for ``path`` valid for ``expires_in`` seconds."""
        try:
            return self._client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket_name, "Key": path},
                ExpiresIn=expires_in,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to generate presigned URL for {path}: {e}")
            raise StorageError(str(e)) from e

    def remove(self, path: str) -> None:
        try:
            self._client.delete_object(Bucket=self.bucket_name, Key=path)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to remove {path}: {e}")
            raise StorageError(str(e)) from e
        logger.info(f"Removed s3://{self.bucket_name}/{path}")
