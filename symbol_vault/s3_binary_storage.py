"""S3-compatible storage for .sar files and their preview images."""

import uuid
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import BaseModel

from symbol_vault.constants import (
    ASSET_FILE_EXTENSION,
    ASSET_MIMETYPE,
    PREVIEW_FILE_EXTENSION,
    PREVIEW_MIMETYPE,
)
from symbol_vault.exceptions import StorageFailure
from symbol_vault.structlog_config import get_logger

logger = get_logger(__name__)


class S3Config(BaseModel):
    """Configuration for S3 binary storage."""

    endpoint_url: str
    access_key_id: str
    secret_access_key: str
    bucket_name: str
    region: str = "us-east-1"
    public_base_url: Optional[str] = None

    # Connection pooling
    max_pool_connections: int = 10


class StoredAsset(BaseModel):
    """Where an uploaded asset and its preview ended up."""

    object_key: str
    preview_key: str
    preview_image_url: str


class S3BinaryStorage:
    """Stores uploaded assets and hands out time-limited download URLs."""

    def __init__(self, config: S3Config):
        self.config = config
        self._client = None

    @property
    def client(self):
        """Lazy initialization of S3 client with connection pooling."""
        if self._client is None:
            self._client = boto3.client(
                "s3",
                endpoint_url=self.config.endpoint_url,
                aws_access_key_id=self.config.access_key_id,
                aws_secret_access_key=self.config.secret_access_key,
                region_name=self.config.region,
                config=Config(max_pool_connections=self.config.max_pool_connections),
            )
        return self._client

    def public_url(self, key: str) -> str:
        """Permanent URL of a publicly readable object (used for previews)."""
        base = self.config.public_base_url or (
            f"{self.config.endpoint_url.rstrip('/')}/{self.config.bucket_name}"
        )
        return f"{base.rstrip('/')}/{key}"

    def put_asset(self, asset_data: bytes, preview_data: bytes) -> StoredAsset:
        """Upload a .sar file and its preview under a fresh unique name.

        Both objects share a UUID stem: `<uuid>.sar` and `<uuid>.png`.
        """
        stem = str(uuid.uuid4())
        object_key = f"{stem}{ASSET_FILE_EXTENSION}"
        preview_key = f"{stem}{PREVIEW_FILE_EXTENSION}"

        self._put_binary(object_key, asset_data, ASSET_MIMETYPE)
        try:
            self._put_binary(preview_key, preview_data, PREVIEW_MIMETYPE)
        except StorageFailure:
            self.delete_objects(object_key)
            raise

        return StoredAsset(
            object_key=object_key,
            preview_key=preview_key,
            preview_image_url=self.public_url(preview_key),
        )

    def _put_binary(self, key: str, data: bytes, content_type: str) -> str:
        """Store binary data in S3."""
        try:
            self.client.put_object(
                Bucket=self.config.bucket_name,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(
                "Failed to store binary data in S3",
                provider_type="s3",
                operation="put_binary",
                error_type="store_failed",
                s3_key=key,
                bucket_name=self.config.bucket_name,
                error=str(e),
            )
            raise StorageFailure("could not store the uploaded file") from e

        logger.info(
            "Stored binary data in S3",
            provider_type="s3",
            operation="put_binary",
            s3_key=key,
            data_size=len(data),
            content_type=content_type,
            bucket_name=self.config.bucket_name,
        )
        return key

    def download_url(self, object_key: str, filename: str, expires_in: int) -> str:
        """Presigned GET URL that downloads the object as `filename`."""
        disposition_name = filename.replace('"', "")
        try:
            return self.client.generate_presigned_url(
                "get_object",
                Params={
                    "Bucket": self.config.bucket_name,
                    "Key": object_key,
                    "ResponseContentDisposition": f'attachment; filename="{disposition_name}"',
                },
                ExpiresIn=expires_in,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(
                "Failed to presign S3 download",
                provider_type="s3",
                operation="download_url",
                s3_key=object_key,
                bucket_name=self.config.bucket_name,
                error=str(e),
            )
            raise StorageFailure("could not create a download link") from e

    def delete_objects(self, *keys: str) -> None:
        """Best-effort removal of uploaded objects whose post was never created."""
        try:
            response = self.client.delete_objects(
                Bucket=self.config.bucket_name,
                Delete={
                    "Objects": [{"Key": key} for key in keys],
                    "Quiet": True,  # Only report errors
                },
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(
                "Failed to delete orphaned objects",
                provider_type="s3",
                operation="delete_objects",
                s3_keys=list(keys),
                bucket_name=self.config.bucket_name,
                error=str(e),
            )
            return

        for error in response.get("Errors", []):
            logger.error(
                "Failed to delete S3 object",
                provider_type="s3",
                operation="delete_objects",
                error_type="delete_failed",
                s3_key=error["Key"],
                error_message=error["Message"],
            )
