from typing import Annotated, Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from symbol_vault.config import Settings, get_settings
from symbol_vault.db.database import get_db
from symbol_vault.db.repositories.post import PostRepository
from symbol_vault.db.repositories.user import UserRepository
from symbol_vault.exceptions import StorageFailure
from symbol_vault.s3_binary_storage import S3BinaryStorage, S3Config


def get_post_repository(db: Annotated[Session, Depends(get_db)]) -> PostRepository:
    """
    Dependency-injected PostRepository for use in routes.
    """
    return PostRepository(db)


def get_user_repository(db: Annotated[Session, Depends(get_db)]) -> UserRepository:
    return UserRepository(db)


def s3_config_from_settings(settings: Settings) -> Optional[S3Config]:
    """Build the S3 config, or None when any required variable is missing."""
    if not all(
        [
            settings.S3_ENDPOINT_URL,
            settings.S3_ACCESS_KEY_ID,
            settings.S3_SECRET_ACCESS_KEY,
            settings.S3_BUCKET_NAME,
        ]
    ):
        return None

    # Type assertions - we've already validated these are not None
    return S3Config(
        endpoint_url=settings.S3_ENDPOINT_URL,  # type: ignore[arg-type]
        access_key_id=settings.S3_ACCESS_KEY_ID,  # type: ignore[arg-type]
        secret_access_key=settings.S3_SECRET_ACCESS_KEY,  # type: ignore[arg-type]
        bucket_name=settings.S3_BUCKET_NAME,  # type: ignore[arg-type]
        region=settings.S3_REGION,
        public_base_url=settings.S3_PUBLIC_BASE_URL,
    )


# Singleton instance of S3BinaryStorage
_s3_storage: Optional[S3BinaryStorage] = None


def get_s3_binary_storage() -> S3BinaryStorage:
    """
    Get S3BinaryStorage instance for storing assets and presigning downloads.
    Uses singleton pattern to reuse the same S3 client across requests.
    """
    global _s3_storage

    if _s3_storage is None:
        config = s3_config_from_settings(get_settings())
        if config is None:
            raise StorageFailure("object storage is not configured")
        _s3_storage = S3BinaryStorage(config)

    return _s3_storage
