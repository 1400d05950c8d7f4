import logging
import os
import sys
from enum import Enum
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)-8s] %(message)s",
    datefmt="%H:%M:%S",
    stream=sys.stdout,
)


class LogFormat(str, Enum):
    JSON = "json"
    CONSOLE = "console"


class Settings(BaseSettings):
    LOG_LEVEL: int = logging.INFO
    LOG_FORMAT: LogFormat = LogFormat.JSON
    DATABASE_URL: str
    UNIT_TEST_DATABASE_URL: str | None = None  # Optional, for unit tests

    # JWT settings
    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRATION_DAYS: int = 7

    # Unauthenticated uploads are attributed to this user
    ANONYMOUS_USER_ID: int = 1

    # S3-compatible object storage for .sar files and previews
    S3_ENDPOINT_URL: str | None = None
    S3_ACCESS_KEY_ID: str | None = None
    S3_SECRET_ACCESS_KEY: str | None = None
    S3_BUCKET_NAME: str | None = None
    S3_REGION: str = "us-east-1"
    S3_PUBLIC_BASE_URL: str | None = None  # Base URL for preview image links
    DOWNLOAD_URL_TTL_SECONDS: int = 60

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def parse_log_level(cls, v: Any) -> int:
        if isinstance(v, int):
            return v
        if isinstance(v, str):
            # Accepts 'INFO', 'DEBUG', etc. (case-insensitive)
            level = logging.getLevelName(v.upper())
            if isinstance(level, int):
                return level
            raise ValueError(f"Invalid log level: {v}")
        raise ValueError(f"LOG_LEVEL must be int or str, got {type(v)}")

    @field_validator("LOG_FORMAT", mode="before")
    @classmethod
    def parse_log_format(cls, v: str | LogFormat) -> LogFormat:
        if isinstance(v, LogFormat):
            return v
        if isinstance(v, str):
            try:
                return LogFormat(v.lower())
            except ValueError:
                raise ValueError(f"Invalid LOG_FORMAT: {v}")
        raise ValueError(f"LOG_FORMAT must be a string or LogFormat, got {type(v)}")

    @field_validator("ANONYMOUS_USER_ID")
    @classmethod
    def check_anonymous_user_id(cls, v: int) -> int:
        if v < 1:
            raise ValueError("ANONYMOUS_USER_ID must be a positive integer")
        return v

    def get_active_database_url(self) -> str:
        """
        Returns the correct database URL for the current context.
        - If running under pytest (unit test) and UNIT_TEST_DATABASE_URL is set, use it.
        - Otherwise, use DATABASE_URL.
        """
        if os.environ.get("PYTEST_CURRENT_TEST") and self.UNIT_TEST_DATABASE_URL:
            return self.UNIT_TEST_DATABASE_URL
        return self.DATABASE_URL

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


def get_settings() -> Settings:
    """
    Returns a fresh Settings instance, reading environment variables at call time.
    This pattern is preferred for testability: tests can patch os.environ or use monkeypatch
    before calling get_settings(), ensuring the correct config is loaded.
    """
    return Settings()  # type: ignore[call-arg]
