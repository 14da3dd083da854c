# gridfile/config.py
"""
Centralized configuration with validation.

Uses pydantic-settings to load and validate environment variables.
Every setting has a default, so a bare environment points at a local MongoDB.
"""

from functools import lru_cache
from typing import ClassVar

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from gridfile.constants import GridDefaults


class Settings(BaseSettings):
    """Registry settings loaded from environment variables."""

    # MongoDB
    MONGODB_URL: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URL",
    )
    MONGODB_DATABASE: str = Field(
        default="gridfile",
        description="Database holding the GridFS bucket",
    )

    # GridFS
    GRIDFS_BUCKET: str = Field(
        default=GridDefaults.BUCKET,
        description="Root collection name of the GridFS bucket (<bucket>.files / <bucket>.chunks)",
    )
    DEFAULT_FILENAME: str = Field(
        default=GridDefaults.FILENAME,
        description="Filename used when a write does not name the file",
    )
    READ_BLOCK_SIZE: int = Field(
        default=GridDefaults.READ_BLOCK_SIZE,
        gt=0,
        description="Bytes read from a source per write step, and per iteration of a read stream",
    )

    # Logging
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Log level: DEBUG, INFO, WARNING, ERROR",
    )
    LOG_JSON: bool = Field(
        default=True,
        description="Emit single-line JSON logs instead of plain text",
    )

    LOG_LEVELS: ClassVar[set[str]] = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in cls.LOG_LEVELS:
            raise ValueError(f"Unknown log level '{v}'. Use one of: {', '.join(sorted(cls.LOG_LEVELS))}")
        return level

    @field_validator("GRIDFS_BUCKET", "DEFAULT_FILENAME")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings. Call at startup to validate config."""
    return Settings()
