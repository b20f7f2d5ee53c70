"""Application configuration and settings management."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="DOCMARK_", extra="ignore")

    app_name: str = Field(default="docmark", description="Human readable application name.")
    environment: Literal["local", "development", "staging", "production"] = Field(
        default="local",
        description="Deployment environment name.",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Root logging level for the API and the CLI.",
    )
    default_format: Literal["html", "text", "rdoc"] = Field(
        default="html",
        description="Output format used when a request does not name one.",
    )
    text_width: int = Field(
        default=78,
        ge=20,
        description="Wrap column of the plain text renderer.",
    )
    source_suffixes: list[str] = Field(
        default_factory=lambda: [".rdoc", ".txt"],
        description="File suffixes accepted as markup documents.",
    )
    max_upload_bytes: int = Field(
        default=2_000_000,
        description="Largest document accepted by the upload and fetch endpoints.",
    )
    fetch_timeout: float = Field(
        default=30.0,
        description="Timeout in seconds for fetching remote documents.",
    )
    export_dir: Path | None = Field(
        default=None,
        description="Directory for DOCX exports; a package local directory when unset.",
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings()


settings = get_settings()
