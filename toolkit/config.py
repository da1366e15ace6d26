"""Configuration for the HTTP toolkit service."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TOOLKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server
    port: int = 8000
    debug: bool = False
    log_level: str = "INFO"
    log_format: Literal["text", "json"] = Field(
        default="text", description="'text' for local development, 'json' for log collectors"
    )

    # Uploads
    upload_dir: str = "./uploads"
    allowed_mime_types: list[str] = Field(
        default_factory=lambda: ["image/jpeg", "image/png", "image/gif", "application/pdf"],
        description="JSON list of accepted sniffed types; empty list accepts everything",
    )
    max_file_size: int = Field(
        default=1024 * 1024 * 1024,  # 1 GB
        description="Per-file ceiling in bytes (0 disables the check)",
    )
    rename_uploads: bool = True

    # JSON
    max_json_size: int = 1024 * 1024  # 1 MB
    allow_unknown_json_fields: bool = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
