"""Application configuration using environment variables."""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, AnyHttpUrl, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve the project root once so that `.env` is discovered regardless of CWD
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    """Load configuration from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    todoist_api_token: SecretStr = Field(
        ...,
        validation_alias=AliasChoices(
            "TODOIST_API_TOKEN", "TODOIST_TOKEN", "todoist_api_token"
        ),
    )
    todoist_base_url: AnyHttpUrl = Field(
        default_factory=lambda: AnyHttpUrl("https://api.todoist.com/rest/v2"),
        validation_alias=AliasChoices("TODOIST_BASE_URL", "todoist_base_url"),
    )
    request_timeout: float = Field(
        default=30.0,
        validation_alias=AliasChoices("TODOIST_TIMEOUT", "request_timeout"),
        ge=1,
    )

    outline_path: Path = Field(
        default_factory=lambda: Path("todoist.org"),
        validation_alias=AliasChoices("ORGSYNC_OUTLINE", "outline_path"),
    )
    # Write identifiers of newly created tasks back into the outline
    write_back_ids: bool = Field(
        default=True,
        validation_alias=AliasChoices("ORGSYNC_WRITE_BACK_IDS", "write_back_ids"),
    )

    log_level: str = Field(
        default="INFO",
        validation_alias=AliasChoices("LOG_LEVEL", "log_level"),
    )
    log_dir: Optional[Path] = Field(
        default=None,
        validation_alias=AliasChoices("LOG_DIR", "log_dir"),
    )
    log_retention_hours: int = Field(
        default=48,
        ge=0,
        validation_alias=AliasChoices("LOG_RETENTION_HOURS", "log_retention_hours"),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached `Settings` instance."""

    return Settings()  # pyright: ignore[reportCallIssue]


__all__ = ["Settings", "get_settings"]
