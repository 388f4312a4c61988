"""Application configuration and settings management."""
from functools import lru_cache
from pathlib import Path
from typing import Annotated, List

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Global application settings loaded from environment variables or .env."""

    model_config = SettingsConfigDict(
        env_file=(Path(__file__).resolve().parent.parent / ".." / ".env"),
        env_file_encoding="utf-8",
        env_prefix="TRAVEL_STORY_",
        extra="ignore",
    )

    app_name: str = "Travel Story"

    # Security
    access_token_secret: str | None = Field(
        default=None,
        validation_alias=AliasChoices("TRAVEL_STORY_ACCESS_TOKEN_SECRET", "ACCESS_TOKEN_SECRET", "access_token_secret"),
    )
    access_token_expire_hours: int = 72
    password_hash_time_cost: int = 3
    password_hash_memory_cost: int = 65536  # KiB
    distinguish_login_failures: bool = False

    # Database
    database_url: str = "sqlite+aiosqlite:///./travel_story.db"

    # HTTP
    allowed_origins: Annotated[List[str], NoDecode] = ["*"]
    request_timeout_seconds: float = 30.0
    frontend_dir: str | None = None

    # Images
    upload_dir: str = "./uploads"
    public_base_url: str = "http://localhost:8000"
    placeholder_image_url: str | None = None
    max_upload_bytes: int = 5 * 1024 * 1024

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: List[str] | str) -> List[str]:
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @field_validator("public_base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @property
    def placeholder_image(self) -> str:
        return self.placeholder_image_url or f"{self.public_base_url}/assets/placeholder.png"

    @property
    def upload_path(self) -> Path:
        return Path(self.upload_dir).resolve()


@lru_cache
def get_settings() -> Settings:
    """Return memoized settings instance."""

    return Settings()
