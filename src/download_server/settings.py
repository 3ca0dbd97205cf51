# src/download_server/settings.py
import logging
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ADMIN_SECRET = "admin"
STORAGE_BACKENDS = ("github", "local")
SECRET_FIELDS = ("github_token", "admin_secret")


class Settings(BaseSettings):
    """
    Single source of truth for all application settings.

    Configuration precedence:
    1. Environment variables (highest priority)
    2. .env file (if exists)
    3. Default values in this class (lowest priority)

    Usage:
        from download_server.settings import get_settings
        settings = get_settings()
        owner = settings.github_owner
    """

    # Server
    host: str = Field(default="0.0.0.0", description="Bind address for `serve`")
    port: int = Field(default=3000, description="HTTP port for `serve`")
    environment: str = Field(
        default="development",
        description="development exposes internal error text in 500 responses",
    )
    cors_origins: str = Field(default="*", description="Comma separated list of allowed origins")

    # Admin gate
    admin_secret: str = Field(
        default=DEFAULT_ADMIN_SECRET,
        description="Shared secret required by the admin endpoints",
    )

    # Document storage
    storage_backend: str = Field(default="github", description="github or local")
    storage_dir: str = Field(default="storage", description="Directory used by the local backend")
    files_document: str = Field(default="files.json", description="Document holding file records")
    categories_document: str = Field(
        default="categories.json",
        description="Document holding categories",
    )

    # GitHub contents API
    github_token: Optional[str] = Field(default=None, description="Personal access token")
    github_owner: str = Field(default="", description="Owner of the data repository")
    github_repo: str = Field(default="", description="Name of the data repository")
    github_branch: Optional[str] = Field(default=None, description="Branch to read and commit to")
    github_api_url: str = Field(default="https://api.github.com")
    request_timeout: float = Field(default=30.0, description="Seconds per outbound request")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("storage_backend")
    @classmethod
    def validate_storage_backend(cls, v: str) -> str:
        v = v.lower()
        if v not in STORAGE_BACKENDS:
            raise ValueError(f"Invalid storage_backend: {v}. Must be one of {list(STORAGE_BACKENDS)}")
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    @property
    def cors_origin_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def repository(self) -> str:
        return f"{self.github_owner}/{self.github_repo}"

    @property
    def uses_default_admin_secret(self) -> bool:
        return self.admin_secret == DEFAULT_ADMIN_SECRET

    def masked_dict(self) -> dict:
        """Settings as a dict with secrets replaced, for display."""
        values = self.model_dump()
        for name in SECRET_FIELDS:
            if values.get(name):
                values[name] = "****"
        return values


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one Settings instance per process.
    """
    return Settings()


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
