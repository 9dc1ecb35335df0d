"""
Configuration and settings for the real-estate backend.
"""

from __future__ import annotations

from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_JWT_SECRET = "dev-only-secret-change-me-before-deploying-0123456789"
DEFAULT_ADMIN_PASSWORD = "admin123"


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    api_prefix: str = Field(default="/api")
    log_level: str = Field(default="INFO")
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])

    # Firebase (Firestore + Cloud Storage)
    firebase_project_id: Optional[str] = Field(default=None)
    firebase_credentials_file: Optional[str] = Field(
        default=None, validation_alias="GOOGLE_APPLICATION_CREDENTIALS"
    )
    firebase_storage_bucket: Optional[str] = Field(default=None)
    signed_url_expiry_days: int = Field(default=7)

    # Development toggles
    use_in_memory_backends: bool = Field(
        default=False, validation_alias="REALESTATE_USE_IN_MEMORY_BACKENDS"
    )

    # Auth
    jwt_secret: str = Field(default=DEFAULT_JWT_SECRET)
    jwt_algorithm: str = Field(default="HS256")
    jwt_expiration_minutes: int = Field(default=24 * 60)

    # Bootstrap
    seed_on_startup: bool = Field(default=True)
    admin_email: str = Field(default="admin@example.com")
    admin_password: str = Field(default=DEFAULT_ADMIN_PASSWORD)

    @property
    def uses_in_memory_backends(self) -> bool:
        return self.use_in_memory_backends or not self.firebase_project_id

    def check_deployment_secrets(self) -> None:
        """Refuse the built-in development credentials against real backends."""
        if self.uses_in_memory_backends:
            return
        if self.jwt_secret == DEFAULT_JWT_SECRET:
            raise RuntimeError("JWT_SECRET must be set when using Firebase backends")
        if self.seed_on_startup and self.admin_password == DEFAULT_ADMIN_PASSWORD:
            raise RuntimeError("ADMIN_PASSWORD must be set before seeding Firebase backends")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
