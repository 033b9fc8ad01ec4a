"""Configuration management for the application."""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database (unset = run on the local fallback store)
    database_url: str | None = Field(default=None)

    # Redis
    redis_url: str = Field(default="redis://localhost:6381/0")
    realtime_enabled: bool = Field(default=True)

    # JWT
    jwt_secret: str = Field(default="change-me-in-production")
    jwt_algorithm: str = Field(default="HS256")
    jwt_expiration_minutes: int = Field(default=10080)  # 7 days

    # Object storage for recipe images
    storage_url: str | None = Field(default=None)
    storage_api_key: str | None = Field(default=None)
    images_bucket: str = Field(default="images")

    # Image compression
    image_max_width: int = Field(default=1200)
    image_jpeg_quality: int = Field(default=70)

    # Local fallback store
    local_store_dir: str = Field(default=".local_store")
    local_store_quota_bytes: int = Field(default=5 * 1024 * 1024)

    # In-memory planner sessions kept before the least recently used is dropped
    planner_max_sessions: int = Field(default=1000)

    # API
    environment: str = Field(default="development")

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        """Validate that production has secure settings."""
        if self.environment == "production":
            if self.jwt_secret == "change-me-in-production":  # noqa: S105
                raise ValueError("JWT_SECRET must be changed in production")
            if self.database_url and "localhost" in self.database_url:
                raise ValueError("DATABASE_URL should not use localhost in production")
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_backend_configured(self) -> bool:
        """Check if a database backend has been configured."""
        return bool(self.database_url)

    @property
    def is_storage_configured(self) -> bool:
        """Check if object storage for images has been configured."""
        return bool(self.storage_url and self.storage_api_key)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
