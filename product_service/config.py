from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "Product Service"
    APP_VERSION: str = "1.0.0"

    # Routes mount at "<API_PREFIX>/products"; the gateway rewrites
    # /api/products to /products, so the default is no prefix.
    API_PREFIX: str = ""

    LOG_LEVEL: str = "INFO"

    # Default and fallback page size for product listings
    DEFAULT_PAGE_SIZE: int = 10

    # Start with the built-in demo catalog instead of an empty one
    SEED_CATALOG: bool = True

    CORS_ORIGINS: list[str] = ["*"]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
