from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment and .env overrides."""

    # Application
    APP_NAME: str = "Inventory Dashboard"
    APP_VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"

    # Record store
    STORE_BACKEND: str = "redis"  # "redis" or "memory"
    REDIS_URL: str = "redis://localhost:6379/0"
    STORE_KEY_PREFIX: str = "inventory"
    STORE_CHANGE_CHANNEL: str = "inventory:changes"
    PRODUCTS_KEY: str = "products"
    TRANSACTIONS_KEY: str = "transactions"

    # Presentation
    PLACEHOLDER_IMAGE_URL: str = "https://via.placeholder.com/150"
    CURRENCY_PREFIX: str = "M"
    FOCUS_CARD_INSET: int = 10

    # Stock rules
    LOW_STOCK_THRESHOLD: int = 5
    RESTOCK_LEVEL: int = 20

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()
