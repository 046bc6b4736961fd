"""Application configuration using Pydantic Settings."""

from enum import Enum
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from grubprint_api.search.engine import MAX_RESULTS, SIMILARITY_THRESHOLD


class StoreBackend(str, Enum):
    """Supported record store backends."""
    MEMORY = "memory"
    MONGO = "mongo"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="GRUBPRINT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Storage
    store_backend: StoreBackend = StoreBackend.MEMORY
    mongo_uri: str = "mongodb://localhost:27017"
    db_name: str = "usda"

    # Directory holding the SR text files (FOOD_DES.txt, WEIGHT.txt, ...).
    # Required for the memory backend; for mongo, loading is skipped when unset.
    data_dir: str | None = None

    # Search
    search_threshold: float = Field(SIMILARITY_THRESHOLD, gt=0.0, le=1.0)
    search_max_results: int = Field(MAX_RESULTS, ge=1)

    # Requests
    request_timeout_seconds: float = 1.0

    # API client
    api_base_url: str = "http://localhost:8000"
    client_timeout_seconds: float = 10.0
    client_cache_ttl_seconds: float = 86400.0

    # App
    log_level: str = "INFO"
    app_name: str = "Grubprint API"
    api_version: str = "1.0.0"

    @property
    def is_mongo(self) -> bool:
        return self.store_backend == StoreBackend.MONGO


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
