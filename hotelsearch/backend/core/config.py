"""Application configuration using pydantic-settings."""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Literal, Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Database
    database_url: str = "sqlite:///./data/hotelsearch.db"
    store_timeout_seconds: float = 5.0

    # Search
    default_search_radius_m: float = 5000.0
    default_page: int = 1
    default_page_limit: int = 10
    max_page_limit: int = 100
    earth_radius_m: float = 6378137.0  # WGS84 equatorial radius

    # Special prices
    special_price_range_strategy: Literal["atomic", "per_date"] = "atomic"
    allow_past_special_prices: bool = False

    # Geocoding
    geocoder_provider: Literal["maps_co", "mock"] = "mock"
    geocode_api_key: Optional[str] = None
    geocode_api_base: str = "https://geocode.maps.co"

    # Logging
    log_level: str = "INFO"

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000


settings = Settings()
