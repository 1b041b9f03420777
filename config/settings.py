"""Configuration management using pydantic-settings."""
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Football-Data.org configuration
    football_data_api_key: Optional[str] = None
    football_data_base_url: str = "https://api.football-data.org/v4"

    # SofaScore needs no key; disabling it routes every request to mock data
    sofascore_enabled: bool = True
    sofascore_base_url: str = "http://www.sofascore.com/api/v1"

    # None keeps the requests default (no timeout)
    upstream_timeout_seconds: Optional[float] = None

    # Artificial latency for mock responses
    mock_delay_ms: int = 300

    # Crest / emblem used when mock data has no image
    placeholder_image: str = "/placeholder.svg?height=50&width=50"

    # Live refresh window (ten minutes)
    refresh_cooldown_seconds: int = 600
    enforce_refresh_cooldown: bool = False

    log_level: str = "INFO"

    @property
    def has_football_data_key(self) -> bool:
        """True when a non-empty Football-Data.org key is configured."""
        return bool(self.football_data_api_key and self.football_data_api_key.strip())

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
