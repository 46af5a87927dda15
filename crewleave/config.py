"""Application configuration via environment variables."""

import json
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "info"
    CORS_ORIGINS: str = '["http://localhost:8081"]'
    TIMEZONE: str = "Europe/London"

    # UK Government bank-holiday feed
    BANK_HOLIDAYS_URL: str = "https://www.gov.uk/bank-holidays.json"
    BANK_HOLIDAY_REGION: str = "england-and-wales"
    BANK_HOLIDAYS_TIMEOUT: float = 10.0

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS_ORIGINS JSON string into a list."""
        try:
            return json.loads(self.CORS_ORIGINS)
        except (json.JSONDecodeError, TypeError):
            return ["http://localhost:8081"]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


settings = Settings()
