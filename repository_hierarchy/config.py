"""Configuration management for Repository Hierarchy.

Loads settings from environment variables and provides validated configuration.
"""

import logging
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

# Load .env file if it exists
load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Date range rendering
    locale: str = "en"
    range_start_token: str | None = None
    range_end_token: str | None = None
    iso_date_precision: Literal["year", "day"] = "year"

    # Call number hierarchy
    call_number_delimiters: list[str] = ["/"]

    # EAD export
    ead_country_code: str | None = None
    ead_main_agency_code: str | None = None
    ead_language_code: str = "eng"

    # Input
    gedcom_path: Path | None = None

    # Web API
    cors_origins: list[str] = []

    # Logging
    log_level: str = "WARNING"

    class Config:
        """Pydantic configuration."""

        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    def get_log_level(self) -> int:
        """Get the numeric logging level.

        Returns:
            The logging level for the configured name

        Raises:
            ValueError: If the configured name is not a logging level
        """
        level = logging.getLevelName(self.log_level.upper())
        if not isinstance(level, int):
            raise ValueError(
                f"Unknown LOG_LEVEL: {self.log_level}. "
                "Use one of DEBUG, INFO, WARNING, ERROR or CRITICAL."
            )
        return level


# Global settings instance
settings = Settings()
