"""Web app configuration for Repository Hierarchy."""

from repository_hierarchy.config import settings
from repository_hierarchy.dates.locale import DEFAULT_RANGE_TOKENS


class Config:
    """Base configuration."""

    # App settings
    DEBUG = True
    TESTING = False
    SECRET_KEY = "dev-secret-key-change-in-production"

    # Origins allowed to call the API in development
    CORS_ORIGINS = settings.cors_origins

    # Records
    GEDCOM_PATH = settings.gedcom_path
    RECORDS = None

    # Date ranges
    RANGE_TOKENS = DEFAULT_RANGE_TOKENS

    # Export settings
    DOWNLOAD_FILENAME_PREFIX = "EAD_"


class DevelopmentConfig(Config):
    """Development configuration."""

    DEBUG = True


class ProductionConfig(Config):
    """Production configuration."""

    DEBUG = False
    # In production, load from environment variables
    SECRET_KEY = None  # Set via env var


class TestingConfig(Config):
    """Testing configuration."""

    DEBUG = False
    TESTING = True


# Config factory
def get_config(env: str = "development") -> Config:
    """Get configuration based on environment.

    Args:
        env: Environment name (development, production, testing)

    Returns:
        Configuration object
    """
    configs = {
        "development": DevelopmentConfig,
        "production": ProductionConfig,
        "testing": TestingConfig,
    }
    return configs.get(env, DevelopmentConfig)()
