"""
Flask application configuration classes.
Provides configuration for development, production, and testing environments.
"""

import os


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Base configuration class with common settings."""

    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'

    # Database configuration
    DATABASE_PATH = os.environ.get('DATABASE_PATH') or 'instance/tablekeeper.db'

    # JSON API
    JSON_SORT_KEYS = False
    MAX_CONTENT_LENGTH = int(os.environ.get('MAX_CONTENT_LENGTH', 1024 * 1024))  # 1MB

    # Defaults copied into restaurant_settings when a tenant is created
    DEFAULT_RESERVATION_DURATION = int(os.environ.get('DEFAULT_RESERVATION_DURATION', 90))
    DEFAULT_MAX_PARTY_SIZE = int(os.environ.get('DEFAULT_MAX_PARTY_SIZE', 20))
    DEFAULT_ENABLE_TABLE_MERGE = _env_bool('DEFAULT_ENABLE_TABLE_MERGE', True)
    DEFAULT_LINK_REQUIRES_MERGE_RULE = _env_bool('DEFAULT_LINK_REQUIRES_MERGE_RULE', True)

    # Services created for every new restaurant
    DEFAULT_SERVICES = (
        ('Lunch', 'lunch', '12:00', '14:30'),
        ('Dinner', 'dinner', '19:00', '22:30'),
    )

    # Identity headers forwarded by the authentication gateway
    ACTOR_ID_HEADER = 'X-Actor-Id'
    ACTOR_RESTAURANT_HEADER = 'X-Restaurant-Id'
    ACTOR_ROLE_HEADER = 'X-Actor-Role'

    LOG_DIR = os.environ.get('LOG_DIR') or 'logs'

    APP_NAME = 'TableKeeper'
    APP_VERSION = '1.0.0'


class DevelopmentConfig(Config):
    """Development environment configuration."""

    DEBUG = True
    TESTING = False


class ProductionConfig(Config):
    """Production environment configuration."""

    DEBUG = False
    TESTING = False

    SECRET_KEY = os.environ.get('SECRET_KEY') or Config.SECRET_KEY
    DATABASE_PATH = os.environ.get('DATABASE_PATH') or Config.DATABASE_PATH

    @classmethod
    def validate(cls) -> None:
        """Validate that required production environment variables are set."""
        secret_key = os.environ.get('SECRET_KEY')
        if not secret_key:
            raise ValueError("SECRET_KEY environment variable must be set in production")
        if len(secret_key) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters in production")
        if not os.environ.get('DATABASE_PATH'):
            raise ValueError("DATABASE_PATH environment variable must be set in production")


class TestConfig(Config):
    """Testing environment configuration."""

    TESTING = True
    DEBUG = True
    DATABASE_PATH = os.environ.get('DATABASE_PATH', ':memory:')
    SECRET_KEY = 'test-secret-key'


# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'test': TestConfig,
    'default': DevelopmentConfig
}
