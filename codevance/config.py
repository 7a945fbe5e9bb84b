import os
from datetime import timedelta

basedir = os.path.abspath(os.path.dirname(__file__))


class Config:
    """Base configuration for the application."""

    # Flask settings
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-key-please-change-in-production'
    DEBUG = False
    TESTING = False

    # Database settings
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///codevance.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Session settings
    PERMANENT_SESSION_LIFETIME = timedelta(days=30)

    # Forms are submitted as JSON by the dashboard
    WTF_CSRF_ENABLED = False

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_FORMAT = os.environ.get('LOG_FORMAT', 'json')
    LOG_DIR = os.environ.get('LOG_DIR', 'logs')

    # Cache settings
    CACHE_TYPE = os.environ.get('CACHE_TYPE', 'SimpleCache')
    CACHE_DEFAULT_TIMEOUT = int(os.environ.get('CACHE_DEFAULT_TIMEOUT', 300))

    # Rate limiting
    RATELIMIT_ENABLED = True
    RATELIMIT_STORAGE_URI = os.environ.get('RATELIMIT_STORAGE_URI', 'memory://')
    SYNC_RATE_LIMIT = os.environ.get('SYNC_RATE_LIMIT', '10 per minute')

    # Problem sync settings
    SYNC_BATCH_SIZE = int(os.environ.get('SYNC_BATCH_SIZE', 50))
    SYNC_PROGRESS_EVERY = int(os.environ.get('SYNC_PROGRESS_EVERY', 2))
    SYNC_MAX_WORKERS = int(os.environ.get('SYNC_MAX_WORKERS', 5))
    # Concurrent writes inside one batch; defaults to the batch size
    SYNC_RECONCILE_WORKERS = int(os.environ.get('SYNC_RECONCILE_WORKERS', 0)) or None
    SYNC_SCHEDULER_ENABLED = os.environ.get('SYNC_SCHEDULER_ENABLED', 'true').lower() == 'true'
    SYNC_INTERVAL_MINUTES = int(os.environ.get('SYNC_INTERVAL_MINUTES', 360))

    # Platform API settings
    PLATFORM_REQUEST_TIMEOUT = int(os.environ.get('PLATFORM_REQUEST_TIMEOUT', 10))
    LEETCODE_SUBMISSION_LIMIT = int(os.environ.get('LEETCODE_SUBMISSION_LIMIT', 200))
    CODEFORCES_SUBMISSION_COUNT = int(os.environ.get('CODEFORCES_SUBMISSION_COUNT', 1000))

    # Application settings
    APP_NAME = 'Codevance'
    VERSION = '1.0.0'


class DevelopmentConfig(Config):
    """Development configuration."""

    DEBUG = True
    LOG_FORMAT = os.environ.get('LOG_FORMAT', 'standard')

    # Use SQLite for development
    SQLALCHEMY_DATABASE_URI = os.environ.get('DEV_DATABASE_URL') or 'sqlite:///codevance-dev.db'


class TestingConfig(Config):
    """Testing configuration."""

    TESTING = True
    DEBUG = True

    # Use in-memory SQLite for testing
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'

    RATELIMIT_ENABLED = False
    SYNC_SCHEDULER_ENABLED = False
    CACHE_TYPE = 'NullCache'


class ProductionConfig(Config):
    """Production configuration."""

    # Ensure proper secret key is set
    SECRET_KEY = os.environ.get('SECRET_KEY')

    # Production-specific settings
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    REMEMBER_COOKIE_SECURE = True
    REMEMBER_COOKIE_HTTPONLY = True


# Configuration dictionary
config_dict = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig
}

def get_config(config_name=None):
    """Get configuration class based on environment."""
    if not config_name:
        config_name = os.environ.get('FLASK_ENV', 'default')
    return config_dict.get(config_name, config_dict['default'])
