"""
Testing environment configuration for the Mente Tech blog.

This module defines configuration settings for the testing environment,
optimized for automated testing with deterministic behavior and an isolated
in-memory database.
"""

import os
from .base import Config
from .config_constants import ENVIRONMENT_TESTING


class TestingConfig(Config):
    """
    Configuration for testing environment.

    Uses an in-memory database, disables rate limiting and metrics, and keeps
    logging quiet.
    """

    DEBUG = False
    TESTING = True
    ENV = ENVIRONMENT_TESTING

    # Test database (in-memory SQLite by default)
    SQLALCHEMY_DATABASE_URI = os.environ.get('TEST_DATABASE_URL', 'sqlite:///:memory:')

    SECRET_KEY = 'test-secret-key'
    JWT_SECRET_KEY = 'test-jwt-secret-key'

    # Disable rate limiting in tests
    RATELIMIT_ENABLED = False

    # Disable metrics in testing
    METRICS_ENABLED = False

    # Testing-specific logging - minimize noise but capture errors
    LOG_LEVEL = 'ERROR'
    LOG_TO_FILE = False

    # Fixed key so the scheduler path can be exercised
    SCHEDULER_API_KEY = 'test-scheduler-key'

    # Skip interference with server responses
    PRESERVE_CONTEXT_ON_EXCEPTION = False
    TRAP_HTTP_EXCEPTIONS = False

    @classmethod
    def init_app(cls, app):
        """
        Initialize application with testing configuration.

        Args:
            app: Flask application instance
        """
        super().init_app(app)

        app.config['TESTING'] = True
        app.config['CONTACT_EMAIL_API_KEY'] = None

        # Set up minimal logging for tests
        app.logger.setLevel(app.config['LOG_LEVEL'])
