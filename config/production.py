"""
Production environment configuration for the Mente Tech blog.

This module defines the configuration settings for the production environment,
enforcing required secrets and enabling monitoring.
"""

import os
from .base import Config
from .config_constants import ENVIRONMENT_PRODUCTION


class ProductionConfig(Config):
    """
    Configuration for production environment.

    Disables debugging features and requires the secrets and database URL
    to come from the environment.
    """

    DEBUG = False
    TESTING = False
    ENV = ENVIRONMENT_PRODUCTION

    # Production database settings
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL')

    # Sentry error reporting
    SENTRY_ENVIRONMENT = 'production'
    SENTRY_TRACES_SAMPLE_RATE = 0.1

    # Production logging level
    LOG_LEVEL = 'WARNING'
    METRICS_ENABLED = True

    @classmethod
    def init_app(cls, app):
        """
        Initialize application with production configuration.

        Args:
            app: Flask application instance
        """
        super().init_app(app)

        app.config['SESSION_COOKIE_SECURE'] = True
        app.config['SESSION_COOKIE_HTTPONLY'] = True
