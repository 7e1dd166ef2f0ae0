"""
Development environment configuration for the Mente Tech blog.
"""

import os
from .base import Config
from .config_constants import ENVIRONMENT_DEVELOPMENT


class DevelopmentConfig(Config):
    """
    Configuration for development environment.

    Enables debugging, runs Celery tasks eagerly and keeps the database in a
    local SQLite file so the site can be worked on without external services.
    """

    DEBUG = True
    TESTING = False
    ENV = ENVIRONMENT_DEVELOPMENT

    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', 'sqlite:///blog-dev.db')

    # Development-specific logging
    LOG_LEVEL = 'DEBUG'

    # Higher trace rate in development for better debugging
    SENTRY_TRACES_SAMPLE_RATE = 0.5

    @classmethod
    def init_app(cls, app):
        """
        Initialize application with development configuration.

        Args:
            app: Flask application instance
        """
        super().init_app(app)

        app.config['LOG_DIR'] = os.path.join(app.root_path, '..', 'logs', 'development')
        app.config['EXPLAIN_TEMPLATE_LOADING'] = False
