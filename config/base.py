"""
Base configuration class for the Mente Tech blog.
"""

import json
import logging
import os
import secrets
from typing import Any, List

import yaml

from .config_constants import (
    DEFAULT_ENV_VALUES,
    ENVIRONMENT_DEVELOPMENT,
    ENVIRONMENT_OVERRIDES,
    ENVIRONMENT_TESTING,
    LIST_SETTINGS,
    REQUIRED_ENV_VARS,
    SECURE_ENVIRONMENTS,
)

# Set up module logger
logger = logging.getLogger(__name__)


class Config:
    """
    Configuration management class for the application.

    Settings are applied to ``app.config`` in increasing order of priority:

    1. ``DEFAULT_ENV_VALUES`` from config_constants
    2. the overrides registered for the class's environment
    3. upper-case attributes declared on the (sub)class
    4. an optional YAML file named by ``BLOG_CONFIG_FILE``
    5. ``FLASK_``-prefixed environment variables and well-known variables
       such as ``DATABASE_URL``

    Class Attributes:
        ENV (str): Environment name the class represents
        REQUIRED_VARS (List[str]): Settings that must be present in secure environments
    """

    ENV = ENVIRONMENT_DEVELOPMENT
    REQUIRED_VARS: List[str] = REQUIRED_ENV_VARS

    # Application settings
    SECRET_KEY = os.environ.get('SECRET_KEY') or secrets.token_hex(32)
    JWT_SECRET_KEY = os.environ.get('JWT_SECRET_KEY') or secrets.token_hex(32)

    # Database settings
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', 'sqlite:///blog.db')

    @classmethod
    def init_app(cls, app) -> None:
        """
        Initialize the application with configuration settings.

        Args:
            app: Flask application instance

        Raises:
            ValueError: If required settings are missing in a secure environment
        """
        for key, value in DEFAULT_ENV_VALUES.items():
            app.config[key] = value

        for key, value in ENVIRONMENT_OVERRIDES.get(cls.ENV, {}).items():
            app.config[key] = value

        app.config.from_object(cls)
        app.config['ENVIRONMENT'] = cls.ENV

        cls._load_from_file(app)
        cls._load_from_environment(app)
        cls._validate_configuration(app)

        # Make selected config values available in templates
        @app.context_processor
        def inject_config():
            return {
                'site': {
                    'name': app.config.get('SITE_NAME'),
                    'version': app.config.get('VERSION'),
                    'environment': app.config.get('ENVIRONMENT'),
                }
            }

    @classmethod
    def _load_from_file(cls, app) -> None:
        """
        Merge settings from the YAML file named by ``BLOG_CONFIG_FILE``.

        Only upper-case top-level keys are applied; everything else in the
        file is ignored.

        Args:
            app: Flask application instance
        """
        path = os.environ.get('BLOG_CONFIG_FILE')
        if not path:
            return

        if not os.path.exists(path):
            logger.warning("Configuration file %s not found, skipping", path)
            return

        with open(path, 'r', encoding='utf-8') as handle:
            data = yaml.safe_load(handle) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Configuration file {path} must contain a mapping")

        for key, value in data.items():
            if isinstance(key, str) and key.isupper():
                app.config[key] = cls._coerce_setting(key, value)
        logger.info("Loaded configuration overrides from %s", path)

    @classmethod
    def _load_from_environment(cls, app) -> None:
        """
        Load configuration from environment variables.

        Environment variables take precedence over other settings.
        The function handles type conversions for common data types.

        Args:
            app: Flask application instance
        """
        for key, value in os.environ.items():
            if key.startswith('FLASK_'):
                app_key = key[6:]
                # Flask's own FLASK_APP / FLASK_DEBUG style variables
                if app_key in ('APP', 'RUN_FROM_CLI'):
                    continue
                app.config[app_key] = cls._coerce_setting(app_key, cls._convert_env_value(value))

        for var in ('SECRET_KEY', 'JWT_SECRET_KEY', 'SENTRY_DSN', 'SCHEDULER_API_KEY',
                    'CONTACT_EMAIL', 'CONTACT_EMAIL_API_KEY', 'CELERY_BROKER_URL',
                    'CELERY_RESULT_BACKEND', 'LOG_LEVEL'):
            if var in os.environ:
                app.config[var] = os.environ[var]

        # The test database never follows DATABASE_URL
        if cls.ENV != ENVIRONMENT_TESTING and 'DATABASE_URL' in os.environ:
            app.config['SQLALCHEMY_DATABASE_URI'] = os.environ['DATABASE_URL']

        if 'REDIS_URL' in os.environ:
            app.config['CACHE_TYPE'] = 'RedisCache'
            app.config['CACHE_REDIS_URL'] = os.environ['REDIS_URL']
            app.config['RATELIMIT_STORAGE_URI'] = os.environ['REDIS_URL']

    @staticmethod
    def _convert_env_value(value: str) -> Any:
        """
        Convert environment variable string to appropriate Python type.

        Args:
            value: String value from environment variable

        Returns:
            Value converted to appropriate type (bool, int, float, str)
        """
        if value.lower() in ('true', 'yes', '1'):
            return True
        elif value.lower() in ('false', 'no', '0'):
            return False
        elif value.isdigit():
            return int(value)
        elif value.replace('.', '', 1).isdigit() and value.count('.') == 1:
            return float(value)
        return value

    @staticmethod
    def _coerce_setting(key: str, value: Any) -> Any:
        """Normalize list-like and mapping settings loaded from text sources."""
        if key in LIST_SETTINGS:
            if isinstance(value, str):
                try:
                    parsed = json.loads(value)
                except json.JSONDecodeError:
                    parsed = [item.strip() for item in value.split(',') if item.strip()]
                value = parsed
            return frozenset(value)

        if key == 'SANITIZER_ALLOWED_ATTRIBUTES' and isinstance(value, str):
            return json.loads(value)

        return value

    @classmethod
    def _validate_configuration(cls, app) -> None:
        """
        Validate that all required configuration is present.

        Args:
            app: Flask application instance

        Raises:
            ValueError: If configuration validation fails
        """
        if app.config.get('ENVIRONMENT') not in SECURE_ENVIRONMENTS:
            return

        missing_vars = [var for var in cls.REQUIRED_VARS if var not in os.environ]
        if not app.config.get('SQLALCHEMY_DATABASE_URI'):
            missing_vars.append('DATABASE_URL')

        if missing_vars:
            raise ValueError(f"Missing required environment variables: {', '.join(sorted(set(missing_vars)))}")

        if app.config.get('SECRET_KEY') in ('dev', 'development', 'secret', 'changeme'):
            logger.error("Development SECRET_KEY used in production environment")
            raise ValueError("Development SECRET_KEY used in production environment")

        if not app.config.get('SCHEDULER_API_KEY'):
            logger.warning("SCHEDULER_API_KEY not set: the external scheduler endpoint is disabled")

