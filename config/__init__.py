"""
Configuration Package for the Mente Tech blog.

This package provides configuration management for the development, testing
and production environments, plus the helpers used by the application factory
to pick the right configuration class.
"""

import os
import logging
from typing import Optional, Type
from functools import lru_cache

# Initialize logger
logger = logging.getLogger(__name__)

from .config_constants import (
    ENVIRONMENT_DEVELOPMENT,
    ENVIRONMENT_TESTING,
    ENVIRONMENT_PRODUCTION,
    ALLOWED_ENVIRONMENTS,
)

# Import configuration classes
from .base import Config
from .development import DevelopmentConfig
from .testing import TestingConfig
from .production import ProductionConfig

# Configuration registry mapping environment names to config classes
CONFIG_REGISTRY = {
    ENVIRONMENT_DEVELOPMENT: DevelopmentConfig,
    ENVIRONMENT_TESTING: TestingConfig,
    ENVIRONMENT_PRODUCTION: ProductionConfig,
}


@lru_cache(maxsize=8)
def get_config(env_name: Optional[str] = None) -> Type[Config]:
    """
    Get the configuration class for the specified environment.

    Args:
        env_name: Environment name (development, testing, production).
                 If None, uses the environment variable ENVIRONMENT or
                 defaults to 'development'

    Returns:
        Config class appropriate for the specified environment
    """
    env_name = env_name or detect_environment()

    # Normalize the name to handle various formats
    if isinstance(env_name, str):
        env_name = env_name.lower().replace('-', '_')

    config_class = CONFIG_REGISTRY.get(env_name)
    if not config_class:
        # Fallback to development config if an unknown environment is specified
        logger.warning(f"Unknown environment name: {env_name}, using development config")
        config_class = DevelopmentConfig

    return config_class


def detect_environment() -> str:
    """
    Detect the current environment from environment variables.

    Returns:
        String containing the environment name (e.g., 'development', 'production')
    """
    environment = os.environ.get('ENVIRONMENT')

    # Alternative environment variables for compatibility
    if environment is None:
        environment = os.environ.get('FLASK_ENV') or os.environ.get('ENV')

    if environment not in ALLOWED_ENVIRONMENTS:
        if environment is not None:
            logger.warning(
                f"Unknown environment '{environment}', "
                f"falling back to {ENVIRONMENT_DEVELOPMENT}"
            )
        environment = ENVIRONMENT_DEVELOPMENT

    return environment


__all__ = [
    'Config',
    'DevelopmentConfig',
    'TestingConfig',
    'ProductionConfig',
    'CONFIG_REGISTRY',
    'get_config',
    'detect_environment',
]
