"""
Main application entry point for the Mente Tech blog.

This module handles environment validation and application creation. It
serves as the WSGI entry point (``app``) and exposes the Celery instance
used by the worker (``celery -A app.celery worker --beat``).

The application uses a factory pattern for initialization to allow for
proper extension setup and blueprint registration. Security checks are
performed before initialization so a production deployment never starts
with missing or placeholder secrets.
"""

import logging
import os

from sqlalchemy.exc import SQLAlchemyError

from core.factory import create_app
from extensions import celery

# Security constants
REQUIRED_ENV_VARS = [
    'SECRET_KEY',
    'DATABASE_URL',
    'JWT_SECRET_KEY',
]

INSECURE_VALUES = ('dev', 'development', 'secret', 'changeme')


def validate_environment() -> None:
    """
    Validate required environment variables are set.

    Only enforced when ``ENVIRONMENT`` is ``production``; development and
    testing fall back to the defaults of their configuration classes.

    Raises:
        RuntimeError: If any required variables are missing or insecure
    """
    if os.getenv('ENVIRONMENT', '').lower() != 'production':
        return

    missing = [var for var in REQUIRED_ENV_VARS if not os.getenv(var)]
    if missing:
        raise RuntimeError(f"Missing security variables: {', '.join(missing)}")

    for key_var in ('SECRET_KEY', 'JWT_SECRET_KEY'):
        key_value = os.getenv(key_var, '')
        if key_value in INSECURE_VALUES or len(key_value) < 16:
            raise RuntimeError(f"Insecure {key_var} detected in production environment")


# Initialize application
try:
    validate_environment()
    app = create_app()
    app.logger.info("Application initialized successfully (version: %s)", app.config.get('VERSION', '1.0.0'))
except SQLAlchemyError as e:
    logging.critical("Application initialization failed: %s", e)
    raise
except RuntimeError as e:
    logging.critical("Application initialization failed: %s", e)
    raise

__all__ = ['app', 'celery']

if __name__ == '__main__':
    app.run()
