"""
Blueprint package for the Mente Tech blog.

This package organizes the application's routes into blueprints:
- api: JSON endpoints under ``/api`` (admin, public posts, newsletter, contact)
- main: Public HTML pages (home, posts, categories)

Each blueprint registers its own error handlers so failures are turned into
JSON errors or error pages at the blueprint boundary.
"""

import logging
import time
from typing import Dict, Set

from flask import Blueprint, Flask

from api import api_bp
from .main import main_bp

# Initialize package logger
logger = logging.getLogger(__name__)

# Blueprint objects and their URL prefixes
blueprint_configs = [
    (main_bp, None),
]

blueprints: Dict[str, Blueprint] = {
    'api': api_bp,
    'main': main_bp,
}


def register_all_blueprints(app: Flask) -> Set[str]:
    """
    Register all application blueprints with the Flask application.

    Args:
        app (Flask): The Flask application instance

    Returns:
        Set[str]: Set of names of registered blueprints
    """
    start_time = time.time()
    registered_blueprints = set()

    app.register_blueprint(api_bp)
    registered_blueprints.add(api_bp.name)

    for blueprint, url_prefix in blueprint_configs:
        app.register_blueprint(blueprint, url_prefix=url_prefix)
        registered_blueprints.add(blueprint.name)

    duration_ms = (time.time() - start_time) * 1000
    app.logger.info("Registered %d blueprints in %.2fms", len(registered_blueprints), duration_ms)
    return registered_blueprints


__all__ = ['blueprints', 'register_all_blueprints', 'api_bp', 'main_bp']
