"""
Mente Tech blog application factory.

This module provides the application factory function for creating Flask
application instances with the appropriate configuration and extension setup.
"""

import logging
import time
from datetime import datetime, timezone

from flask import Flask, jsonify, render_template, request
from jinja2 import TemplateNotFound
from werkzeug.exceptions import HTTPException

from blueprints import register_all_blueprints
from cli import register_cli_commands
from config import get_config
from core.loggings import setup_app_logging
from extensions import db, init_celery, init_extensions

logger = logging.getLogger(__name__)


def create_app(config_name=None) -> Flask:
    """
    Create and configure a Flask application instance.

    Args:
        config_name (str, optional): Name of the configuration to use ('development',
                                     'production', 'testing'). Defaults to the
                                     detected environment.

    Returns:
        Flask: Configured Flask application instance ready to serve requests
    """
    app = Flask(__name__, instance_relative_config=True)

    # Load configuration
    config_obj = get_config(config_name)
    config_obj.init_app(app)

    # Set up logging early to capture initialization issues
    setup_app_logging(app)

    startup_start_time = time.time()

    init_extensions(app)
    init_celery(app)

    register_all_blueprints(app)
    register_error_handlers(app)
    register_context_processors(app)
    register_cli_commands(app)

    startup_duration = time.time() - startup_start_time
    app.config['APP_INITIALIZATION_TIME'] = datetime.now(timezone.utc).isoformat()
    app.logger.info("Application started in %.3fs (environment=%s)",
                    startup_duration, app.config.get('ENV'))

    return app


def _wants_json() -> bool:
    return request.path.startswith('/api/') or request.accept_mimetypes.best == 'application/json'


def register_error_handlers(app: Flask) -> None:
    """
    Register application-wide error handlers.

    Blueprint handlers take precedence; these cover URLs that matched no
    blueprint and anything the blueprints left unhandled.

    Args:
        app (Flask): The Flask application instance
    """
    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        """Handle all HTTP exceptions."""
        if e.code >= 500:
            app.logger.error("HTTP %s on %s: %s", e.code, request.path, e.description)
        else:
            app.logger.info("HTTP %s on %s", e.code, request.path)

        if _wants_json():
            return jsonify({
                'error': e.name,
                'code': e.name.upper().replace(' ', '_'),
            }), e.code

        try:
            return render_template(f'errors/{e.code}.html', path=request.path), e.code
        except TemplateNotFound:
            return f"Error {e.code}: {e.name}", e.code

    @app.errorhandler(Exception)
    def handle_exception(e):
        """Handle all unhandled exceptions."""
        db.session.rollback()
        app.logger.exception("Unhandled exception on %s: %s", request.path, e)

        if _wants_json():
            return jsonify({
                'error': 'An unexpected error occurred',
                'code': 'INTERNAL_ERROR',
            }), 500

        return render_template('errors/500.html'), 500


def register_context_processors(app: Flask) -> None:
    """Make site-wide values available to every template."""

    @app.context_processor
    def inject_site():
        return {
            'site_name': app.config.get('SITE_NAME', 'Mente Tech'),
            'current_year': datetime.now(timezone.utc).year,
        }
