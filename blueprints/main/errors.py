"""
Error handling module for the main blueprint.

Errors raised while rendering public pages are turned into error pages with
the right status code. Database errors roll the session back first. None of
them crash the application.
"""

from flask import Blueprint, current_app, render_template, request
from sqlalchemy.exc import SQLAlchemyError

from extensions import db


def log_error(error, level='error') -> None:
    """
    Log an error with the request it happened on.

    Args:
        error: The error object
        level: Log level to use (default: 'error')
    """
    code = getattr(error, 'code', None) or 500
    getattr(current_app.logger, level)("Error %s: %s %s - %s", code, request.method, request.path, error)


def render_not_found():
    return render_template('errors/404.html', path=request.path), 404


def render_server_error():
    return render_template('errors/500.html'), 500


def init_error_handlers(blueprint: Blueprint) -> Blueprint:
    """
    Register the error handlers of the public pages on ``blueprint``.

    Args:
        blueprint: Blueprint to register the handlers with

    Returns:
        The same blueprint
    """
    @blueprint.errorhandler(404)
    def not_found_error(error):
        log_error(error, level='info')
        return render_not_found()

    @blueprint.errorhandler(429)
    def too_many_requests_error(error):
        log_error(error, level='warning')
        return render_template('errors/429.html'), 429

    @blueprint.errorhandler(SQLAlchemyError)
    def database_error(error):
        db.session.rollback()
        log_error(error)
        return render_server_error()

    @blueprint.errorhandler(500)
    def internal_error(error):
        current_app.logger.exception("Unhandled error on %s: %s", request.path,
                                     getattr(error, 'original_exception', error))
        return render_server_error()

    return blueprint
