"""
API package for the Mente Tech blog.

This package provides the JSON endpoints of the blog. It defines the API
blueprint, the error handlers shared by every endpoint and the response
headers added to API responses.

Key API areas:
- Authentication: Login and current user
- Admin: Post editing, categories, the publication trigger and the inbox
- Posts: Public read access to published posts and categories
- Newsletter: Subscriptions
- Contact: Contact form submissions

Errors are returned as JSON with an ``error`` message and a machine-readable
``code``; validation failures also carry a ``fields`` map.
"""

import logging

from flask import Blueprint, jsonify, request
from marshmallow import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from core.errors import BlogError
from extensions import api_errors_counter, db
from .schemas import to_validation_failed

logger = logging.getLogger(__name__)

# Create main API blueprint
api_bp = Blueprint('api', __name__, url_prefix='/api')


def _error_response(error: BlogError):
    api_errors_counter.labels(code=error.error_code).inc()
    return jsonify(error.to_dict()), error.status_code


@api_bp.errorhandler(BlogError)
def handle_blog_error(error: BlogError):
    """Handle domain errors with their own status and code."""
    if error.status_code >= 500:
        logger.error("%s on %s %s: %s", error.error_code, request.method, request.path, error.message)
    return _error_response(error)


@api_bp.errorhandler(ValidationError)
def handle_schema_error(error: ValidationError):
    """Handle Marshmallow errors that escaped the loading helpers."""
    return _error_response(to_validation_failed(error))


@api_bp.errorhandler(SQLAlchemyError)
def handle_database_error(error: SQLAlchemyError):
    """Roll back and report database errors without details."""
    db.session.rollback()
    logger.error("Database error on %s %s: %s", request.method, request.path, error)
    api_errors_counter.labels(code='STORE_ERROR').inc()
    return jsonify({"error": "A database error occurred", "code": "STORE_ERROR"}), 500


@api_bp.errorhandler(404)
def resource_not_found(_e):
    """Handle resources not found with a consistent JSON response"""
    api_errors_counter.labels(code='NOT_FOUND').inc()
    return jsonify({"error": "Resource not found", "code": "NOT_FOUND"}), 404


@api_bp.errorhandler(405)
def method_not_allowed(_e):
    api_errors_counter.labels(code='METHOD_NOT_ALLOWED').inc()
    return jsonify({"error": "Method not allowed", "code": "METHOD_NOT_ALLOWED"}), 405


@api_bp.errorhandler(429)
def too_many_requests(_e):
    """Handle rate limiting with a consistent JSON response"""
    api_errors_counter.labels(code='RATE_LIMITED').inc()
    return jsonify({
        "error": "Too many requests",
        "code": "RATE_LIMITED",
        "message": "Rate limit exceeded. Please try again later."
    }), 429


@api_bp.errorhandler(500)
def internal_server_error(e):
    """Handle internal server errors with a consistent JSON response"""
    logger.exception("Internal server error: %s", getattr(e, 'original_exception', e))
    api_errors_counter.labels(code='INTERNAL_ERROR').inc()
    return jsonify({"error": "Internal server error", "code": "INTERNAL_ERROR"}), 500


@api_bp.after_request
def after_request(response):
    """Add security headers to all API responses"""
    response.headers['X-Content-Type-Options'] = 'nosniff'
    response.headers['X-Frame-Options'] = 'DENY'

    # Admin and write responses must never be cached
    if request.method != 'GET' or request.path.startswith('/api/admin') \
            or request.path.startswith('/api/auth'):
        response.headers['Cache-Control'] = 'no-store, no-cache, must-revalidate, max-age=0'

    return response


# Import and register API modules
from api.auth import auth_api
from api.admin import admin_api
from api.posts import posts_api
from api.newsletter import newsletter_api
from api.contact import contact_api

api_bp.register_blueprint(auth_api)
api_bp.register_blueprint(admin_api)
api_bp.register_blueprint(posts_api)
api_bp.register_blueprint(newsletter_api)
api_bp.register_blueprint(contact_api)

