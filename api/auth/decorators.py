"""
Authentication decorators for API routes.

Each decorator builds the caller's ``AuthContext`` and stores it on ``g`` so
views can pass it to the services explicitly:

- ``token_required``: a valid bearer JWT of an active user
- ``admin_required``: as above, and the user holds the admin role
- ``admin_or_scheduler_required``: the admin check, or the scheduler key
"""

import functools
import logging
from typing import Callable, TypeVar, cast

from flask import g, jsonify, request

from services.auth_service import ROLE_ADMIN, AuthContext, AuthService, has_role

logger = logging.getLogger(__name__)

# Define a type variable for decorators
F = TypeVar('F', bound=Callable)

SCHEDULER_KEY_HEADER = 'X-Scheduler-Key'


def _bearer_token():
    auth_header = request.headers.get('Authorization', '')
    if not auth_header.startswith('Bearer '):
        return None
    return auth_header[len('Bearer '):].strip() or None


def _authenticate():
    """
    Resolve the bearer token of the current request.

    Returns:
        Tuple of (user, error response); exactly one is None
    """
    token = _bearer_token()
    if token is None:
        logger.info("Missing or invalid authorization header on %s", request.path)
        return None, (jsonify({"error": "Authorization required", "code": "AUTH_REQUIRED"}), 401)

    is_valid, user, error_message = AuthService.verify_api_token(token)
    if not is_valid:
        logger.info("Rejected token on %s: %s", request.path, error_message)
        return None, (jsonify({"error": error_message or "Invalid token", "code": "INVALID_TOKEN"}), 401)

    g.user = user
    g.user_id = user.id
    g.auth_context = AuthContext.for_user(user)
    return user, None


def _forbidden():
    logger.warning("Admin access denied for user %s on %s", g.get('user_id'), request.path)
    return jsonify({
        "error": "Administrator privileges required",
        "code": "ADMIN_REQUIRED"
    }), 403


def token_required(f: F) -> F:
    """
    Decorator to validate JWT token for protected API routes.

    Args:
        f: The route handler function to decorate

    Returns:
        Decorated function that enforces JWT authentication
    """
    @functools.wraps(f)
    def decorated(*args, **kwargs):
        user, error = _authenticate()
        if error is not None:
            return error
        return f(*args, **kwargs)

    return cast(F, decorated)


def admin_required(f: F) -> F:
    """
    Decorator to restrict API route access to administrators.

    A missing or invalid token yields 401; a valid token of a user without
    the admin role yields 403 with code ``ADMIN_REQUIRED``.
    """
    @functools.wraps(f)
    def decorated(*args, **kwargs):
        user, error = _authenticate()
        if error is not None:
            return error
        if not has_role(user.id, ROLE_ADMIN):
            return _forbidden()
        return f(*args, **kwargs)

    return cast(F, decorated)


def admin_or_scheduler_required(f: F) -> F:
    """
    Decorator admitting administrators or the trusted internal scheduler.

    The scheduler presents ``X-Scheduler-Key`` matching ``SCHEDULER_API_KEY``
    and runs with the system context.
    """
    @functools.wraps(f)
    def decorated(*args, **kwargs):
        scheduler_key = request.headers.get(SCHEDULER_KEY_HEADER)
        if scheduler_key:
            if AuthService.verify_scheduler_key(scheduler_key):
                g.user = None
                g.user_id = None
                g.auth_context = AuthContext.system()
                return f(*args, **kwargs)
            logger.warning("Invalid scheduler key presented on %s", request.path)
            return jsonify({"error": "Invalid scheduler key", "code": "INVALID_TOKEN"}), 401

        user, error = _authenticate()
        if error is not None:
            return error
        if not has_role(user.id, ROLE_ADMIN):
            return _forbidden()
        return f(*args, **kwargs)

    return cast(F, decorated)
