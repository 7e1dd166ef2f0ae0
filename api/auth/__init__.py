"""
Authentication API module for the Mente Tech blog.

Key endpoints:
- /api/auth/login: Authenticate and obtain a JWT token
- /api/auth/me: Return the user behind the presented token

The decorators in this package guard the admin endpoints: ``token_required``
resolves the bearer token, ``admin_required`` additionally demands the admin
role and ``admin_or_scheduler_required`` also admits the trusted internal
scheduler through the ``X-Scheduler-Key`` header.
"""

import logging

from flask import Blueprint

# Create blueprint for authentication API routes
auth_api = Blueprint('auth_api', __name__, url_prefix='/auth')

# Initialize module logger
logger = logging.getLogger(__name__)

# Import route handlers
from . import routes  # noqa: E402,F401
from .decorators import admin_or_scheduler_required, admin_required, token_required  # noqa: E402

__all__ = ['auth_api', 'token_required', 'admin_required', 'admin_or_scheduler_required']
