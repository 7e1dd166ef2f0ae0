"""
Administrative API module for the Mente Tech blog.

This module initializes the admin Blueprint. It provides endpoints for
editing posts and categories, running the scheduled publication trigger and
reading the contact inbox and newsletter statistics. Every endpoint requires
an administrator's bearer token; the publication trigger also accepts the
internal scheduler key.
"""

import logging

from flask import Blueprint

# Create blueprint for admin API
admin_api = Blueprint('admin', __name__, url_prefix='/admin')

# Initialize logger
logger = logging.getLogger(__name__)

# Define rate limits
DEFAULT_LIMIT = "60 per minute"
TRIGGER_LIMIT = "10 per minute"

# Import routes
from . import routes, categories, inbox  # noqa: E402,F401

__all__ = ['admin_api']
