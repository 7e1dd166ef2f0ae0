"""
Public HTML blueprint for the Mente Tech blog.

This blueprint renders the reader-facing pages: the home page with search,
single posts and category pages. Only published posts are shown; anything
else is a 404 page. Stored post bodies are sanitized once more before being
marked safe in the templates.
"""

import logging

from flask import Blueprint

# Initialize logger
logger = logging.getLogger(__name__)

# Create the blueprint with its own template folder
main_bp = Blueprint(
    'main',
    __name__,
    template_folder='templates',
)

from . import routes  # noqa: E402,F401
from .errors import init_error_handlers  # noqa: E402

init_error_handlers(main_bp)

__all__ = ['main_bp']
