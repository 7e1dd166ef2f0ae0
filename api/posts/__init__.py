"""
Public read API for published posts and categories.

Only PUBLISHED posts are ever returned; the endpoints never change a post's
lifecycle state. Viewing a single post counts the view.
"""

from flask import Blueprint

posts_api = Blueprint('posts_api', __name__)

from . import routes  # noqa: E402,F401

__all__ = ['posts_api']
