"""
CLI package for the Mente Tech blog.

Commands are registered on the Flask CLI and run inside the application
context, e.g. ``flask blog auto-publish``. Database migrations come from
Flask-Migrate under ``flask db``.
"""

import logging

from flask import Flask

from .commands import blog_cli

# Initialize logger
logger = logging.getLogger(__name__)


def register_cli_commands(app: Flask) -> None:
    """
    Register command line interface commands with the application.

    Args:
        app: Flask application instance
    """
    app.cli.add_command(blog_cli)


__all__ = ['register_cli_commands', 'blog_cli']
