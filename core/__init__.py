"""
Core package for the Mente Tech blog.

This package contains the foundation the rest of the application builds on:
- factory: The Flask application factory (``create_app``)
- errors: The error taxonomy shared by services and blueprints
- rendering: The Markdown to sanitized HTML pipeline
- loggings: Logging setup
- seeder: Sample data for development databases
- utils: String and date/time helpers

Submodules are imported directly (``from core.factory import create_app``);
this package does not import them eagerly so that models and services can
use ``core.utils`` without loading the whole application.
"""

import logging

# Configure module logger
logger = logging.getLogger(__name__)

# Version information
__version__ = '1.0.0'
