"""
Data models package for the Mente Tech blog.

This package defines the application's data model layer using SQLAlchemy ORM.
It includes:

- A base model implementation with common functionality for all models
- Mixin classes and column types for timestamps stored in UTC
- Content models (posts and categories)
- Auth models (editorial users)
- Communication models (newsletter subscribers and contact messages)

The models implement the Active Record pattern through SQLAlchemy, where each model
instance represents a row in the database and provides methods for CRUD operations.
"""

import logging

from extensions import db

# Set up package logger
logger = logging.getLogger(__name__)

# Import base classes first to avoid circular imports
from .base import BaseModel, TimestampMixin, UTCDateTime

# Export pagination directly from BaseModel
paginate = BaseModel.paginate

# Auth models
from .auth.user import User

# Content models
from .content.category import Category
from .content.post import Post

# Communication models
from .communication.newsletter import Subscriber
from .communication.contact_message import ContactMessage

__all__ = [
    # Core components
    'db', 'BaseModel', 'TimestampMixin', 'UTCDateTime', 'paginate',

    # Auth models
    'User',

    # Content models
    'Category', 'Post',

    # Communication models
    'Subscriber', 'ContactMessage',
]
