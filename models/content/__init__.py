"""
Content models package for the Mente Tech blog.

This package contains the models of the content store:
- Categories for grouping posts on the public site
- Posts with their DRAFT / PUBLISHED / SCHEDULED lifecycle
"""

from .category import Category
from .post import Post

# Define exports explicitly to control the public API
__all__ = [
    "Category",
    "Post",
]
