"""
models/auth/__init__.py

This package contains database models related to authentication and authorization.

Modules:
- user: Defines the User model for the editorial team, with password hashing,
  a single role and JWT tokens for the API.
"""

from .user import User

__all__ = ['User']
