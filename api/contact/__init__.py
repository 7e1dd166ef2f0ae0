"""
Contact form API module for the Mente Tech blog.

Key endpoints:
- /api/contact: Send a message to the site owner
"""

from .routes import contact_api

__all__ = ['contact_api']
