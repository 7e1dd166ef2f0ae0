"""
Newsletter API module for the Mente Tech blog.

Key endpoints:
- /api/newsletter/subscribe: Subscribe an email to the newsletter
"""

from .routes import newsletter_api

__all__ = ['newsletter_api']
