"""
Communication models package for the Mente Tech blog.

This package contains models for the audience-facing forms:
- Newsletter subscribers captured by the newsletter and contact forms
- Contact messages and their notification status
"""

from .newsletter import Subscriber
from .contact_message import ContactMessage

__all__ = [
    'Subscriber',
    'ContactMessage',
]
