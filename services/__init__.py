"""
Services package for the Mente Tech blog.

This package holds the business logic of the blog independently from the
presentation layers. The API blueprints, the HTML pages, the CLI and the
Celery tasks all call into these services, passing an explicit
``AuthContext`` where an operation needs authorization.

Services:
- AuthService: Sign-in, API tokens and role checks
- PostService: Post editing and public reads
- CategoryService: Category management
- NewsletterService: Newsletter subscriptions
- ContactService: Contact form messages and owner notification
- publication_service: The scheduled publication trigger
- post_lifecycle: The post status state machine
"""

import logging

from .auth_service import AuthContext, AuthService, has_role
from .post_lifecycle import apply_status, validate_transition
from .post_service import PostService
from .category_service import CategoryService
from .newsletter_service import NewsletterService
from .contact_service import ContactService
from .publication_service import (
    PublicationResult,
    auto_publish_scheduled_posts,
    authorize_publication,
    list_scheduled_posts,
)

logger = logging.getLogger(__name__)

__all__ = [
    'AuthContext',
    'AuthService',
    'has_role',
    'apply_status',
    'validate_transition',
    'PostService',
    'CategoryService',
    'NewsletterService',
    'ContactService',
    'PublicationResult',
    'auto_publish_scheduled_posts',
    'authorize_publication',
    'list_scheduled_posts',
]
