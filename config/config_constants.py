"""
Configuration constants for the Mente Tech blog.

This module centralizes configuration constants used by the configuration
classes in config/base.py and the environment-specific subclasses, providing
a single source of truth for default values and environment overrides.
"""

from datetime import timedelta
from typing import Dict, Any, List, FrozenSet

#=====================================================================
# Environment Constants
#=====================================================================

ENVIRONMENT_DEVELOPMENT = 'development'
ENVIRONMENT_TESTING = 'testing'
ENVIRONMENT_PRODUCTION = 'production'

ALLOWED_ENVIRONMENTS: FrozenSet[str] = frozenset([
    ENVIRONMENT_DEVELOPMENT,
    ENVIRONMENT_TESTING,
    ENVIRONMENT_PRODUCTION,
])

# Environments where missing secrets abort startup
SECURE_ENVIRONMENTS: FrozenSet[str] = frozenset([
    ENVIRONMENT_PRODUCTION,
])

#=====================================================================
# Required Configuration Variables
#=====================================================================

REQUIRED_ENV_VARS: List[str] = [
    'SECRET_KEY',
    'JWT_SECRET_KEY',
    'DATABASE_URL',
]

#=====================================================================
# Content Sanitization
#=====================================================================

# Elements an author may use in a post body. Everything else is stripped.
DEFAULT_SANITIZER_ALLOWED_TAGS: FrozenSet[str] = frozenset([
    'a', 'abbr', 'b', 'blockquote', 'br', 'code', 'del', 'em', 'figcaption',
    'figure', 'h1', 'h2', 'h3', 'h4', 'h5', 'h6', 'hr', 'i', 'img', 'li',
    'ol', 'p', 'pre', 's', 'span', 'strong', 'sub', 'sup', 'table', 'tbody',
    'td', 'th', 'thead', 'tr', 'u', 'ul',
])

DEFAULT_SANITIZER_ALLOWED_ATTRIBUTES: Dict[str, List[str]] = {
    'a': ['href', 'title', 'rel', 'target'],
    'abbr': ['title'],
    'img': ['src', 'alt', 'title', 'width', 'height'],
    'code': ['class'],
    'pre': ['class'],
    'span': ['class'],
    'td': ['align', 'colspan', 'rowspan'],
    'th': ['align', 'colspan', 'rowspan'],
}

DEFAULT_SANITIZER_ALLOWED_PROTOCOLS: FrozenSet[str] = frozenset(['http', 'https', 'mailto'])

#=====================================================================
# Default Configuration Values
#=====================================================================

DEFAULT_ENV_VALUES: Dict[str, Any] = {
    'ENVIRONMENT': ENVIRONMENT_DEVELOPMENT,
    'DEBUG': False,
    'TESTING': False,
    'VERSION': '1.0.0',
    'SITE_NAME': 'Mente Tech',

    # Database
    'SQLALCHEMY_TRACK_MODIFICATIONS': False,
    'SQLALCHEMY_ENGINE_OPTIONS': {
        'pool_pre_ping': True,
        'pool_recycle': 280,
    },
    'DATABASE_STATEMENT_TIMEOUT_MS': 10000,

    # Auth tokens
    'JWT_EXPIRATION_SECONDS': 3600,

    # Rate limiting
    'RATELIMIT_ENABLED': True,
    'RATELIMIT_DEFAULT': '200 per day;50 per hour',
    'RATELIMIT_STORAGE_URI': 'memory://',
    'RATELIMIT_HEADERS_ENABLED': True,

    # Cache
    'CACHE_TYPE': 'SimpleCache',
    'CACHE_DEFAULT_TIMEOUT': 300,

    # CORS
    'CORS_ORIGINS': '*',

    # Monitoring
    'METRICS_ENABLED': True,
    'SENTRY_DSN': None,
    'SENTRY_TRACES_SAMPLE_RATE': 0.1,
    'LOG_LEVEL': 'INFO',
    'LOG_TO_FILE': True,
    'LOG_DIR': 'logs',

    # Content pipeline
    'SANITIZER_ALLOWED_TAGS': DEFAULT_SANITIZER_ALLOWED_TAGS,
    'SANITIZER_ALLOWED_ATTRIBUTES': DEFAULT_SANITIZER_ALLOWED_ATTRIBUTES,
    'SANITIZER_ALLOWED_PROTOCOLS': DEFAULT_SANITIZER_ALLOWED_PROTOCOLS,
    'POSTS_PER_PAGE': 10,
    'RELATED_POSTS_LIMIT': 2,
    'POPULAR_POSTS_LIMIT': 3,

    # Scheduled publication
    'AUTO_PUBLISH_INTERVAL_SECONDS': 60,
    'SCHEDULER_API_KEY': None,

    # Celery
    'CELERY_BROKER_URL': 'redis://localhost:6379/0',
    'CELERY_RESULT_BACKEND': 'redis://localhost:6379/0',
    'CELERY_ALWAYS_EAGER': False,

    # Contact notifications
    'CONTACT_EMAIL': 'contato@mentetech.com.br',
    'CONTACT_EMAIL_FROM': 'Mente Tech <noreply@mentetech.com.br>',
    'CONTACT_EMAIL_API_URL': 'https://api.resend.com/emails',
    'CONTACT_EMAIL_API_KEY': None,
    'CONTACT_EMAIL_TIMEOUT': 10,

    # Development seed data
    'SEED_ADMIN_EMAIL': 'admin@mentetech.com.br',
    'SEED_ADMIN_PASSWORD': 'change-me-now',
}

#=====================================================================
# Environment Overrides
#=====================================================================

DEV_OVERRIDES: Dict[str, Any] = {
    'DEBUG': True,
    'LOG_LEVEL': 'DEBUG',
    'JWT_EXPIRATION_SECONDS': 8 * 3600,
    'CELERY_ALWAYS_EAGER': True,
}

TEST_OVERRIDES: Dict[str, Any] = {
    'TESTING': True,
    'DEBUG': False,
    'RATELIMIT_ENABLED': False,
    'METRICS_ENABLED': False,
    'LOG_LEVEL': 'ERROR',
    'LOG_TO_FILE': False,
    'CACHE_TYPE': 'NullCache',
    'CELERY_ALWAYS_EAGER': True,
    'SQLALCHEMY_ENGINE_OPTIONS': {},
}

PROD_OVERRIDES: Dict[str, Any] = {
    'LOG_LEVEL': 'WARNING',
    'PREFERRED_URL_SCHEME': 'https',
    'SESSION_COOKIE_SECURE': True,
    'PERMANENT_SESSION_LIFETIME': timedelta(days=1),
}

ENVIRONMENT_OVERRIDES: Dict[str, Dict[str, Any]] = {
    ENVIRONMENT_DEVELOPMENT: DEV_OVERRIDES,
    ENVIRONMENT_TESTING: TEST_OVERRIDES,
    ENVIRONMENT_PRODUCTION: PROD_OVERRIDES,
}

# Keys whose environment variable values are JSON or comma lists
LIST_SETTINGS: FrozenSet[str] = frozenset([
    'SANITIZER_ALLOWED_TAGS',
    'SANITIZER_ALLOWED_PROTOCOLS',
])
