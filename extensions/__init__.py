"""
Flask extensions for the Mente Tech blog.

This module initializes and configures the Flask extensions used in the
application. Extensions are created here unbound and attached to the
application inside the factory, which keeps them importable from models and
services without circular imports and lets tests build fresh applications.

Extensions included:
- Database ORM via Flask-SQLAlchemy and migrations via Flask-Migrate
- Rate limiting via Flask-Limiter for the public write endpoints
- Response caching via Flask-Caching
- CORS headers for the JSON API via Flask-CORS
- Request metrics via prometheus_flask_exporter plus domain counters
- Background and periodic tasks via Celery
"""

import json
import logging

from flask import Flask
from flask_caching import Cache
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from prometheus_client import Counter
from prometheus_flask_exporter import PrometheusMetrics

from .celery_app import celery, init_celery

logger = logging.getLogger(__name__)

# Database - Required for models
db = SQLAlchemy()
migrate = Migrate()

cache = Cache()
cors = CORS()

# Limits are read from RATELIMIT_* settings when bound to the app
limiter = Limiter(key_func=get_remote_address)

# Request metrics, only bound when METRICS_ENABLED is set
metrics = PrometheusMetrics.for_app_factory()

# Domain counters
posts_published_counter = Counter(
    'blog_posts_published_total',
    'Posts moved to PUBLISHED',
    ['trigger']
)

publication_runs_counter = Counter(
    'blog_publication_runs_total',
    'Scheduled publication runs',
    ['status']
)

content_rejections_counter = Counter(
    'blog_content_rejections_total',
    'Post bodies that could not be converted to safe HTML'
)

newsletter_subscriptions_counter = Counter(
    'blog_newsletter_subscriptions_total',
    'Newsletter subscriptions',
    ['source']
)

contact_messages_counter = Counter(
    'blog_contact_messages_total',
    'Contact form submissions',
    ['status']
)

api_errors_counter = Counter(
    'blog_api_errors_total',
    'API error responses',
    ['code']
)


def init_extensions(app: Flask) -> None:
    """
    Initialize all Flask extensions with the app.

    Args:
        app: Flask application
    """
    _configure_engine_options(app)
    db.init_app(app)
    migrate.init_app(app, db)

    limiter.init_app(app)
    cache.init_app(app)
    cors.init_app(app, resources={r"/api/*": {"origins": app.config.get('CORS_ORIGINS', '*')}})

    if app.config.get('METRICS_ENABLED', False):
        metrics.init_app(app)
        app.logger.info("Metrics endpoint registered at /metrics")


def _configure_engine_options(app: Flask) -> None:
    """Add JSON and statement timeout settings to the SQLAlchemy engine options."""
    engine_options = dict(app.config.get('SQLALCHEMY_ENGINE_OPTIONS') or {})

    # Keep non-ASCII tags searchable as plain text
    engine_options.setdefault('json_serializer', lambda obj: json.dumps(obj, ensure_ascii=False))

    timeout_ms = app.config.get('DATABASE_STATEMENT_TIMEOUT_MS')
    uri = app.config.get('SQLALCHEMY_DATABASE_URI') or ''
    if timeout_ms and uri.startswith('postgresql'):
        connect_args = dict(engine_options.get('connect_args') or {})
        connect_args.setdefault('options', f'-c statement_timeout={int(timeout_ms)}')
        engine_options['connect_args'] = connect_args

    app.config['SQLALCHEMY_ENGINE_OPTIONS'] = engine_options


__all__ = [
    'db',
    'migrate',
    'cache',
    'cors',
    'limiter',
    'metrics',
    'celery',
    'init_celery',
    'posts_published_counter',
    'publication_runs_counter',
    'content_rejections_counter',
    'newsletter_subscriptions_counter',
    'contact_messages_counter',
    'api_errors_counter',
    'init_extensions',
]
