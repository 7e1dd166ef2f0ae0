"""
Celery integration for the Mente Tech blog.

Celery runs the periodic scheduled publication trigger. The beat schedule is
built from ``AUTO_PUBLISH_INTERVAL_SECONDS`` unless ``CELERY_BEAT_SCHEDULE`` is
configured explicitly. Start a worker with the embedded scheduler via::

    celery -A app.celery worker --beat
"""

import logging
from datetime import timedelta
from typing import Any, Dict, Optional

from celery import Celery, Task
from flask import Flask, has_app_context

logger = logging.getLogger(__name__)

AUTO_PUBLISH_TASK = 'celery_tasks.publishing.auto_publish_scheduled_posts'

# Application the worker pushes a context for; set by init_celery
_flask_app: Optional[Flask] = None


class AppContextTask(Task):
    """Task base that runs inside the bound Flask application context."""

    def __call__(self, *args, **kwargs):
        if _flask_app is None or has_app_context():
            return super().__call__(*args, **kwargs)
        with _flask_app.app_context():
            return super().__call__(*args, **kwargs)


# Initialize Celery instance
celery = Celery('mentetech_blog', task_cls=AppContextTask, include=['celery_tasks.publishing'])


def build_beat_schedule(app: Flask) -> Dict[str, Any]:
    """Return the periodic task table for the application."""
    if app.config.get('CELERY_BEAT_SCHEDULE'):
        return app.config['CELERY_BEAT_SCHEDULE']

    interval = int(app.config.get('AUTO_PUBLISH_INTERVAL_SECONDS', 60))
    return {
        'auto-publish-scheduled-posts': {
            'task': AUTO_PUBLISH_TASK,
            'schedule': timedelta(seconds=interval),
        }
    }


def init_celery(app: Optional[Flask] = None) -> Celery:
    """
    Initialize Celery with the Flask application configuration.

    Args:
        app: Flask application instance

    Returns:
        Configured Celery instance
    """
    if app is None:
        # Return the pre-configured instance for imports
        return celery

    celery.conf.update(
        broker_url=app.config.get('CELERY_BROKER_URL', 'redis://localhost:6379/0'),
        result_backend=app.config.get('CELERY_RESULT_BACKEND', 'redis://localhost:6379/0'),
        task_serializer='json',
        accept_content=['json'],
        result_serializer='json',
        timezone='UTC',
        enable_utc=True,
        task_always_eager=app.config.get('CELERY_ALWAYS_EAGER', False),
        task_eager_propagates=app.config.get('CELERY_EAGER_PROPAGATES', False),
        worker_hijack_root_logger=False,
        task_acks_late=True,
        # A slow run must not overlap the next tick for long
        task_time_limit=app.config.get('CELERY_TASK_TIME_LIMIT', 300),
        beat_schedule=build_beat_schedule(app),
    )

    celery.conf.task_annotations = {
        '*': {
            'on_failure': _handle_task_failure,
        }
    }

    global _flask_app
    _flask_app = app
    logger.info("Celery initialized successfully")

    return celery


def _handle_task_failure(task, exception, task_id, args, kwargs, einfo):
    """Handle task failure by logging details."""
    logger.error("Task %s[%s] failed: %s", task.name, task_id, exception)
