"""
Celery tasks for the Mente Tech blog.

Tasks are registered on the shared ``extensions.celery`` instance and run
inside the Flask application context bound by ``init_celery``.
"""

from .publishing import auto_publish_scheduled_posts

__all__ = ['auto_publish_scheduled_posts']
