"""
Periodic publication task.

Celery beat invokes this task every ``AUTO_PUBLISH_INTERVAL_SECONDS``. It is
the trusted internal caller of the publication trigger, so it runs with the
system context. A failed run is logged and left to the next tick.
"""

import logging
from typing import Any, Dict

from core.errors import PublicationError
from extensions import celery
from extensions.celery_app import AUTO_PUBLISH_TASK
from services import publication_service
from services.auth_service import AuthContext

logger = logging.getLogger(__name__)


@celery.task(name=AUTO_PUBLISH_TASK, ignore_result=False)
def auto_publish_scheduled_posts() -> Dict[str, Any]:
    """Publish every overdue scheduled post."""
    try:
        result = publication_service.auto_publish_scheduled_posts(
            AuthContext.system(), trigger='scheduled'
        )
    except PublicationError as e:
        logger.error("Scheduled auto-publish run failed: %s", e.message)
        return {'success': False, 'error': e.message, 'published_count': 0}

    return result.to_dict()
