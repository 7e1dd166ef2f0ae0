"""
Scheduled publication trigger.

Promotes every SCHEDULED post whose ``scheduled_for`` has passed to
PUBLISHED. The promotion is a single conditional UPDATE evaluated by the
database, so a post edited out of SCHEDULED between two runs can never be
published by a stale read:

    UPDATE posts
       SET status = 'PUBLISHED',
           publish_at = COALESCE(publish_at, :now),
           scheduled_for = NULL,
           updated_at = :now
     WHERE status = 'SCHEDULED' AND scheduled_for <= :now

Running it again with nothing newly overdue matches no rows. Databases without
UPDATE ... RETURNING first lock the overdue ids with SELECT ... FOR UPDATE and
restrict both the UPDATE and the read-back to those ids. A failed run is
rolled back as a whole; the next run retries the same candidates.

Entry points: the admin API endpoint, the Celery beat task and the
``flask blog auto-publish`` command.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func, literal, select, update
from sqlalchemy.exc import SQLAlchemyError

from core.errors import AuthorizationError, PublicationError
from core.utils.date_time import ensure_utc, to_iso_format, utcnow
from extensions import db, posts_published_counter, publication_runs_counter
from models import Post, UTCDateTime
from services.auth_service import AuthContext, ROLE_ADMIN, has_role

logger = logging.getLogger(__name__)


@dataclass
class PublicationResult:
    """Outcome of one trigger run."""
    count: int
    posts: List[Dict[str, Any]] = field(default_factory=list)
    ran_at: Optional[datetime] = None

    @property
    def message(self) -> str:
        if self.count == 0:
            return 'No scheduled posts to publish'
        return f'Published {self.count} scheduled post(s)'

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': True,
            'message': self.message,
            'published_count': self.count,
            'published_posts': self.posts,
            'timestamp': to_iso_format(self.ran_at),
        }


def authorize_publication(context: AuthContext) -> None:
    """
    Check that the caller may run the trigger.

    Raises:
        AuthorizationError: If the caller is neither trusted nor an administrator
    """
    if context.trusted:
        return
    if context.is_admin and has_role(context.user_id, ROLE_ADMIN):
        return
    logger.warning("Auto-publish refused for user %s", context.user_id)
    raise AuthorizationError('Administrator privileges required')


def auto_publish_scheduled_posts(context: AuthContext, now: Optional[datetime] = None,
                                 trigger: str = 'scheduled') -> PublicationResult:
    """
    Publish every scheduled post whose time has come.

    Args:
        context: Caller identity; ``AuthContext.system()`` for internal runs
        now: Reference time (defaults to the current UTC time)
        trigger: Label recorded in metrics (``scheduled`` or ``manual``)

    Returns:
        PublicationResult: Count and identifiers of the posts published

    Raises:
        AuthorizationError: If the caller may not run the trigger
        PublicationError: If the update failed; nothing was published
    """
    authorize_publication(context)

    now = ensure_utc(now) or utcnow()
    now_param = literal(now, type_=UTCDateTime())

    overdue = (Post.status == Post.STATUS_SCHEDULED, Post.scheduled_for <= now_param)
    statement = (
        update(Post)
        .where(*overdue)
        .values(
            status=Post.STATUS_PUBLISHED,
            publish_at=func.coalesce(Post.publish_at, now_param),
            scheduled_for=None,
            updated_at=now_param,
        )
        .execution_options(synchronize_session=False)
    )

    try:
        if db.engine.dialect.update_returning:
            rows = db.session.execute(statement.returning(Post.id, Post.title, Post.publish_at)).all()
        else:
            # Lock the candidates so the read-back reports only this run's rows
            ids = db.session.execute(select(Post.id).where(*overdue).with_for_update()).scalars().all()
            rows = []
            if ids:
                db.session.execute(statement.where(Post.id.in_(ids)))
                rows = db.session.execute(
                    select(Post.id, Post.title, Post.publish_at).where(
                        Post.id.in_(ids), Post.status == Post.STATUS_PUBLISHED)
                ).all()
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        publication_runs_counter.labels(status='failed').inc()
        logger.error("Auto-publish failed, no posts were published: %s", e)
        raise PublicationError('Failed to publish scheduled posts') from e

    published = [
        {'id': row.id, 'title': row.title, 'publish_at': to_iso_format(row.publish_at)}
        for row in rows
    ]

    publication_runs_counter.labels(status='success').inc()
    if published:
        posts_published_counter.labels(trigger=trigger).inc(len(published))
        logger.info("Auto-published %d post(s): %s", len(published),
                    ', '.join(post['id'] for post in published))
    else:
        logger.debug("Auto-publish run found no overdue posts")

    return PublicationResult(count=len(published), posts=published, ran_at=now)


def list_scheduled_posts(now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    """Scheduled posts in publication order, with their overdue flag."""
    now = ensure_utc(now) or utcnow()
    posts = Post.query.filter(Post.status == Post.STATUS_SCHEDULED)\
                      .order_by(Post.scheduled_for.asc()).all()
    return [
        {
            'id': post.id,
            'title': post.title,
            'scheduled_for': to_iso_format(post.scheduled_for),
            'overdue': post.is_overdue(now),
        }
        for post in posts
    ]
