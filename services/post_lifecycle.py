"""
Post lifecycle state machine.

A post is always in one of three states:

    DRAFT ──────────────► PUBLISHED
      │  ▲                  │  ▲
      │  └──── unpublish ───┘  │
      ▼                        │ scheduled_for <= now (trigger)
    SCHEDULED ─────────────────┘

Entering PUBLISHED or SCHEDULED requires a summary, a body and a category.
Entering SCHEDULED additionally requires a ``scheduled_for`` in the future.
The first publication stamps ``publish_at``; later transitions never
overwrite it, so unpublishing and republishing keeps the original date.

Content edits that keep the status unchanged are not re-validated against
the required fields. The functions here take the current time as an argument
so the rules can be exercised without a clock.
"""

import logging
from datetime import datetime
from typing import Any, Mapping, Optional

from core.errors import FieldErrors
from core.utils.date_time import ensure_utc, utcnow
from core.utils.string import strip_html_tags
from models import Post

logger = logging.getLogger(__name__)

DRAFT = Post.STATUS_DRAFT
PUBLISHED = Post.STATUS_PUBLISHED
SCHEDULED = Post.STATUS_SCHEDULED

VISIBLE_STATUSES = (PUBLISHED, SCHEDULED)

MIN_SUMMARY_LENGTH = 10
MIN_BODY_LENGTH = 20


def _text_length(value: Optional[str], markup: bool = False) -> int:
    if not value:
        return 0
    text = strip_html_tags(value) if markup else value
    return len(text.strip())


def requires_content(current_status: Optional[str], target_status: str) -> bool:
    """Whether moving from ``current_status`` to ``target_status`` checks required fields."""
    return target_status in VISIBLE_STATUSES and target_status != current_status


def validate_transition(current_status: Optional[str], target_status: str,
                        fields: Mapping[str, Any],
                        now: Optional[datetime] = None) -> FieldErrors:
    """
    Check whether a post may move to ``target_status``.

    Args:
        current_status: Status the post is in, None for a post being created
        target_status: Requested status
        fields: Values the post will hold after the write. ``summary``,
            ``body`` and ``category_id`` are read when required fields are
            checked; ``scheduled_for`` is only checked when the key is present
            or the post is entering SCHEDULED.
        now: Reference time (defaults to the current UTC time)

    Returns:
        FieldErrors: Collected field errors, empty when the transition is allowed
    """
    now = ensure_utc(now) or utcnow()
    errors = FieldErrors()

    if target_status not in Post.VALID_STATUSES:
        errors.add('status', 'invalid_status', choices=', '.join(Post.VALID_STATUSES))
        return errors

    if requires_content(current_status, target_status):
        if not _text_length(fields.get('summary')):
            errors.add('summary', 'required')
        elif _text_length(fields.get('summary')) < MIN_SUMMARY_LENGTH:
            errors.add('summary', 'too_short', min=MIN_SUMMARY_LENGTH)

        if not _text_length(fields.get('body'), markup=True):
            errors.add('body', 'required')
        elif _text_length(fields.get('body'), markup=True) < MIN_BODY_LENGTH:
            errors.add('body', 'too_short', min=MIN_BODY_LENGTH)

        if fields.get('category_id') is None:
            errors.add('category_id', 'required', label='category')

    if target_status == SCHEDULED:
        entering = current_status != SCHEDULED
        if entering or 'scheduled_for' in fields:
            scheduled_for = fields.get('scheduled_for')
            if scheduled_for is None:
                errors.add('scheduled_for', 'required')
            elif ensure_utc(scheduled_for) <= now:
                errors.add('scheduled_for', 'must_be_future')

    return errors


def apply_status(post: Post, target_status: str, now: Optional[datetime] = None,
                 scheduled_for: Optional[datetime] = None) -> Post:
    """
    Move a post to ``target_status`` and update its lifecycle fields.

    The post's current field values are validated first; nothing is changed
    when the transition is rejected.

    Args:
        post: Post to update (not committed)
        target_status: Requested status
        now: Reference time (defaults to the current UTC time)
        scheduled_for: New target time, required when entering SCHEDULED

    Returns:
        Post: The updated post

    Raises:
        ValidationFailed: If the transition is not allowed
    """
    now = ensure_utc(now) or utcnow()
    current_status = post.status or DRAFT

    fields = {
        'summary': post.summary,
        'body': post.body_html,
        'category_id': post.category_id,
    }
    if scheduled_for is not None or (target_status == SCHEDULED and current_status != SCHEDULED):
        fields['scheduled_for'] = scheduled_for

    validate_transition(current_status, target_status, fields, now).raise_if_any()

    if target_status == PUBLISHED:
        if post.publish_at is None:
            post.publish_at = now
        post.scheduled_for = None
    elif target_status == SCHEDULED:
        if scheduled_for is not None:
            post.scheduled_for = ensure_utc(scheduled_for)
    else:
        post.scheduled_for = None

    post.status = target_status

    if current_status != target_status:
        logger.info("Post %s moved from %s to %s", post.id, current_status, target_status)

    return post
