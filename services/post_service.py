"""
Post service for the admin and public surfaces.

The service validates author input field by field, converts the body through
the rendering pipeline, runs the lifecycle rules and only then writes. A
rejected request leaves the database untouched: every error is collected
first and raised as one ``ValidationFailed``.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from core.errors import ContentProcessingError, FieldErrors, NotFoundError, StoreError, ValidationFailed
from core.rendering import CONTENT_MODE_MARKDOWN, CONTENT_MODES, prepare_body
from core.utils.date_time import ensure_utc, utcnow
from core.utils.string import is_valid_slug, is_valid_url
from extensions import content_rejections_counter, db
from models import Category, Post
from services.post_lifecycle import DRAFT, apply_status, validate_transition

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 200
MAX_SLUG_LENGTH = 200
MAX_SUMMARY_LENGTH = 500
MAX_TAG_LENGTH = 50
MAX_COVER_URL_LENGTH = 500


class PostService:
    """
    Service for creating, editing and reading posts.

    All write methods accept ``now`` so the lifecycle rules can be exercised
    at a fixed point in time.
    """

    @staticmethod
    def get_post(post_id: str) -> Post:
        post = Post.get_by_id(post_id)
        if post is None:
            raise NotFoundError('Post not found')
        return post

    @staticmethod
    def list_admin_posts(status: Optional[str] = None, q: Optional[str] = None,
                         page: int = 1, per_page: int = 20,
                         now: Optional[datetime] = None) -> Dict[str, Any]:
        """
        List posts in every status for the admin surface.

        Args:
            status: Only return posts in this status
            q: Free text matched against title and summary
            page: Page number (1-indexed)
            per_page: Number of posts per page
            now: Reference time for the ``overdue`` flag

        Returns:
            Dict with ``items`` (serialized posts) and ``meta`` pagination data

        Raises:
            ValidationFailed: If ``status`` is not a known status
        """
        query = Post.query

        if status:
            if status not in Post.VALID_STATUSES:
                errors = FieldErrors()
                errors.add('status', 'invalid_status', choices=', '.join(Post.VALID_STATUSES))
                errors.raise_if_any()
            query = query.filter(Post.status == status)

        if q and q.strip():
            pattern = f"%{q.strip()}%"
            query = query.filter(db.or_(Post.title.ilike(pattern), Post.summary.ilike(pattern)))

        query = query.order_by(Post.updated_at.desc())
        result = Post.paginate(page=page, per_page=per_page, query=query)
        now = ensure_utc(now) or utcnow()
        result['items'] = [post.to_dict(include_body=False, now=now) for post in result['items']]
        return result

    @staticmethod
    def create_post(data: Mapping[str, Any], now: Optional[datetime] = None) -> Post:
        """
        Create a post, DRAFT unless another status is requested.

        Args:
            data: Validated request payload
            now: Reference time (defaults to the current UTC time)

        Returns:
            Post: The stored post

        Raises:
            ValidationFailed: If any field or the requested status is invalid
            StoreError: If the database write failed
        """
        now = ensure_utc(now) or utcnow()
        errors = FieldErrors()
        values = PostService._collect_fields(data, errors, post=None)

        target_status = data.get('status') or DRAFT
        lifecycle_fields = {
            'summary': values.get('summary'),
            'body': values.get('body_html'),
            'category_id': values.get('category_id'),
        }
        if 'scheduled_for' in data:
            lifecycle_fields['scheduled_for'] = data.get('scheduled_for')
        errors.merge(validate_transition(None, target_status, lifecycle_fields, now))
        errors.raise_if_any()

        post = Post(status=DRAFT, **values)
        try:
            db.session.add(post)
            db.session.flush()
            apply_status(post, target_status, now, scheduled_for=data.get('scheduled_for'))
            db.session.commit()
        except ValidationFailed:
            db.session.rollback()
            raise
        except IntegrityError as e:
            db.session.rollback()
            PostService._raise_integrity_error(e)
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error("Failed to create post: %s", e)
            raise StoreError('Failed to save post') from e

        logger.info("Created post %s (%s)", post.id, post.status)
        return post

    @staticmethod
    def update_post(post_id: str, data: Mapping[str, Any], now: Optional[datetime] = None) -> Post:
        """
        Edit a post's content fields and, optionally, its status.

        Required fields are only re-checked when the status changes into
        PUBLISHED or SCHEDULED.

        Args:
            post_id: ID of the post to edit
            data: Validated request payload; absent keys are left unchanged
            now: Reference time (defaults to the current UTC time)

        Returns:
            Post: The updated post

        Raises:
            NotFoundError: If the post does not exist
            ValidationFailed: If any field or the requested status is invalid
            StoreError: If the database write failed
        """
        now = ensure_utc(now) or utcnow()
        post = PostService.get_post(post_id)

        errors = FieldErrors()
        values = PostService._collect_fields(data, errors, post=post)

        current_status = post.status or DRAFT
        target_status = data.get('status') or current_status
        lifecycle_fields = {
            'summary': values.get('summary', post.summary),
            'body': values.get('body_html', post.body_html),
            'category_id': values.get('category_id', post.category_id),
        }
        rescheduling = 'scheduled_for' in data and PostService._is_rescheduling(
            post, target_status, data['scheduled_for'])
        if rescheduling:
            lifecycle_fields['scheduled_for'] = data['scheduled_for']
        errors.merge(validate_transition(current_status, target_status, lifecycle_fields, now))
        errors.raise_if_any()

        try:
            for key, value in values.items():
                setattr(post, key, value)
            apply_status(post, target_status, now,
                         scheduled_for=data['scheduled_for'] if rescheduling else None)
            db.session.commit()
        except ValidationFailed:
            db.session.rollback()
            raise
        except IntegrityError as e:
            db.session.rollback()
            PostService._raise_integrity_error(e)
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error("Failed to update post %s: %s", post_id, e)
            raise StoreError('Failed to save post') from e

        logger.info("Updated post %s (%s)", post.id, post.status)
        return post

    @staticmethod
    def change_status(post_id: str, status: str, scheduled_for: Optional[datetime] = None,
                      now: Optional[datetime] = None) -> Post:
        """
        Move a post to another status without touching its content.

        Raises:
            NotFoundError: If the post does not exist
            ValidationFailed: If the transition is not allowed
            StoreError: If the database write failed
        """
        post = PostService.get_post(post_id)
        if not PostService._is_rescheduling(post, status, scheduled_for):
            scheduled_for = None
        try:
            apply_status(post, status, now, scheduled_for=scheduled_for)
            db.session.commit()
        except ValidationFailed:
            db.session.rollback()
            raise
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error("Failed to change status of post %s: %s", post_id, e)
            raise StoreError('Failed to save post') from e
        return post

    @staticmethod
    def delete_post(post_id: str) -> None:
        """Delete a post permanently."""
        post = PostService.get_post(post_id)
        try:
            post.delete()
        except SQLAlchemyError as e:
            raise StoreError('Failed to delete post') from e
        logger.info("Deleted post %s", post_id)

    @staticmethod
    def list_published(category_slug: Optional[str] = None, q: Optional[str] = None,
                       page: int = 1, per_page: int = 10) -> Dict[str, Any]:
        """
        Page through published posts, newest publication first.

        Args:
            category_slug: Only return posts of this category
            q: Free text matched against title, summary and tags
            page: Page number (1-indexed)
            per_page: Number of posts per page

        Returns:
            Dict with ``items`` (Post objects) and ``meta`` pagination data
        """
        query = Post.published()
        if category_slug:
            query = query.join(Category, Post.category_id == Category.id)\
                         .filter(Category.slug == category_slug)
        if q and q.strip():
            query = query.filter(Post.search_filter(q))
        return Post.paginate(page=page, per_page=per_page, query=query)

    @staticmethod
    def get_published_post(slug: str, count_view: bool = True) -> Post:
        """
        Get a published post by slug, counting the view.

        Raises:
            NotFoundError: If no published post has this slug
        """
        post = Post.get_published_by_slug(slug)
        if post is None:
            raise NotFoundError('Post not found')

        if count_view:
            try:
                post.increment_views()
            except SQLAlchemyError as e:
                db.session.rollback()
                logger.warning("Could not count view for post %s: %s", post.id, e)

        return post

    @staticmethod
    def get_popular_posts(limit: int = 3) -> List[Post]:
        return Post.get_popular(limit=limit)

    @staticmethod
    def render_preview(text: Optional[str], mode: str = CONTENT_MODE_MARKDOWN) -> str:
        """
        Render author input the way it would be stored, without storing it.

        Raises:
            ContentProcessingError: If the input cannot be converted
        """
        return prepare_body(text or '', mode)

    @staticmethod
    def _is_rescheduling(post: Post, target_status: str, scheduled_for: Optional[datetime]) -> bool:
        """
        Whether ``scheduled_for`` is a new target time for ``post``.

        Clients that resend the whole form repeat the stored value; that is not
        a reschedule and must not trip the future-time rule.
        """
        if target_status != (post.status or DRAFT):
            return True
        return ensure_utc(scheduled_for) != post.scheduled_for

    @staticmethod
    def _collect_fields(data: Mapping[str, Any], errors: FieldErrors,
                        post: Optional[Post]) -> Dict[str, Any]:
        """
        Validate the content fields present in ``data``.

        Errors are added to ``errors``; the returned dict holds the column
        values to write for the fields that passed.
        """
        creating = post is None
        exclude_id = None if creating else post.id
        values: Dict[str, Any] = {}

        if creating or 'title' in data:
            title = (data.get('title') or '').strip()
            if not title:
                errors.add('title', 'required')
            elif len(title) > MAX_TITLE_LENGTH:
                errors.add('title', 'too_long', max=MAX_TITLE_LENGTH)
            else:
                values['title'] = title

        slug = (data.get('slug') or '').strip()
        if slug:
            if len(slug) > MAX_SLUG_LENGTH:
                errors.add('slug', 'too_long', max=MAX_SLUG_LENGTH)
            elif not is_valid_slug(slug):
                errors.add('slug', 'malformed_slug')
            elif Post.slug_exists(slug, exclude_id):
                errors.add('slug', 'slug_taken')
            else:
                values['slug'] = slug
        elif creating and 'title' in values:
            generated = Post.generate_unique_slug(values['title'])
            if generated:
                values['slug'] = generated
            else:
                errors.add('slug', 'required')

        if 'summary' in data:
            summary = (data.get('summary') or '').strip()
            if len(summary) > MAX_SUMMARY_LENGTH:
                errors.add('summary', 'too_long', max=MAX_SUMMARY_LENGTH)
            else:
                values['summary'] = summary

        if 'body' in data:
            mode = data.get('content_mode') or CONTENT_MODE_MARKDOWN
            if mode not in CONTENT_MODES:
                errors.add('content_mode', 'invalid', message=f"content_mode must be one of {', '.join(CONTENT_MODES)}")
            else:
                try:
                    values['body_html'] = prepare_body(data.get('body') or '', mode)
                except ContentProcessingError:
                    content_rejections_counter.inc()
                    errors.add('body', 'content_unprocessable')

        if 'category_id' in data:
            category_id = data.get('category_id')
            if category_id is not None and Category.get_by_id(category_id) is None:
                errors.add('category_id', 'not_found', label='category')
            else:
                values['category_id'] = category_id

        if 'tags' in data:
            tags = [tag.strip() for tag in (data.get('tags') or []) if tag and tag.strip()]
            if len(tags) > Post.MAX_TAGS:
                errors.add('tags', 'too_many_tags', max=Post.MAX_TAGS)
            elif any(len(tag) > MAX_TAG_LENGTH for tag in tags):
                errors.add('tags', 'too_long', label='each tag', max=MAX_TAG_LENGTH)
            else:
                values['tags'] = tags

        if 'cover_image_url' in data:
            cover = (data.get('cover_image_url') or '').strip() or None
            if cover and len(cover) > MAX_COVER_URL_LENGTH:
                errors.add('cover_image_url', 'too_long', max=MAX_COVER_URL_LENGTH)
            elif cover and not is_valid_url(cover):
                errors.add('cover_image_url', 'invalid', message='cover image must be an http(s) URL')
            else:
                values['cover_image_url'] = cover

        if creating:
            values.setdefault('summary', '')
            values.setdefault('body_html', '')
            values.setdefault('tags', [])

        return values

    @staticmethod
    def _raise_integrity_error(error: IntegrityError) -> None:
        """Translate a constraint violation into a field error or a store error."""
        if 'slug' in str(error.orig).lower():
            errors = FieldErrors()
            errors.add('slug', 'slug_taken')
            errors.raise_if_any()
        logger.error("Integrity error while saving post: %s", error)
        raise StoreError('Failed to save post') from error
