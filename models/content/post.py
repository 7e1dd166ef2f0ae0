"""
Post model module for the Mente Tech blog.

This module defines the Post model which represents a blog article and its
publication lifecycle. It provides:

- Slug generation for SEO-friendly URLs with collision suffixes
- Lifecycle fields (status, first publication time, scheduled time)
- The legacy "is published" flag as a computed projection of the status
- View counting, popularity and related-post lookups
- Free-text search over title, summary and tags

Status changes themselves are validated and applied by
``services.post_lifecycle``; the model only stores the result.
"""

import uuid
from datetime import datetime
from typing import List, Dict, Any, Optional

from sqlalchemy import cast, or_
from sqlalchemy.ext.hybrid import hybrid_property

from .. import db, BaseModel
from ..base import UTCDateTime
from core.utils.date_time import to_iso_format, utcnow
from core.utils.string import estimate_reading_time, generate_excerpt, slugify


class Post(BaseModel):
    """
    Blog post with a DRAFT / PUBLISHED / SCHEDULED lifecycle.

    Attributes:
        id: Opaque UUID string
        title: Post title
        slug: Unique URL-friendly identifier
        summary: Short description shown in listings
        body_html: Sanitized HTML body
        cover_image_url: Optional cover image reference
        tags: Ordered list of free-text tags
        category_id: Optional category reference
        status: Lifecycle status
        publish_at: Time of first publication, kept when unpublished
        scheduled_for: Target publication time while SCHEDULED
        views: Public view counter
    """
    __tablename__ = 'posts'

    # Status constants
    STATUS_DRAFT = 'DRAFT'
    STATUS_PUBLISHED = 'PUBLISHED'
    STATUS_SCHEDULED = 'SCHEDULED'

    VALID_STATUSES = [STATUS_DRAFT, STATUS_PUBLISHED, STATUS_SCHEDULED]

    MAX_TAGS = 10

    # Core fields
    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = db.Column(db.String(200), nullable=False, index=True)
    slug = db.Column(db.String(200), nullable=False, unique=True, index=True)
    summary = db.Column(db.String(500), nullable=False, default='')
    body_html = db.Column(db.Text, nullable=False, default='')
    cover_image_url = db.Column(db.String(500), nullable=True)
    tags = db.Column(db.JSON, nullable=False, default=list)

    # Lifecycle
    status = db.Column(db.String(20), nullable=False, default=STATUS_DRAFT, index=True)
    publish_at = db.Column(UTCDateTime(), nullable=True, index=True)
    scheduled_for = db.Column(UTCDateTime(), nullable=True, index=True)

    views = db.Column(db.Integer, nullable=False, default=0)

    # Relationships
    category_id = db.Column(db.Integer, db.ForeignKey('categories.id', ondelete='SET NULL'),
                            nullable=True, index=True)
    category = db.relationship('Category', backref=db.backref('posts', lazy='dynamic'))

    @hybrid_property
    def is_published(self) -> bool:
        """Legacy published flag derived from the status."""
        return self.status == self.STATUS_PUBLISHED

    @property
    def reading_time(self) -> int:
        """Estimated reading time in minutes (minimum 1)."""
        return estimate_reading_time(self.body_html or '')

    @property
    def excerpt(self) -> str:
        """Summary, or the start of the body when no summary was written."""
        return self.summary or generate_excerpt(self.body_html or '')

    def is_overdue(self, now: Optional[datetime] = None) -> bool:
        """Whether a scheduled post has passed its publication time."""
        if self.status != self.STATUS_SCHEDULED or self.scheduled_for is None:
            return False
        return self.scheduled_for <= (now or utcnow())

    @classmethod
    def slug_exists(cls, slug: str, exclude_id: Optional[str] = None) -> bool:
        query = cls.query.filter(cls.slug == slug)
        if exclude_id:
            query = query.filter(cls.id != exclude_id)
        return db.session.query(query.exists()).scalar()

    @classmethod
    def generate_unique_slug(cls, title: str, exclude_id: Optional[str] = None) -> str:
        """
        Generate a URL-friendly slug from a title.

        Collisions with other posts are resolved by appending ``-2``, ``-3``
        and so on.

        Args:
            title: Post title
            exclude_id: Post being edited, ignored during the collision check

        Returns:
            str: A unique slug, or an empty string if the title has no
            usable characters
        """
        base_slug = slugify(title)[:190].strip('-')
        if not base_slug:
            return ''

        slug = base_slug
        counter = 2
        while cls.slug_exists(slug, exclude_id):
            slug = f"{base_slug}-{counter}"
            counter += 1

        return slug

    @classmethod
    def get_by_slug(cls, slug: str) -> Optional['Post']:
        return cls.query.filter_by(slug=slug).first()

    @classmethod
    def published(cls):
        """Query of published posts, newest publication first."""
        return cls.query.filter(cls.status == cls.STATUS_PUBLISHED)\
                        .order_by(db.desc(cls.publish_at), db.desc(cls.created_at))

    @classmethod
    def get_published_by_slug(cls, slug: str) -> Optional['Post']:
        return cls.query.filter_by(slug=slug, status=cls.STATUS_PUBLISHED).first()

    @classmethod
    def get_popular(cls, limit: int = 3) -> List['Post']:
        """
        Get most viewed published posts.

        Args:
            limit: Maximum number of posts to return

        Returns:
            List[Post]: List of most viewed published posts
        """
        return cls.query.filter_by(status=cls.STATUS_PUBLISHED)\
                        .order_by(db.desc(cls.views), db.desc(cls.publish_at)).limit(limit).all()

    @classmethod
    def search_filter(cls, text: str):
        """SQL condition matching ``text`` in title, summary or tags, ignoring case."""
        pattern = f"%{text.strip()}%"
        return or_(
            cls.title.ilike(pattern),
            cls.summary.ilike(pattern),
            cast(cls.tags, db.Text).ilike(pattern)
        )

    def get_related_posts(self, limit: int = 2) -> List['Post']:
        """
        Get published posts sharing this post's category or one of its tags.

        Same-category posts come first, then tag matches, newest first.

        Args:
            limit: Maximum number of related posts to return

        Returns:
            List[Post]: List of related posts
        """
        if not self.category_id and not self.tags:
            return []

        candidates = Post.published().filter(Post.id != self.id)
        own_tags = {tag.lower() for tag in (self.tags or [])}

        related: List[Post] = []
        if self.category_id:
            related.extend(candidates.filter(Post.category_id == self.category_id).limit(limit).all())

        if len(related) < limit and own_tags:
            seen = {post.id for post in related}
            for post in candidates.all():
                if post.id in seen:
                    continue
                if own_tags.intersection(tag.lower() for tag in (post.tags or [])):
                    related.append(post)
                    if len(related) >= limit:
                        break

        return related[:limit]

    def increment_views(self) -> None:
        """Increment view count in the database without a read-modify-write race."""
        Post.query.filter_by(id=self.id).update(
            {Post.views: Post.views + 1}, synchronize_session=False
        )
        db.session.commit()
        db.session.refresh(self)

    def to_dict(self, include_body: bool = True, now: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Convert post to dictionary.

        Args:
            include_body: Whether to include the full HTML body
            now: Reference time for the ``overdue`` flag

        Returns:
            Dict[str, Any]: Dictionary representation of the post
        """
        result = {
            'id': self.id,
            'title': self.title,
            'slug': self.slug,
            'summary': self.summary,
            'excerpt': self.excerpt,
            'cover_image_url': self.cover_image_url,
            'tags': list(self.tags or []),
            'category_id': self.category_id,
            'category': self.category.to_summary() if self.category else None,
            'status': self.status,
            'is_published': self.is_published,
            'overdue': self.is_overdue(now),
            'publish_at': to_iso_format(self.publish_at),
            'scheduled_for': to_iso_format(self.scheduled_for),
            'views': self.views or 0,
            'reading_time': self.reading_time,
            'created_at': to_iso_format(self.created_at),
            'updated_at': to_iso_format(self.updated_at),
        }

        if include_body:
            result['body_html'] = self.body_html

        return result

    def __repr__(self) -> str:
        return f'<Post {self.id}: {self.title} ({self.status})>'
