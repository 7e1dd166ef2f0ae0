"""
Base model definitions for the Mente Tech blog.

This module provides the base model class, mixins and column types used
throughout the data model layer.

Key components:
- UTCDateTime: Column type that always hands back timezone-aware UTC values
- TimestampMixin: Adds automatic timestamp tracking for all models
- BaseModel: Abstract base class with CRUD operations, pagination and serialization

These base classes implement the Active Record pattern through SQLAlchemy ORM,
promoting code reuse and ensuring consistent behavior across the data layer.
"""

from datetime import datetime
import logging
from typing import Dict, Any, Optional, Type, TypeVar, Union, cast

from flask import current_app, has_app_context
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.types import DateTime, TypeDecorator

from core.utils.date_time import ensure_utc, to_iso_format, utcnow
from extensions import db

# Define TypeVar with proper constraints for type hinting
T_Model = TypeVar('T_Model', bound='BaseModel')

MAX_PER_PAGE = 100


def _get_logger() -> logging.Logger:
    return current_app.logger if has_app_context() else logging.getLogger(__name__)


class UTCDateTime(TypeDecorator):
    """
    Timezone-safe datetime column.

    - On PostgreSQL ⇒ TIMESTAMP WITH TIME ZONE
    - Elsewhere     ⇒ naive DATETIME holding UTC wall-clock time

    Accepts naive (assumed UTC) or aware values and always returns aware UTC
    datetimes, so comparisons against ``utcnow()`` work on every backend.
    """
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        value = ensure_utc(value)
        if dialect.name == 'postgresql':
            return value
        return value.replace(tzinfo=None)

    def process_result_value(self, value, dialect):
        return ensure_utc(value)


class TimestampMixin:
    """
    Mixin class that adds created and updated timestamps to models.

    The created_at timestamp is set once when the record is first created,
    while updated_at is automatically updated whenever the record is modified.

    Attributes:
        created_at: Datetime when the record was created
        updated_at: Datetime when the record was last updated
    """

    created_at = db.Column(
        UTCDateTime(),
        default=utcnow,
        nullable=False,
        index=True
    )

    updated_at = db.Column(
        UTCDateTime(),
        default=utcnow,
        onupdate=utcnow,
        nullable=False
    )


class BaseModel(db.Model, TimestampMixin):
    """
    Abstract base for the blog's tables.

    Provides lookup by primary key, attribute updates, deletion, a column
    dump for JSON responses and page-based listing of any query.
    """
    __abstract__ = True

    @classmethod
    def get_by_id(cls: Type[T_Model], instance_id: Union[int, str, None]) -> Optional[T_Model]:
        if instance_id is None:
            return None
        return cast(Optional[T_Model], db.session.get(cls, instance_id))

    def update(self, commit: bool = True, **kwargs) -> bool:
        """
        Assign column values, committing only when something changed.

        Unknown attribute names are logged and skipped.

        Returns:
            bool: True if any attribute changed

        Raises:
            SQLAlchemyError: If the commit fails; the session is rolled back
        """
        changed = False
        for key, value in kwargs.items():
            if not hasattr(self, key):
                _get_logger().warning("Ignoring unknown attribute %s on %s", key, type(self).__name__)
                continue
            if getattr(self, key) != value:
                setattr(self, key, value)
                changed = True

        if changed and commit:
            try:
                db.session.commit()
            except SQLAlchemyError as e:
                db.session.rollback()
                _get_logger().error("Failed to update %s: %s", type(self).__name__, e)
                raise
        return changed

    def delete(self) -> None:
        """Delete the row, rolling back and re-raising on failure."""
        try:
            db.session.delete(self)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            _get_logger().error("Failed to delete %s: %s", type(self).__name__, e)
            raise

    def to_dict(self) -> Dict[str, Any]:
        """Column values keyed by name, with datetimes as ISO 8601 strings."""
        result = {}
        for column in self.__table__.columns:
            value = getattr(self, column.key)
            result[column.key] = to_iso_format(value) if isinstance(value, datetime) else value
        return result

    @classmethod
    def paginate(cls, page: int = 1, per_page: int = 20, query=None) -> Dict[str, Any]:
        """
        Slice a query into one page.

        Args:
            page: Page number, starting at 1
            per_page: Items per page, capped at ``MAX_PER_PAGE``
            query: Filtered and ordered query (defaults to every row)

        Returns:
            ``{"items": [...], "meta": {...}}`` where ``meta`` carries the page
            numbers, totals and the neighbouring page numbers (None at the ends)

        Raises:
            ValueError: If page or per_page is below 1
        """
        if page < 1 or per_page < 1:
            raise ValueError("page and per_page must be 1 or greater")

        per_page = min(per_page, MAX_PER_PAGE)
        query = cls.query if query is None else query

        total_items = query.count()
        total_pages = -(-total_items // per_page)
        items = query.offset((page - 1) * per_page).limit(per_page).all()

        has_next = page < total_pages
        has_prev = page > 1
        return {
            "items": items,
            "meta": {
                "page": page,
                "per_page": per_page,
                "total_items": total_items,
                "total_pages": total_pages,
                "has_next": has_next,
                "has_prev": has_prev,
                "next_page": page + 1 if has_next else None,
                "prev_page": page - 1 if has_prev else None,
            }
        }
