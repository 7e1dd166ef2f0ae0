"""
Category management for the admin surface.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from core.errors import FieldErrors, NotFoundError, StoreError
from core.utils.string import is_valid_hex_color, is_valid_slug
from extensions import db
from models import Category, Post

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 100
MIN_NAME_LENGTH = 2


class CategoryService:
    """Create, edit, list and delete categories."""

    @staticmethod
    def list_categories() -> List[Dict[str, Any]]:
        """All categories ordered by name, with their published post counts."""
        return [
            category.to_dict(post_count=count)
            for category, count in Category.with_published_counts()
        ]

    @staticmethod
    def get_category(category_id: int) -> Category:
        category = Category.get_by_id(category_id)
        if category is None:
            raise NotFoundError('Category not found')
        return category

    @staticmethod
    def get_by_slug(slug: str) -> Category:
        category = Category.get_by_slug(slug)
        if category is None:
            raise NotFoundError('Category not found')
        return category

    @staticmethod
    def create_category(data: Mapping[str, Any]) -> Category:
        """
        Create a category.

        Raises:
            ValidationFailed: If the name, slug or color is invalid or taken
            StoreError: If the database write failed
        """
        values = CategoryService._collect_fields(data, category=None)
        category = Category(**values)
        try:
            db.session.add(category)
            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            CategoryService._raise_integrity_error(e)
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error("Failed to create category: %s", e)
            raise StoreError('Failed to save category') from e

        logger.info("Created category %s (%s)", category.id, category.slug)
        return category

    @staticmethod
    def update_category(category_id: int, data: Mapping[str, Any]) -> Category:
        category = CategoryService.get_category(category_id)
        values = CategoryService._collect_fields(data, category=category)
        try:
            category.update(**values)
        except IntegrityError as e:
            CategoryService._raise_integrity_error(e)
        except SQLAlchemyError as e:
            logger.error("Failed to update category %s: %s", category_id, e)
            raise StoreError('Failed to save category') from e
        return category

    @staticmethod
    def delete_category(category_id: int) -> int:
        """
        Delete a category, leaving its posts without a category.

        Returns:
            int: Number of posts that lost their category
        """
        category = CategoryService.get_category(category_id)
        try:
            detached = Post.query.filter(Post.category_id == category.id)\
                                 .update({Post.category_id: None}, synchronize_session=False)
            db.session.delete(category)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error("Failed to delete category %s: %s", category_id, e)
            raise StoreError('Failed to delete category') from e

        logger.info("Deleted category %s, %d post(s) detached", category_id, detached)
        return detached

    @staticmethod
    def _collect_fields(data: Mapping[str, Any], category: Optional[Category]) -> Dict[str, Any]:
        creating = category is None
        exclude_id = None if creating else category.id
        errors = FieldErrors()
        values: Dict[str, Any] = {}

        if creating or 'name' in data:
            name = (data.get('name') or '').strip()
            if not name:
                errors.add('name', 'required')
            elif len(name) < MIN_NAME_LENGTH:
                errors.add('name', 'too_short', min=MIN_NAME_LENGTH)
            elif len(name) > MAX_NAME_LENGTH:
                errors.add('name', 'too_long', max=MAX_NAME_LENGTH)
            elif Category.name_exists(name, exclude_id):
                errors.add('name', 'invalid', message='a category with this name already exists')
            else:
                values['name'] = name

        slug = (data.get('slug') or '').strip()
        if slug:
            if len(slug) > MAX_NAME_LENGTH:
                errors.add('slug', 'too_long', max=MAX_NAME_LENGTH)
            elif not is_valid_slug(slug):
                errors.add('slug', 'malformed_slug')
            elif Category.slug_exists(slug, exclude_id):
                errors.add('slug', 'slug_taken')
            else:
                values['slug'] = slug
        elif creating and 'name' in values:
            generated = Category._generate_slug(values['name'])
            if not generated:
                errors.add('slug', 'required')
            elif Category.slug_exists(generated):
                errors.add('slug', 'slug_taken')

        if 'description' in data:
            values['description'] = (data.get('description') or '').strip() or None

        if 'color' in data:
            color = (data.get('color') or '').strip() or None
            if color and not is_valid_hex_color(color):
                errors.add('color', 'invalid', message='color must be a hex value like #1a2b3c')
            else:
                values['color'] = color.lower() if color else None

        errors.raise_if_any()
        return values

    @staticmethod
    def _raise_integrity_error(error: IntegrityError) -> None:
        message = str(error.orig).lower()
        errors = FieldErrors()
        if 'slug' in message:
            errors.add('slug', 'slug_taken')
        elif 'name' in message:
            errors.add('name', 'invalid', message='a category with this name already exists')
        errors.raise_if_any()
        logger.error("Integrity error while saving category: %s", error)
        raise StoreError('Failed to save category') from error
