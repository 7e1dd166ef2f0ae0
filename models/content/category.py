"""
Category model for the Mente Tech blog.

Categories group posts for navigation and filtering on the public site.
Deleting a category leaves its posts in place without a category.
"""

from typing import Optional, Dict, Any

from sqlalchemy import Column, Integer, String, Text, func

from .. import db, BaseModel
from core.utils.string import slugify


class Category(BaseModel):
    """
    Represents a named grouping applied to posts.

    Attributes:
        id: Primary key
        name: Category name (unique)
        slug: URL-friendly version of the name (unique)
        description: Optional description of the category
        color: Optional display color as ``#rrggbb``
    """
    __tablename__ = 'categories'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False, unique=True, index=True)
    slug = Column(String(100), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)
    color = Column(String(7), nullable=True)

    def __init__(self, name: str, slug: Optional[str] = None, description: Optional[str] = None,
                 color: Optional[str] = None) -> None:
        super().__init__(
            name=name,
            slug=slug or self._generate_slug(name),
            description=description,
            color=color
        )

    @staticmethod
    def _generate_slug(name: str) -> str:
        return slugify(name)[:100].strip('-')

    @classmethod
    def slug_exists(cls, slug: str, exclude_id: Optional[int] = None) -> bool:
        query = cls.query.filter(cls.slug == slug)
        if exclude_id is not None:
            query = query.filter(cls.id != exclude_id)
        return db.session.query(query.exists()).scalar()

    @classmethod
    def name_exists(cls, name: str, exclude_id: Optional[int] = None) -> bool:
        query = cls.query.filter(func.lower(cls.name) == name.lower())
        if exclude_id is not None:
            query = query.filter(cls.id != exclude_id)
        return db.session.query(query.exists()).scalar()

    @classmethod
    def get_by_slug(cls, slug: str) -> Optional['Category']:
        return cls.query.filter_by(slug=slug).first()

    @classmethod
    def with_published_counts(cls):
        """
        List categories with the number of published posts in each.

        Returns:
            List of ``(Category, count)`` tuples ordered by name
        """
        from .post import Post

        published_count = func.count(Post.id)
        return db.session.query(cls, published_count)\
            .outerjoin(Post, db.and_(Post.category_id == cls.id,
                                     Post.status == Post.STATUS_PUBLISHED))\
            .group_by(cls.id)\
            .order_by(cls.name)\
            .all()

    def to_summary(self) -> Dict[str, Any]:
        return {'id': self.id, 'name': self.name, 'slug': self.slug, 'color': self.color}

    def to_dict(self, post_count: Optional[int] = None) -> Dict[str, Any]:
        result = super().to_dict()
        if post_count is not None:
            result['post_count'] = post_count
        return result

    def __repr__(self) -> str:
        return f'<Category {self.id}: {self.name}>'
