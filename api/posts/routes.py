"""
Public post routes.

Routes:
    GET /posts                      Published posts, newest publication first
    GET /posts/popular              Most viewed published posts
    GET /posts/<slug>               A published post with related posts
    GET /categories                 Categories with published post counts
    GET /categories/<slug>/posts    Published posts of a category
"""

from typing import Any, Dict

from flask import current_app, jsonify
from marshmallow import fields

from api.schemas import PaginationSchema, load_args
from core.rendering import render_stored_html
from extensions import cache
from models import Post
from services.category_service import CategoryService
from services.post_service import PostService
from . import posts_api

# Editor-only fields left out of public responses
PRIVATE_FIELDS = ('scheduled_for', 'overdue')


class PublicPostQuerySchema(PaginationSchema):
    category = fields.String(load_default=None)
    q = fields.String(load_default=None)


def serialize_public_post(post: Post, include_body: bool = False) -> Dict[str, Any]:
    """Serialize a published post, re-sanitizing the body."""
    data = post.to_dict(include_body=include_body)
    for name in PRIVATE_FIELDS:
        data.pop(name, None)
    if include_body:
        data['body_html'] = str(render_stored_html(post.body_html))
    return data


def _page_payload(result: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "items": [serialize_public_post(post) for post in result["items"]],
        "meta": result["meta"],
    }


@posts_api.route('/posts', methods=['GET'])
def list_posts():
    """
    List published posts.

    Query Parameters:
        category (str): Category slug
        q (str): Text searched in title, summary and tags
        page (int): Page number (default: 1)
        per_page (int): Items per page (default: POSTS_PER_PAGE)
    """
    args = load_args(PublicPostQuerySchema, default_per_page=current_app.config.get('POSTS_PER_PAGE'))
    result = PostService.list_published(category_slug=args.get('category'), q=args.get('q'),
                                        page=args['page'], per_page=args['per_page'])
    return jsonify(_page_payload(result)), 200


@posts_api.route('/posts/popular', methods=['GET'])
def popular_posts():
    limit = current_app.config.get('POPULAR_POSTS_LIMIT', 3)
    posts = PostService.get_popular_posts(limit=limit)
    return jsonify({"items": [serialize_public_post(post) for post in posts]}), 200


@posts_api.route('/posts/<slug>', methods=['GET'])
def get_post(slug):
    """
    Get a published post by slug.

    Counts the view and includes up to ``RELATED_POSTS_LIMIT`` related posts.
    Unknown and unpublished slugs give 404.
    """
    post = PostService.get_published_post(slug)
    data = serialize_public_post(post, include_body=True)
    limit = current_app.config.get('RELATED_POSTS_LIMIT', 2)
    data['related_posts'] = [serialize_public_post(related) for related in post.get_related_posts(limit=limit)]
    return jsonify(data), 200


@posts_api.route('/categories', methods=['GET'])
@cache.cached(timeout=60)
def list_categories():
    return jsonify({"items": CategoryService.list_categories()}), 200


@posts_api.route('/categories/<slug>/posts', methods=['GET'])
def category_posts(slug):
    category = CategoryService.get_by_slug(slug)
    args = load_args(PaginationSchema, default_per_page=current_app.config.get('POSTS_PER_PAGE'))
    result = PostService.list_published(category_slug=category.slug, page=args['page'],
                                        per_page=args['per_page'])
    payload = _page_payload(result)
    payload["category"] = category.to_dict()
    return jsonify(payload), 200
