"""
Routes for the public HTML pages.

Routes:
    /                   Published posts with search (``q``) and paging
    /post/<slug>        A published post with related posts
    /category/<slug>    Published posts of a category
"""

from typing import Any, Dict

from flask import abort, current_app, render_template, request

from core.errors import NotFoundError
from core.rendering import render_stored_html
from extensions import limiter
from models import Category
from services.post_service import PostService
from . import main_bp


def _page_arg() -> int:
    page = request.args.get('page', 1, type=int) or 1
    return max(page, 1)


def _sidebar() -> Dict[str, Any]:
    """Template values shared by every page."""
    limit = current_app.config.get('POPULAR_POSTS_LIMIT', 3)
    return {
        'categories': Category.with_published_counts(),
        'popular_posts': PostService.get_popular_posts(limit=limit),
    }


@main_bp.route('/')
@limiter.limit("60/minute")
def home():
    """
    Render the home page.

    Example URL:
        GET /?q=automacao&page=2
    """
    q = (request.args.get('q') or '').strip()
    result = PostService.list_published(q=q or None, page=_page_arg(),
                                        per_page=current_app.config.get('POSTS_PER_PAGE', 10))
    return render_template('main/index.html', posts=result['items'], meta=result['meta'],
                           q=q, **_sidebar())


@main_bp.route('/post/<slug>')
@limiter.limit("60/minute")
def post_detail(slug):
    """Render a published post. Counts the view."""
    try:
        post = PostService.get_published_post(slug)
    except NotFoundError:
        abort(404)

    related = post.get_related_posts(limit=current_app.config.get('RELATED_POSTS_LIMIT', 2))
    return render_template('main/post.html', post=post, body=render_stored_html(post.body_html),
                           related_posts=related, **_sidebar())


@main_bp.route('/category/<slug>')
@limiter.limit("60/minute")
def category(slug):
    """Render the published posts of a category."""
    current = Category.get_by_slug(slug)
    if current is None:
        abort(404)

    result = PostService.list_published(category_slug=current.slug, page=_page_arg(),
                                        per_page=current_app.config.get('POSTS_PER_PAGE', 10))
    return render_template('main/category.html', category=current, posts=result['items'],
                           meta=result['meta'], **_sidebar())
