"""
Post administration routes.

Routes:
    GET    /posts                 List posts in every status
    POST   /posts                 Create a post (DRAFT unless asked otherwise)
    POST   /posts/preview         Render a body without storing it
    GET    /posts/<id>            Get a post
    PUT    /posts/<id>            Edit fields and/or status
    PATCH  /posts/<id>            Same as PUT
    POST   /posts/<id>/status     Change status only
    DELETE /posts/<id>            Delete permanently
    POST   /auto-publish          Run the scheduled publication trigger
"""

import logging

from flask import current_app, g, jsonify

from api.auth.decorators import admin_or_scheduler_required, admin_required
from api.schemas import load_args, load_json
from core.errors import ContentProcessingError, PublicationError, ValidationFailed
from core.utils.date_time import format_timestamp
from extensions import content_rejections_counter, limiter
from services import publication_service
from services.post_service import PostService
from . import TRIGGER_LIMIT, admin_api
from .schemas import PostQuerySchema, PostSchema, PreviewSchema, StatusChangeSchema

logger = logging.getLogger(__name__)


@admin_api.route('/posts', methods=['GET'])
@admin_required
def list_posts():
    """
    List posts for the editor.

    Query Parameters:
        status (str): DRAFT, PUBLISHED or SCHEDULED
        q (str): Text searched in title and summary
        page (int): Page number (default: 1)
        per_page (int): Items per page (default: 20, max 100)

    Returns:
        JSON: ``items`` and ``meta`` pagination data
    """
    args = load_args(PostQuerySchema)
    result = PostService.list_admin_posts(
        status=args.get('status'),
        q=args.get('q'),
        page=args['page'],
        per_page=args['per_page'],
    )
    return jsonify(result), 200


@admin_api.route('/posts', methods=['POST'])
@admin_required
def create_post():
    """
    Create a new post.

    Request Body:
        title (str): Post title
        slug (str, optional): URL slug, generated from the title when absent
        summary (str, optional): Short summary
        body (str, optional): Body as Markdown or HTML
        content_mode (str, optional): ``markdown`` (default) or ``html``
        category_id (int, optional): Category
        tags (list, optional): Up to 10 tags
        cover_image_url (str, optional): Cover image
        status (str, optional): DRAFT (default), PUBLISHED or SCHEDULED
        scheduled_for (str, optional): ISO 8601 time for SCHEDULED posts

    Returns:
        JSON: Created post, 201
    """
    data = load_json(PostSchema)
    post = PostService.create_post(data)
    logger.info("Post %s created by user %s", post.id, g.user_id)
    return jsonify(post.to_dict()), 201


@admin_api.route('/posts/preview', methods=['POST'])
@admin_required
def preview_post():
    """
    Render a body the way it would be stored. Nothing is persisted.

    Returns:
        JSON: ``{"html": ...}``; 422 with ``error`` when the body cannot be processed
    """
    data = load_json(PreviewSchema)
    try:
        html = PostService.render_preview(data.get('body'), data.get('content_mode'))
    except ContentProcessingError as e:
        content_rejections_counter.inc()
        return jsonify({"html": "", "error": e.message, "code": e.error_code}), 422
    return jsonify({"html": html}), 200


@admin_api.route('/posts/<post_id>', methods=['GET'])
@admin_required
def get_post(post_id):
    post = PostService.get_post(post_id)
    return jsonify(post.to_dict()), 200


@admin_api.route('/posts/<post_id>', methods=['PUT', 'PATCH'])
@admin_required
def update_post(post_id):
    """
    Edit a post.

    Only the fields present in the body are changed. Required fields are
    checked when the status changes to PUBLISHED or SCHEDULED.

    Returns:
        JSON: Updated post
    """
    data = load_json(PostSchema)
    post = PostService.update_post(post_id, data)
    return jsonify(post.to_dict()), 200


@admin_api.route('/posts/<post_id>/status', methods=['POST'])
@admin_required
def change_post_status(post_id):
    """
    Change the status of a post.

    Request Body:
        status (str): Target status
        scheduled_for (str, optional): Required when scheduling

    Returns:
        JSON: Updated post
    """
    data = load_json(StatusChangeSchema)
    if not data.get('status'):
        raise ValidationFailed.single('status', 'status is required', 'required')

    post = PostService.change_status(post_id, data['status'], scheduled_for=data.get('scheduled_for'))
    return jsonify(post.to_dict()), 200


@admin_api.route('/posts/<post_id>', methods=['DELETE'])
@admin_required
def delete_post(post_id):
    PostService.delete_post(post_id)
    return '', 204


@admin_api.route('/auto-publish', methods=['POST'])
@limiter.limit(TRIGGER_LIMIT)
@admin_or_scheduler_required
def auto_publish():
    """
    Publish every scheduled post whose time has passed.

    Accepts an administrator's bearer token or the internal scheduler key.

    Returns:
        JSON: ``{"success": true, "message", "published_count",
        "published_posts", "timestamp"}``; on failure ``{"success": false,
        "error", "timestamp"}`` with status 500
    """
    trigger = 'scheduled' if g.auth_context.trusted else 'manual'
    try:
        result = publication_service.auto_publish_scheduled_posts(g.auth_context, trigger=trigger)
    except PublicationError as e:
        current_app.logger.error("Auto-publish endpoint failed: %s", e.message)
        return jsonify({
            "success": False,
            "error": e.message,
            "code": e.error_code,
            "timestamp": format_timestamp(),
        }), 500

    return jsonify(result.to_dict()), 200
