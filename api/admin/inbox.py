"""
Contact inbox and newsletter statistics for administrators.
"""

from flask import jsonify

from api.auth.decorators import admin_required
from api.schemas import load_args
from services.contact_service import ContactService
from services.newsletter_service import NewsletterService
from . import admin_api
from .schemas import InboxQuerySchema


@admin_api.route('/contact-messages', methods=['GET'])
@admin_required
def list_contact_messages():
    """
    List contact messages, newest first.

    Query Parameters:
        status (str): pending, notified or failed
        page (int): Page number (default: 1)
        per_page (int): Items per page (default: 20)
    """
    args = load_args(InboxQuerySchema)
    result = ContactService.list_messages(status=args.get('status'), page=args['page'],
                                          per_page=args['per_page'])
    return jsonify(result), 200


@admin_api.route('/newsletter/stats', methods=['GET'])
@admin_required
def newsletter_stats():
    return jsonify(NewsletterService.get_stats()), 200
