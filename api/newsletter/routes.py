# api/newsletter/routes.py

from flask import Blueprint, jsonify
from marshmallow import fields

from api.schemas import BaseSchema, load_json
from extensions import limiter
from services.newsletter_service import REASON_DUPLICATE, REASON_INVALID, NewsletterService

newsletter_api = Blueprint('newsletter_api', __name__, url_prefix='/newsletter')

# Status codes for the failure reasons reported by the service
FAILURE_STATUS = {
    REASON_INVALID: 400,
    REASON_DUPLICATE: 409,
}


class SubscribeSchema(BaseSchema):
    email = fields.String(required=True)
    name = fields.String(allow_none=True)
    phone = fields.String(allow_none=True)


# Apply rate limiting
@newsletter_api.route('/subscribe', methods=['POST'])
@limiter.limit("5/minute")
def subscribe():
    """
    Newsletter subscription endpoint

    Accepts POST requests with a JSON payload containing the email and
    optionally a name and phone number.

    Returns:
        201 with the subscriber, 400 for an invalid email, 409 when the
        address is already subscribed
    """
    data = load_json(SubscribeSchema)
    result = NewsletterService.subscribe_email(data['email'], name=data.get('name') or None,
                                               phone=data.get('phone') or None)

    if result.get('success'):
        return jsonify({
            'message': result.get('message'),
            'subscriber': result.get('subscriber'),
        }), 201

    status = FAILURE_STATUS.get(result.get('reason'), 500)
    return jsonify({'error': result.get('error', 'Subscription failed')}), status
