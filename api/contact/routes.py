# api/contact/routes.py

from flask import Blueprint, jsonify
from marshmallow import fields

from api.schemas import BaseSchema, load_json
from extensions import limiter
from services.contact_service import ContactService

contact_api = Blueprint('contact_api', __name__, url_prefix='/contact')


class ContactSchema(BaseSchema):
    name = fields.String(allow_none=True)
    email = fields.String(allow_none=True)
    phone = fields.String(allow_none=True)
    subject = fields.String(allow_none=True)
    message = fields.String(allow_none=True)
    wants_newsletter = fields.Boolean(load_default=False)


@contact_api.route('', methods=['POST'])
@limiter.limit("3/minute")
def send_message():
    """
    Contact form endpoint

    Stores the message and notifies the site owner. A failed notification
    does not fail the request.

    Returns:
        201 with the message id and notification status, 400 on invalid input
    """
    contact = ContactService.submit(load_json(ContactSchema))
    return jsonify({
        'success': True,
        'message': 'Message sent successfully',
        'id': contact.id,
        'email_sent': contact.email_sent,
    }), 201
