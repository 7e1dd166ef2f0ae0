"""
Contact form service.

A submission is stored first and the site owner is notified afterwards
through the configured HTTP email API. The sender receives a confirmation
copy. Notification problems are logged and reflected in the message status;
they never fail the submission.
"""

import logging
from typing import Any, Dict, Mapping, Optional

import requests
from flask import current_app
from markupsafe import escape
from sqlalchemy.exc import SQLAlchemyError

from core.errors import FieldErrors, StoreError
from core.utils.string import is_valid_email
from extensions import contact_messages_counter, db
from models import ContactMessage
from services.newsletter_service import NewsletterService

logger = logging.getLogger(__name__)

# Field length limits (min, max)
FIELD_LIMITS = {
    'name': (3, 100),
    'email': (None, 255),
    'phone': (None, 30),
    'subject': (5, 200),
    'message': (10, 2000),
}


def _html_paragraphs(text: str) -> str:
    return str(escape(text)).replace('\n', '<br>')


class ContactService:
    """Store contact messages and notify the site owner."""

    @staticmethod
    def validate(data: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Check a contact form payload.

        Returns:
            dict: Trimmed values ready to store

        Raises:
            ValidationFailed: If any field is missing or out of bounds
        """
        errors = FieldErrors()
        values: Dict[str, Any] = {}

        for name, (minimum, maximum) in FIELD_LIMITS.items():
            value = (data.get(name) or '').strip()
            if name == 'email':
                value = value.lower()

            if not value:
                if name != 'phone':
                    errors.add(name, 'required')
                values[name] = None
                continue
            if minimum and len(value) < minimum:
                errors.add(name, 'too_short', min=minimum)
            elif len(value) > maximum:
                errors.add(name, 'too_long', max=maximum)
            elif name == 'email' and not is_valid_email(value):
                errors.add(name, 'invalid', message='email must be a valid address')
            values[name] = value

        values['wants_newsletter'] = bool(data.get('wants_newsletter'))
        errors.raise_if_any()
        return values

    @staticmethod
    def submit(data: Mapping[str, Any]) -> ContactMessage:
        """
        Store a contact message and send the notification emails.

        Args:
            data: Contact form payload

        Returns:
            ContactMessage: The stored message

        Raises:
            ValidationFailed: If the payload is invalid
            StoreError: If the message could not be stored
        """
        values = ContactService.validate(data)

        contact = ContactMessage(status=ContactMessage.STATUS_PENDING, email_sent=False, **values)
        try:
            db.session.add(contact)
            if contact.wants_newsletter:
                NewsletterService.add_contact_opt_in(contact.email, contact.name, contact.phone)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            contact_messages_counter.labels(status='store_failed').inc()
            logger.error("Failed to store contact message: %s", e)
            raise StoreError('Failed to send message') from e

        ContactService.notify(contact)
        contact_messages_counter.labels(status=contact.status).inc()
        return contact

    @staticmethod
    def notify(contact: ContactMessage) -> bool:
        """
        Email the site owner about a message and confirm receipt to the sender.

        Does nothing while ``CONTACT_EMAIL_API_KEY`` is unset; the message
        stays ``pending``.

        Returns:
            bool: True if the owner notification was accepted by the email API
        """
        config = current_app.config
        if not config.get('CONTACT_EMAIL_API_KEY'):
            logger.info("Contact email API not configured, message %s left pending", contact.id)
            return False

        owner_sent = ContactService._send_email(
            to=config.get('CONTACT_EMAIL'),
            subject=f"New contact message: {contact.subject}",
            html=ContactService._owner_email_html(contact),
        )
        if owner_sent:
            ContactService._send_email(
                to=contact.email,
                subject='We received your message!',
                html=ContactService._sender_email_html(contact),
            )

        try:
            contact.email_sent = owner_sent
            contact.status = ContactMessage.STATUS_NOTIFIED if owner_sent else ContactMessage.STATUS_FAILED
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error("Failed to record notification status for message %s: %s", contact.id, e)

        return owner_sent

    @staticmethod
    def list_messages(status: Optional[str] = None, page: int = 1, per_page: int = 20) -> Dict[str, Any]:
        query = ContactMessage.query
        if status:
            query = query.filter(ContactMessage.status == status)
        query = query.order_by(ContactMessage.created_at.desc())
        result = ContactMessage.paginate(page=page, per_page=per_page, query=query)
        result['items'] = [message.to_dict() for message in result['items']]
        return result

    @staticmethod
    def _send_email(to: Optional[str], subject: str, html: str) -> bool:
        config = current_app.config
        if not to:
            logger.warning("Contact email skipped: no recipient configured")
            return False

        try:
            response = requests.post(
                config['CONTACT_EMAIL_API_URL'],
                headers={
                    'Authorization': f"Bearer {config['CONTACT_EMAIL_API_KEY']}",
                    'Content-Type': 'application/json',
                },
                json={
                    'from': config['CONTACT_EMAIL_FROM'],
                    'to': [to],
                    'subject': subject,
                    'html': html,
                },
                timeout=config.get('CONTACT_EMAIL_TIMEOUT', 10),
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error("Contact email to %s failed: %s", to, e)
            return False

        logger.info("Contact email sent to %s", to)
        return True

    @staticmethod
    def _owner_email_html(contact: ContactMessage) -> str:
        phone = f"<p><strong>Phone:</strong> {escape(contact.phone)}</p>" if contact.phone else ''
        return (
            "<h2>New contact message</h2>"
            f"<p><strong>Name:</strong> {escape(contact.name)}</p>"
            f"<p><strong>Email:</strong> {escape(contact.email)}</p>"
            f"{phone}"
            f"<p><strong>Subject:</strong> {escape(contact.subject)}</p>"
            "<p><strong>Message:</strong></p>"
            f"<p>{_html_paragraphs(contact.message)}</p>"
        )

    @staticmethod
    def _sender_email_html(contact: ContactMessage) -> str:
        return (
            f"<h1>Thanks for getting in touch, {escape(contact.name)}!</h1>"
            "<p>We received your message and will reply soon.</p>"
            f"<p><strong>Subject:</strong> {escape(contact.subject)}</p>"
            "<p><strong>Your message:</strong></p>"
            f"<p>{_html_paragraphs(contact.message)}</p>"
            "<p>Best regards,<br>The Mente Tech team</p>"
        )
