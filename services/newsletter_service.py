"""
Newsletter service for managing subscriptions.

Subscriptions made through the newsletter form are confirmed right away.
Contact form opt-ins are stored unconfirmed with source ``contact`` and are
upgraded when the same address later subscribes through the newsletter form.
"""

import logging
from typing import Any, Dict, Optional, Union

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from core.utils.date_time import utcnow
from core.utils.string import is_valid_email
from extensions import db, newsletter_subscriptions_counter
from models import Subscriber

logger = logging.getLogger(__name__)

# Failure reasons returned to the routes
REASON_INVALID = 'invalid'
REASON_DUPLICATE = 'duplicate'
REASON_STORE = 'store'


class NewsletterService:
    """
    Service for handling newsletter subscriptions and reporting.

    Methods return result dicts with a ``success`` flag and a ``message`` or
    ``error``; failures also carry a ``reason`` the routes map to a status.
    """

    @staticmethod
    def subscribe_email(email: str, name: Optional[str] = None,
                        phone: Optional[str] = None) -> Dict[str, Union[bool, str, Dict[str, Any]]]:
        """
        Subscribe an email to the newsletter.

        Args:
            email: Email address to subscribe
            name: Subscriber's name (optional)
            phone: Subscriber's phone number (optional)

        Returns:
            dict: Result with success flag and message or error
        """
        email = (email or '').strip().lower()

        if not is_valid_email(email):
            logger.info("Newsletter subscription rejected: invalid email format")
            return {'success': False, 'error': 'Invalid email format', 'reason': REASON_INVALID}

        existing = Subscriber.get_by_email(email)
        if existing is not None and existing.confirmed:
            logger.debug("Already subscribed to newsletter: %s", email)
            return {'success': False, 'error': 'Email already subscribed', 'reason': REASON_DUPLICATE}

        try:
            if existing is not None:
                # Contact form opt-in confirming through the newsletter form
                existing.confirmed = True
                existing.confirmed_at = utcnow()
                existing.status = Subscriber.STATUS_ACTIVE
                existing.name = existing.name or name
                existing.phone = existing.phone or phone
                subscriber = existing
            else:
                subscriber = Subscriber(email=email, name=name, phone=phone,
                                        source=Subscriber.SOURCE_NEWSLETTER, confirmed=True)
                db.session.add(subscriber)
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            return {'success': False, 'error': 'Email already subscribed', 'reason': REASON_DUPLICATE}
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error("Database error in subscribe_email: %s", e)
            return {'success': False, 'error': 'Database error occurred', 'reason': REASON_STORE}

        newsletter_subscriptions_counter.labels(source=Subscriber.SOURCE_NEWSLETTER).inc()
        logger.info("New newsletter subscription: %s", subscriber.id)
        return {
            'success': True,
            'message': 'Successfully subscribed to the newsletter',
            'subscriber': subscriber.to_dict(),
        }

    @staticmethod
    def add_contact_opt_in(email: str, name: Optional[str] = None,
                           phone: Optional[str] = None) -> Optional[Subscriber]:
        """
        Record a contact form newsletter opt-in.

        The subscriber is added to the current session unconfirmed; the caller
        commits. Addresses already on the list are left as they are.

        Returns:
            The new subscriber, or None if the address was already present
        """
        email = (email or '').strip().lower()
        if Subscriber.get_by_email(email) is not None:
            return None

        subscriber = Subscriber(email=email, name=name, phone=phone,
                                source=Subscriber.SOURCE_CONTACT, confirmed=False)
        db.session.add(subscriber)
        newsletter_subscriptions_counter.labels(source=Subscriber.SOURCE_CONTACT).inc()
        return subscriber

    @staticmethod
    def get_stats() -> Dict[str, Any]:
        """
        Summarize the subscriber list for the admin dashboard.

        Returns:
            dict: Totals by status, confirmation and source
        """
        total = db.session.query(func.count(Subscriber.id)).scalar() or 0
        confirmed = db.session.query(func.count(Subscriber.id))\
            .filter(Subscriber.confirmed.is_(True)).scalar() or 0
        active = db.session.query(func.count(Subscriber.id))\
            .filter(Subscriber.status == Subscriber.STATUS_ACTIVE).scalar() or 0

        by_source = {source: 0 for source in Subscriber.VALID_SOURCES}
        by_source.update(Subscriber.count_by_source())

        return {
            'total': total,
            'confirmed': confirmed,
            'unconfirmed': total - confirmed,
            'active': active,
            'by_source': by_source,
        }
