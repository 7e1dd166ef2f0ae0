"""
Newsletter subscription model for the Mente Tech blog.

Subscribers arrive either through the newsletter form (confirmed right away)
or as an opt-in on the contact form (left unconfirmed until they subscribe
through the newsletter form themselves).
"""

from typing import Optional, Dict, Any

from sqlalchemy import func

from extensions import db
from models.base import BaseModel, UTCDateTime
from core.utils.date_time import to_iso_format, utcnow
from core.utils.string import is_valid_email


class Subscriber(BaseModel):
    """
    Model representing a newsletter subscriber.

    Attributes:
        id: Primary key
        email: Subscriber's email address (unique, lowercase)
        name: Subscriber's name (optional)
        phone: Subscriber's phone number (optional)
        source: How the subscriber was acquired
        confirmed: Whether the subscription has been confirmed
        confirmed_at: When the subscription was confirmed
        status: Subscription status
        subscribed_at: When the subscription was initiated
    """
    __tablename__ = 'newsletter_subscribers'

    # Subscription sources
    SOURCE_NEWSLETTER = 'newsletter'
    SOURCE_CONTACT = 'contact'
    VALID_SOURCES = [SOURCE_NEWSLETTER, SOURCE_CONTACT]

    # Subscription status constants
    STATUS_ACTIVE = 'active'
    STATUS_UNSUBSCRIBED = 'unsubscribed'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    name = db.Column(db.String(100), nullable=True)
    phone = db.Column(db.String(30), nullable=True)
    source = db.Column(db.String(20), nullable=False, default=SOURCE_NEWSLETTER, index=True)

    confirmed = db.Column(db.Boolean, nullable=False, default=False)
    confirmed_at = db.Column(UTCDateTime(), nullable=True)
    status = db.Column(db.String(20), nullable=False, default=STATUS_ACTIVE, index=True)
    subscribed_at = db.Column(UTCDateTime(), nullable=False, default=utcnow)

    def __init__(self, email: str, name: Optional[str] = None, phone: Optional[str] = None,
                 source: str = SOURCE_NEWSLETTER, confirmed: bool = False) -> None:
        """
        Initialize a new subscriber instance.

        Args:
            email: Subscriber's email address
            name: Subscriber's name (optional)
            phone: Subscriber's phone number (optional)
            source: Where the subscriber came from
            confirmed: Whether the subscription starts confirmed

        Raises:
            ValueError: If email is not provided or invalid format
        """
        if not email:
            raise ValueError("Email address is required")

        email = email.lower().strip()
        if not is_valid_email(email):
            raise ValueError("Invalid email address format")

        if source not in self.VALID_SOURCES:
            raise ValueError(f"Invalid source. Must be one of: {', '.join(self.VALID_SOURCES)}")

        now = utcnow()
        super().__init__(
            email=email,
            name=name,
            phone=phone,
            source=source,
            confirmed=confirmed,
            confirmed_at=now if confirmed else None,
            status=self.STATUS_ACTIVE,
            subscribed_at=now
        )

    @classmethod
    def get_by_email(cls, email: str) -> Optional['Subscriber']:
        """
        Find a subscriber by email.

        Args:
            email: Email address to search for

        Returns:
            Subscriber object or None if not found
        """
        if not email:
            return None
        return cls.query.filter_by(email=email.lower().strip()).first()

    @classmethod
    def count_by_source(cls) -> Dict[str, int]:
        rows = db.session.query(cls.source, func.count(cls.id)).group_by(cls.source).all()
        return {source: count for source, count in rows}

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert subscriber to dictionary for API responses.

        Returns:
            Dictionary representation of subscriber
        """
        return {
            'id': self.id,
            'email': self.email,
            'name': self.name,
            'phone': self.phone,
            'source': self.source,
            'confirmed': self.confirmed,
            'confirmed_at': to_iso_format(self.confirmed_at),
            'status': self.status,
            'subscribed_at': to_iso_format(self.subscribed_at),
        }

    def __repr__(self) -> str:
        return f"<Subscriber {self.email} ({self.status})>"
