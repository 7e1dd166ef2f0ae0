"""
Contact form message model for the Mente Tech blog.
"""

from typing import Dict, Any

from extensions import db
from models.base import BaseModel
from core.utils.date_time import to_iso_format


class ContactMessage(BaseModel):
    """
    A message sent through the public contact form.

    Attributes:
        id: Primary key
        name: Sender name
        email: Sender email address
        phone: Optional phone number
        subject: Message subject
        message: Message body (plain text)
        wants_newsletter: Whether the sender opted in to the newsletter
        status: Notification status (pending, notified, failed)
        email_sent: Whether the owner notification email went out
    """
    __tablename__ = 'contact_messages'

    STATUS_PENDING = 'pending'
    STATUS_NOTIFIED = 'notified'
    STATUS_FAILED = 'failed'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), nullable=False, index=True)
    phone = db.Column(db.String(30), nullable=True)
    subject = db.Column(db.String(200), nullable=False)
    message = db.Column(db.Text, nullable=False)
    wants_newsletter = db.Column(db.Boolean, nullable=False, default=False)
    status = db.Column(db.String(20), nullable=False, default=STATUS_PENDING, index=True)
    email_sent = db.Column(db.Boolean, nullable=False, default=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'phone': self.phone,
            'subject': self.subject,
            'message': self.message,
            'wants_newsletter': self.wants_newsletter,
            'status': self.status,
            'email_sent': self.email_sent,
            'created_at': to_iso_format(self.created_at),
            'updated_at': to_iso_format(self.updated_at),
        }

    def __repr__(self) -> str:
        return f"<ContactMessage {self.id}: {self.subject} ({self.status})>"
