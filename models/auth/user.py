"""
User model module for authentication and authorization in the Mente Tech blog.

Users are the editorial team signing in to the admin surface. The model
provides:

- Password hashing and verification with werkzeug
- A single role (``admin`` or ``user``) checked by ``has_role``
- JWT token generation and validation for API authentication
- Account status management (active, inactive)
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
import uuid

import jwt
from flask import current_app
from sqlalchemy import func
from werkzeug.security import generate_password_hash, check_password_hash

from extensions import db
from models.base import BaseModel, UTCDateTime
from core.utils.date_time import to_iso_format, utcnow

MAX_TOKEN_LIFETIME_SECONDS = 86400


class User(BaseModel):
    """
    User model with authentication and authorization.

    Attributes:
        id: Primary key
        email: Unique email address used to sign in
        password: Hashed password
        name: Display name
        role: ``admin`` or ``user``
        status: Account status (active, inactive)
        last_login: When the user last signed in
    """
    __tablename__ = 'users'

    # Role constants
    ROLE_ADMIN = 'admin'
    ROLE_USER = 'user'
    VALID_ROLES = [ROLE_ADMIN, ROLE_USER]

    # Status constants
    STATUS_ACTIVE = 'active'
    STATUS_INACTIVE = 'inactive'

    MIN_PASSWORD_LENGTH = 8

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password = db.Column(db.String(255), nullable=False)
    name = db.Column(db.String(100))
    role = db.Column(db.String(20), nullable=False, default=ROLE_USER, index=True)
    status = db.Column(db.String(20), nullable=False, default=STATUS_ACTIVE, index=True)
    last_login = db.Column(UTCDateTime())

    def __init__(self, email: str, password: Optional[str] = None, name: Optional[str] = None,
                 role: str = ROLE_USER, status: str = STATUS_ACTIVE) -> None:
        """
        Initialize a new user.

        Args:
            email: Email address
            password: Plain text password to hash, or None
            name: Display name
            role: Initial role
            status: Initial account status

        Raises:
            ValueError: If the role is unknown or the password too short
        """
        if role not in self.VALID_ROLES:
            raise ValueError(f"Invalid role. Must be one of: {', '.join(self.VALID_ROLES)}")

        super().__init__(email=email.strip().lower(), name=name, role=role, status=status)
        if password:
            self.set_password(password)

    def set_password(self, password: str) -> None:
        """
        Hash and store a new password.

        Args:
            password: Plain text password to hash

        Raises:
            ValueError: If password doesn't meet criteria
        """
        if not password or len(password) < self.MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {self.MIN_PASSWORD_LENGTH} characters")

        self.password = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        """
        Verify password.

        Args:
            password: Plain text password to check

        Returns:
            bool: True if password matches, False otherwise
        """
        if not self.password or not password:
            return False
        return check_password_hash(self.password, password)

    def generate_token(self, expires_in: Optional[int] = None) -> str:
        """
        Generate JWT token with expiry.

        Args:
            expires_in: Token lifetime in seconds (default: JWT_EXPIRATION_SECONDS)

        Returns:
            str: Encoded JWT token

        Raises:
            ValueError: If expires_in is invalid
        """
        if expires_in is None:
            expires_in = current_app.config.get('JWT_EXPIRATION_SECONDS', 3600)

        if expires_in < 1 or expires_in > MAX_TOKEN_LIFETIME_SECONDS:
            raise ValueError("Token expiration must be between 1 second and 24 hours")

        issued_at = datetime.now(timezone.utc)
        token = jwt.encode(
            {
                'user_id': self.id,
                'role': self.role,
                'exp': issued_at + timedelta(seconds=expires_in),
                'iat': issued_at,
                'jti': str(uuid.uuid4())
            },
            current_app.config['JWT_SECRET_KEY'],
            algorithm='HS256'
        )

        current_app.logger.info("Generated token for user %s", self.id)
        return token

    @classmethod
    def verify_token(cls, token: str) -> Optional['User']:
        """
        Verify JWT token.

        Args:
            token: JWT token to verify

        Returns:
            Optional[User]: Active user if token is valid, None otherwise
        """
        try:
            data = jwt.decode(
                token,
                current_app.config['JWT_SECRET_KEY'],
                algorithms=['HS256']
            )
        except jwt.InvalidTokenError as e:
            current_app.logger.warning("Token verification failed: %s", e)
            return None

        user = cls.get_by_id(data.get('user_id'))
        if user is None or not user.is_active:
            return None
        return user

    def update_last_login(self) -> None:
        self.last_login = utcnow()
        db.session.commit()

    @property
    def is_active(self) -> bool:
        """Check if user is active."""
        return self.status == self.STATUS_ACTIVE

    @property
    def is_admin(self) -> bool:
        """Check if user is admin."""
        return self.role == self.ROLE_ADMIN

    def has_role(self, role: str) -> bool:
        return self.is_active and self.role == role

    @property
    def display_name(self) -> str:
        return self.name or self.email.split('@')[0]

    @classmethod
    def get_by_email(cls, email: str) -> Optional['User']:
        """
        Find user by email (case-insensitive).

        Args:
            email: Email to search for

        Returns:
            Optional[User]: User if found, None otherwise
        """
        if not email:
            return None
        return cls.query.filter(func.lower(cls.email) == email.strip().lower()).first()

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert user to dictionary representation for API responses.

        Returns:
            Dict[str, Any]: Dictionary representation of user
        """
        return {
            'id': self.id,
            'email': self.email,
            'name': self.name,
            'display_name': self.display_name,
            'role': self.role,
            'status': self.status,
            'is_admin': self.is_admin,
            'is_active': self.is_active,
            'created_at': to_iso_format(self.created_at),
            'last_login': to_iso_format(self.last_login),
        }

    def __repr__(self) -> str:
        return f'<User {self.email} ({self.role})>'
