"""
Authentication service for centralized authentication logic.

This service handles sign-in, API token verification and role checks. It is
used by the API decorators, the CLI and the background tasks so that every
entry point builds the same explicit ``AuthContext`` before calling into the
content services.

Two kinds of callers exist:
- Interactive users identified by a JWT bearer token
- The trusted internal scheduler (Celery beat, CLI or the scheduler key
  header), which runs with elevated privilege and skips the role check
"""

import hmac
import logging
from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Tuple

from flask import current_app

from models import User

logger = logging.getLogger(__name__)

ROLE_ADMIN = User.ROLE_ADMIN


def has_role(user_id: Optional[int], role: str) -> bool:
    """
    Check whether a user holds a role.

    Args:
        user_id: ID of the user to check
        role: Role name, e.g. ``admin``

    Returns:
        bool: True if the user exists, is active and holds the role
    """
    if user_id is None:
        return False
    user = User.get_by_id(user_id)
    return bool(user and user.has_role(role))


@dataclass(frozen=True)
class AuthContext:
    """
    Identity of the caller of a service operation.

    Attributes:
        user_id: Authenticated user, None for anonymous or system callers
        roles: Roles the caller holds
        trusted: Internal invocation that bypasses authorization checks
    """
    user_id: Optional[int] = None
    roles: FrozenSet[str] = field(default_factory=frozenset)
    trusted: bool = False

    @property
    def is_admin(self) -> bool:
        return ROLE_ADMIN in self.roles

    @classmethod
    def system(cls) -> 'AuthContext':
        """Context for time-triggered internal invocations."""
        return cls(trusted=True)

    @classmethod
    def anonymous(cls) -> 'AuthContext':
        return cls()

    @classmethod
    def for_user(cls, user: User) -> 'AuthContext':
        roles = frozenset({user.role}) if has_role(user.id, user.role) else frozenset()
        return cls(user_id=user.id, roles=roles)


class AuthService:
    """
    Service class to handle authentication-related operations.

    This class centralizes authentication logic used by the API, ensuring
    consistent behaviour across entry points.
    """

    @staticmethod
    def authenticate_user(email: str, password: str) -> Tuple[bool, Optional[User], str]:
        """
        Authenticate a user with email and password.

        Args:
            email: The email address to authenticate
            password: The password to verify

        Returns:
            Tuple containing:
            - Boolean indicating if authentication succeeded
            - User object if authentication succeeded, None otherwise
            - Error message if authentication failed, empty string otherwise
        """
        user = User.get_by_email(email)

        if user is None or not user.check_password(password):
            logger.info("Failed login attempt for %s", (email or '').strip().lower())
            return False, None, "Invalid email or password"

        if not user.is_active:
            logger.info("Login attempt for inactive account %s", user.email)
            return False, None, "Account is inactive"

        user.update_last_login()
        logger.info("User %s logged in", user.id)
        return True, user, ""

    @staticmethod
    def generate_api_token(user: User, expires_in: Optional[int] = None) -> str:
        return user.generate_token(expires_in=expires_in)

    @staticmethod
    def verify_api_token(token: Optional[str]) -> Tuple[bool, Optional[User], str]:
        """
        Verify a JWT token and return the associated user.

        Args:
            token: The JWT token to verify

        Returns:
            Tuple containing:
            - Boolean indicating if token is valid
            - User object if token is valid, None otherwise
            - Error message if token is invalid, empty string otherwise
        """
        if not token:
            return False, None, "No token provided"

        user = User.verify_token(token)
        if user is None:
            return False, None, "Invalid or expired token"

        return True, user, ""

    @staticmethod
    def verify_scheduler_key(key: Optional[str]) -> bool:
        """
        Check the shared key presented by the internal scheduler.

        The trusted path is disabled while ``SCHEDULER_API_KEY`` is unset.
        """
        expected = current_app.config.get('SCHEDULER_API_KEY')
        if not expected or not key:
            return False
        return hmac.compare_digest(str(expected), str(key))
