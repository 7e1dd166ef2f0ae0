"""
Application error taxonomy.

Every error carries the HTTP status and machine-readable code the API layer
returns, so blueprints can translate any of them into a consistent JSON
envelope:

- ValidationFailed: per-field problems, the write is never attempted
- ContentProcessingError: the body could not be converted; reported on ``body``
- AuthorizationError: caller lacks the administrator capability
- AuthenticationError: caller could not be identified
- NotFoundError: the requested record does not exist
- StoreError: the database rejected or failed the operation
- PublicationError: the scheduled publication run failed and was rolled back
"""

from typing import Any, Dict, List, Optional


class BlogError(Exception):
    """Base exception class for application errors."""

    status_code = 500
    error_code = 'BLOG_ERROR'

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if error_code is not None:
            self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        payload = {'error': self.message, 'code': self.error_code}
        if self.details:
            payload['details'] = self.details
        return payload


class ValidationFailed(BlogError):
    """Exception raised when one or more fields are invalid."""

    status_code = 400
    error_code = 'VALIDATION_ERROR'

    def __init__(self, fields: Dict[str, List[str]], message: str = 'Validation failed',
                 codes: Optional[Dict[str, List[str]]] = None):
        self.fields = {name: list(messages) for name, messages in fields.items()}
        self.codes = {name: list(values) for name, values in (codes or {}).items()}
        super().__init__(message)

    @classmethod
    def single(cls, field: str, message: str, code: Optional[str] = None) -> 'ValidationFailed':
        return cls({field: [message]}, codes={field: [code]} if code else None)

    def to_dict(self) -> Dict[str, Any]:
        payload = {'error': self.message, 'code': self.error_code, 'fields': self.fields}
        if self.codes:
            payload['field_codes'] = self.codes
        return payload


class ContentProcessingError(BlogError):
    """Raised when author content cannot be converted to safe HTML."""

    status_code = 422
    error_code = 'CONTENT_UNPROCESSABLE'


class AuthenticationError(BlogError):
    status_code = 401
    error_code = 'AUTH_REQUIRED'


class AuthorizationError(BlogError):
    status_code = 403
    error_code = 'ADMIN_REQUIRED'


class NotFoundError(BlogError):
    status_code = 404
    error_code = 'NOT_FOUND'


class StoreError(BlogError):
    status_code = 500
    error_code = 'STORE_ERROR'


class PublicationError(BlogError):
    status_code = 500
    error_code = 'PUBLICATION_FAILED'


# Field-level error codes and their messages
FIELD_ERROR_MESSAGES = {
    'required': '{label} is required',
    'too_short': '{label} must be at least {min} characters',
    'too_long': '{label} must be at most {max} characters',
    'malformed_slug': 'slug may only contain lowercase letters, digits and hyphens',
    'slug_taken': 'slug is already in use',
    'invalid_status': 'status must be one of {choices}',
    'must_be_future': '{label} must be in the future',
    'too_many_tags': 'at most {max} tags are allowed',
    'content_unprocessable': 'content could not be processed',
    'invalid': '{message}',
    'not_found': '{label} does not exist',
}


class FieldErrors:
    """Collects per-field messages and codes before raising ValidationFailed."""

    def __init__(self) -> None:
        self.messages: Dict[str, List[str]] = {}
        self.codes: Dict[str, List[str]] = {}

    def add(self, field: str, code: str, **params: Any) -> None:
        params.setdefault('label', field.replace('_', ' '))
        self.messages.setdefault(field, []).append(FIELD_ERROR_MESSAGES[code].format(**params))
        self.codes.setdefault(field, []).append(code)

    def add_message(self, field: str, message: str) -> None:
        self.add(field, 'invalid', message=message)

    def merge(self, other: 'FieldErrors') -> None:
        """Add the fields of ``other`` that have not been reported yet."""
        for name, messages in other.messages.items():
            if name in self.messages:
                continue
            self.messages[name] = list(messages)
            self.codes[name] = list(other.codes.get(name, []))

    def __contains__(self, field: str) -> bool:
        return field in self.messages

    def __bool__(self) -> bool:
        return bool(self.messages)

    def raise_if_any(self) -> None:
        if self.messages:
            raise ValidationFailed(self.messages, codes=self.codes)
