"""
Shared schema helpers for the blog API.

Request payloads are loaded with Marshmallow schemas that coerce types only;
length, format and uniqueness rules live in the services so every error keeps
its field-level code. Marshmallow errors are turned into ``ValidationFailed``
with the ``invalid`` code.
"""

import logging
from typing import Any, Dict, Mapping, Optional, Type

from flask import request
from marshmallow import EXCLUDE, Schema, ValidationError, fields, pre_load, validate

from core.errors import FieldErrors, ValidationFailed

logger = logging.getLogger(__name__)


class BaseSchema(Schema):
    """
    Base schema with common configuration for all API schemas.

    - Excludes unknown fields
    - Strips whitespace from string values before loading
    """
    class Meta:
        """Schema metadata."""
        unknown = EXCLUDE
        ordered = True

    @pre_load
    def sanitize_input(self, data: Dict[str, Any], **kwargs) -> Dict[str, Any]:
        """
        Strip whitespace from string fields.

        Args:
            data: The input data dictionary

        Returns:
            Sanitized input data
        """
        if not isinstance(data, Mapping):
            return data
        return {key: value.strip() if isinstance(value, str) else value
                for key, value in data.items()}


class PaginationSchema(BaseSchema):
    """Schema for pagination query parameters."""

    page = fields.Integer(validate=validate.Range(min=1, max=10000), load_default=1)
    per_page = fields.Integer(validate=validate.Range(min=1, max=100), load_default=None)


def _flatten_messages(messages: Any) -> list:
    if isinstance(messages, str):
        return [messages]
    if isinstance(messages, Mapping):
        flattened = []
        for value in messages.values():
            flattened.extend(_flatten_messages(value))
        return flattened
    flattened = []
    for value in messages or []:
        flattened.extend(_flatten_messages(value))
    return flattened


def to_validation_failed(error: ValidationError) -> ValidationFailed:
    """Convert a Marshmallow error into the API's field error format."""
    errors = FieldErrors()
    messages = error.messages if isinstance(error.messages, Mapping) else {'_schema': error.messages}
    for name, field_messages in messages.items():
        for message in _flatten_messages(field_messages):
            errors.add_message(name, message)
    return ValidationFailed(errors.messages, codes=errors.codes)


def load_json(schema_cls: Type[Schema], partial: bool = False) -> Dict[str, Any]:
    """
    Load the JSON request body with a schema.

    Args:
        schema_cls: Schema used to coerce the payload
        partial: Whether required fields may be absent

    Returns:
        dict: Loaded payload

    Raises:
        ValidationFailed: If the body is not a JSON object or fails to load
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationFailed.single('_schema', 'Request body must be a JSON object')
    try:
        return schema_cls().load(data, partial=partial)
    except ValidationError as e:
        raise to_validation_failed(e) from e


def load_args(schema_cls: Type[Schema], default_per_page: Optional[int] = None) -> Dict[str, Any]:
    """
    Load query string parameters with a schema.

    Raises:
        ValidationFailed: If a parameter cannot be coerced
    """
    try:
        args = schema_cls().load(request.args.to_dict())
    except ValidationError as e:
        raise to_validation_failed(e) from e
    if 'per_page' in args and args['per_page'] is None:
        args['per_page'] = default_per_page or 20
    return args
