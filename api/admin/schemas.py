"""
Schema definitions for the Administrative API.

These schemas coerce request payloads to Python types. Field rules that carry
their own error codes (lengths, slugs, tags, lifecycle) are checked by the
services, so no field here is required and absent keys stay absent: an update
only touches the fields it names.
"""

from datetime import timezone

from marshmallow import fields, validate

from api.schemas import BaseSchema, PaginationSchema
from core.rendering import CONTENT_MODES


class PostSchema(BaseSchema):
    """Schema for creating and editing posts."""

    title = fields.String(allow_none=True)
    slug = fields.String(allow_none=True)
    summary = fields.String(allow_none=True)
    body = fields.String(allow_none=True)
    content_mode = fields.String(validate=validate.OneOf(CONTENT_MODES))
    category_id = fields.Integer(allow_none=True)
    tags = fields.List(fields.String(), allow_none=True)
    cover_image_url = fields.String(allow_none=True)
    status = fields.String()
    scheduled_for = fields.AwareDateTime(allow_none=True, default_timezone=timezone.utc)


class StatusChangeSchema(BaseSchema):
    """Schema for status-only changes."""

    status = fields.String()
    scheduled_for = fields.AwareDateTime(allow_none=True, default_timezone=timezone.utc)


class PreviewSchema(BaseSchema):
    """Schema for transient previews."""

    body = fields.String(allow_none=True, load_default='')
    content_mode = fields.String(validate=validate.OneOf(CONTENT_MODES), load_default='markdown')


class PostQuerySchema(PaginationSchema):
    """Query parameters of the admin post list."""

    status = fields.String(load_default=None)
    q = fields.String(load_default=None)


class CategorySchema(BaseSchema):
    """Schema for creating and editing categories."""

    name = fields.String(allow_none=True)
    slug = fields.String(allow_none=True)
    description = fields.String(allow_none=True)
    color = fields.String(allow_none=True)


class InboxQuerySchema(PaginationSchema):
    status = fields.String(load_default=None, validate=validate.OneOf(['pending', 'notified', 'failed']))
