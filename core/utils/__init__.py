"""
Core utility functions for the Mente Tech blog.

Key modules:
- string: slugs, HTML sanitization, excerpts and validation helpers
- date_time: timezone-aware UTC handling
"""

from .string import (
    slugify,
    truncate_text,
    strip_html_tags,
    sanitize_html,
    normalize_whitespace,
    generate_excerpt,
    count_words,
    estimate_reading_time,
    is_valid_email,
    is_valid_url,
    is_valid_slug,
    is_valid_hex_color,
)

from .date_time import (
    utcnow,
    ensure_utc,
    parse_iso_datetime,
    format_timestamp,
    to_iso_format,
)

__all__ = [
    'slugify',
    'truncate_text',
    'strip_html_tags',
    'sanitize_html',
    'normalize_whitespace',
    'generate_excerpt',
    'count_words',
    'estimate_reading_time',
    'is_valid_email',
    'is_valid_url',
    'is_valid_slug',
    'is_valid_hex_color',
    'utcnow',
    'ensure_utc',
    'parse_iso_datetime',
    'format_timestamp',
    'to_iso_format',
]
