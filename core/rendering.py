"""
Markdown to safe HTML rendering pipeline.

Author content goes through two steps before it may be stored or shown:
conversion (Markdown via markdown-it-py, or raw HTML passed through as-is)
followed by allow-list sanitization with bleach. The allow-list comes from the
``SANITIZER_ALLOWED_*`` settings of the running application.

The same functions serve three call sites: the transient editor preview,
persistence of a post body, and the re-sanitization of stored HTML
right before it is rendered on a public page.
"""

import logging
from typing import Any, Dict, Optional

from flask import current_app, has_app_context
from markdown_it import MarkdownIt
from markupsafe import Markup

from config.config_constants import (
    DEFAULT_SANITIZER_ALLOWED_ATTRIBUTES,
    DEFAULT_SANITIZER_ALLOWED_PROTOCOLS,
    DEFAULT_SANITIZER_ALLOWED_TAGS,
)
from core.errors import ContentProcessingError
from core.utils.string import sanitize_html

logger = logging.getLogger(__name__)

CONTENT_MODE_MARKDOWN = 'markdown'
CONTENT_MODE_HTML = 'html'
CONTENT_MODES = (CONTENT_MODE_MARKDOWN, CONTENT_MODE_HTML)

CONTENT_ERROR_MESSAGE = 'content could not be processed'

# CommonMark with GitHub-style tables and strikethrough; raw HTML is kept so
# the sanitizer decides what survives
_markdown = MarkdownIt('commonmark', {'html': True}).enable(['table', 'strikethrough'])


def get_sanitizer_policy() -> Dict[str, Any]:
    """
    Return the allow-list used by the sanitizer.

    Outside an application context the built-in defaults are used.
    """
    if has_app_context():
        config = current_app.config
        return {
            'allowed_tags': config.get('SANITIZER_ALLOWED_TAGS', DEFAULT_SANITIZER_ALLOWED_TAGS),
            'allowed_attributes': config.get('SANITIZER_ALLOWED_ATTRIBUTES', DEFAULT_SANITIZER_ALLOWED_ATTRIBUTES),
            'allowed_protocols': config.get('SANITIZER_ALLOWED_PROTOCOLS', DEFAULT_SANITIZER_ALLOWED_PROTOCOLS),
        }
    return {
        'allowed_tags': DEFAULT_SANITIZER_ALLOWED_TAGS,
        'allowed_attributes': DEFAULT_SANITIZER_ALLOWED_ATTRIBUTES,
        'allowed_protocols': DEFAULT_SANITIZER_ALLOWED_PROTOCOLS,
    }


def render_markdown(text: str) -> str:
    """
    Convert Markdown to (unsanitized) HTML.

    Raises:
        ContentProcessingError: If the converter fails on the input
    """
    if not text:
        return ''
    try:
        return _markdown.render(text)
    except Exception as e:
        logger.warning("Markdown conversion failed: %s", e)
        raise ContentProcessingError(CONTENT_ERROR_MESSAGE) from e


def clean_html(html: str, policy: Optional[Dict[str, Any]] = None) -> str:
    """Sanitize HTML with the configured allow-list."""
    return sanitize_html(html, **(policy or get_sanitizer_policy()))


def prepare_body(text: str, mode: str = CONTENT_MODE_MARKDOWN) -> str:
    """
    Turn author input into the sanitized HTML that gets persisted.

    Args:
        text: Markdown or HTML supplied by the author
        mode: ``markdown`` (default) or ``html``

    Returns:
        Sanitized HTML string

    Raises:
        ContentProcessingError: If the input cannot be converted
        ValueError: If ``mode`` is not a known content mode
    """
    if mode not in CONTENT_MODES:
        raise ValueError(f"Unknown content mode: {mode}")

    if text is None:
        text = ''
    if not isinstance(text, str):
        raise ContentProcessingError(CONTENT_ERROR_MESSAGE)

    html = render_markdown(text) if mode == CONTENT_MODE_MARKDOWN else text
    return clean_html(html)


def render_stored_html(html: Optional[str]) -> Markup:
    """
    Re-sanitize stored HTML and mark it safe for templates.

    Stored bodies are already sanitized; this guards against rows written
    under an older, looser allow-list.
    """
    return Markup(clean_html(html or ''))
