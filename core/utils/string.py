"""
String utility functions for the Mente Tech blog.

This module provides reusable string manipulation functionality including:
- Slugification for URL-friendly strings
- Allow-list HTML sanitization for author-supplied content
- String truncation, excerpts and reading time estimates
- Validation helpers for slugs, emails, URLs and colors

These utilities are designed to be used across the application to ensure
consistent string handling behavior.
"""

import html
import re
import unicodedata
from typing import Dict, Iterable, List, Optional

import bleach

# Import centralized constants
from core.utils.core_utils_constants import (
    DANGEROUS_CONTENT_TAGS,
    DEFAULT_EXCERPT_LENGTH,
    DEFAULT_SLUG_LOWERCASE,
    DEFAULT_SLUG_SEPARATOR,
    DEFAULT_SLUG_STRIP_DIACRITICS,
    DEFAULT_TRUNCATE_LENGTH,
    DEFAULT_TRUNCATE_SUFFIX,
    DEFAULT_WORDS_PER_MINUTE,
    EMAIL_PATTERN,
    HEX_COLOR_PATTERN,
    MAX_DANGEROUS_BLOCK_PASSES,
    MAX_EMAIL_LENGTH,
    SLUG_PATTERN,
    URL_PATTERN,
)
from config.config_constants import (
    DEFAULT_SANITIZER_ALLOWED_ATTRIBUTES,
    DEFAULT_SANITIZER_ALLOWED_PROTOCOLS,
    DEFAULT_SANITIZER_ALLOWED_TAGS,
)

# Compiled regexes for better performance
EMAIL_REGEX = re.compile(EMAIL_PATTERN)
URL_REGEX = re.compile(URL_PATTERN)
SLUG_REGEX = re.compile(SLUG_PATTERN)
HEX_COLOR_REGEX = re.compile(HEX_COLOR_PATTERN)

# Matches a dangerous element together with everything up to its closing tag,
# or up to the end of input when the element is never closed. The opening tag
# may not contain another "<", so a scan never runs past the next tag.
DANGEROUS_BLOCK_REGEX = re.compile(
    r'<\s*(%s)\b[^<>]*>.*?(?:<\s*/\s*\1\s*>|\Z)' % '|'.join(sorted(DANGEROUS_CONTENT_TAGS)),
    re.IGNORECASE | re.DOTALL
)


def slugify(text: str, separator: str = DEFAULT_SLUG_SEPARATOR,
            lowercase: bool = DEFAULT_SLUG_LOWERCASE,
            strip_diacritics: bool = DEFAULT_SLUG_STRIP_DIACRITICS,
            allow_unicode: bool = False) -> str:
    """
    Convert text to URL-friendly slug.

    Without ``allow_unicode`` the result only contains ASCII letters, digits
    and the separator, e.g. "Automação de Vendas com IA!" becomes
    "automacao-de-vendas-com-ia".

    Args:
        text: String to convert to slug
        separator: Character to use between words (default: '-')
        lowercase: Whether to convert to lowercase (default: True)
        strip_diacritics: Whether to remove diacritical marks (default: True)
        allow_unicode: Whether to allow Unicode characters in output (default: False)

    Returns:
        URL-friendly slug string
    """
    if not text:
        return ""

    if lowercase:
        text = text.lower()

    if not allow_unicode and strip_diacritics:
        # Decompose accented characters and drop the combining marks
        text = unicodedata.normalize('NFKD', text)
        text = ''.join(c for c in text if not unicodedata.combining(c))
        text = text.encode('ascii', 'ignore').decode('ascii')
    elif not allow_unicode:
        text = unicodedata.normalize('NFKC', text)
        text = ''.join(c for c in text if ord(c) < 128)
    else:
        text = unicodedata.normalize('NFKC', text)

    flags = 0 if allow_unicode else re.ASCII
    text = re.sub(r'[^\w\s-]', '', text, flags=flags)
    text = re.sub(r'[\s_-]+', separator, text, flags=flags)
    text = text.strip(separator)

    return text


def truncate_text(text: str, length: int = DEFAULT_TRUNCATE_LENGTH,
                  suffix: str = DEFAULT_TRUNCATE_SUFFIX,
                  word_boundary: bool = True) -> str:
    """
    Truncate text to specified length.

    Args:
        text: String to truncate
        length: Maximum length including the suffix
        suffix: String to append to truncated text (default: "...")
        word_boundary: Whether to truncate at word boundary (default: True)

    Returns:
        Truncated string with suffix
    """
    if not text or len(text) <= length:
        return text

    length_with_suffix = length - len(suffix)
    if length_with_suffix <= 0:
        return suffix[:length]

    truncated = text[:length_with_suffix]

    if word_boundary:
        last_space = truncated.rfind(' ')
        if last_space > 0:
            truncated = truncated[:last_space]

    return truncated.rstrip() + suffix


def strip_html_tags(text: str) -> str:
    """
    Remove HTML tags from text.

    Args:
        text: String containing HTML markup

    Returns:
        Plain text with entities decoded and whitespace normalized
    """
    if not text:
        return ""

    clean_text = DANGEROUS_BLOCK_REGEX.sub(' ', text)
    clean_text = re.sub(r'<[^>]+>', ' ', clean_text)
    clean_text = html.unescape(clean_text)

    return normalize_whitespace(clean_text)


def remove_dangerous_blocks(html_content: str) -> str:
    """
    Remove script-like elements together with their contents.

    The allow-list cleaner only drops the tags themselves and would keep the
    text between them, so these blocks are cut out first. Each pass peels one
    layer of nested payloads such as ``<scr<script></script>ipt>``; content
    still holding a block after ``MAX_DANGEROUS_BLOCK_PASSES`` passes is cut
    off where that block starts.
    """
    for _ in range(MAX_DANGEROUS_BLOCK_PASSES):
        html_content, removed = DANGEROUS_BLOCK_REGEX.subn('', html_content)
        if not removed:
            return html_content

    leftover = DANGEROUS_BLOCK_REGEX.search(html_content)
    if leftover:
        html_content = html_content[:leftover.start()]
    return html_content


def sanitize_html(html_content: str,
                  allowed_tags: Optional[Iterable[str]] = None,
                  allowed_attributes: Optional[Dict[str, List[str]]] = None,
                  allowed_protocols: Optional[Iterable[str]] = None,
                  strip_comments: bool = True) -> str:
    """
    Sanitize HTML content to prevent XSS attacks and ensure safe rendering.

    Markup outside the allow-list is stripped, script and style blocks are
    removed with their contents, event handler attributes are dropped because
    they are never allow-listed, and links using protocols outside
    ``allowed_protocols`` (such as ``javascript:``) lose their ``href``.

    Args:
        html_content: The HTML content to sanitize
        allowed_tags: Allowed HTML tags (defaults to the configured blog set)
        allowed_attributes: Dictionary mapping tags to allowed attributes
        allowed_protocols: URL schemes allowed in href/src attributes
        strip_comments: Whether to remove HTML comments

    Returns:
        Sanitized HTML content safe for rendering
    """
    if not html_content:
        return ""

    if allowed_tags is None:
        allowed_tags = DEFAULT_SANITIZER_ALLOWED_TAGS

    if allowed_attributes is None:
        allowed_attributes = DEFAULT_SANITIZER_ALLOWED_ATTRIBUTES

    if allowed_protocols is None:
        allowed_protocols = DEFAULT_SANITIZER_ALLOWED_PROTOCOLS

    cleaned = bleach.clean(
        remove_dangerous_blocks(html_content),
        tags=frozenset(allowed_tags),
        attributes={tag: list(attrs) for tag, attrs in allowed_attributes.items()},
        protocols=frozenset(allowed_protocols),
        strip=True,
        strip_comments=strip_comments
    )
    return cleaned.strip()


def normalize_whitespace(text: str) -> str:
    """Collapse runs of whitespace into single spaces."""
    if not text:
        return ""
    return re.sub(r'\s+', ' ', text).strip()


def generate_excerpt(content: str, max_length: int = DEFAULT_EXCERPT_LENGTH,
                     strip_markup: bool = True) -> str:
    """
    Generate a short excerpt from longer content.

    Args:
        content: Source content
        max_length: Maximum excerpt length (default from core_utils_constants)
        strip_markup: Whether to strip HTML markup (default: True)

    Returns:
        Truncated excerpt with proper word boundaries
    """
    if not content:
        return ""

    text = strip_html_tags(content) if strip_markup else normalize_whitespace(content)
    return truncate_text(text, max_length, word_boundary=True)


def count_words(content: str) -> int:
    """Count the words of a piece of HTML or plain text."""
    return len(re.findall(r'\w+', strip_html_tags(content)))


def estimate_reading_time(content: str, words_per_minute: int = DEFAULT_WORDS_PER_MINUTE) -> int:
    """
    Calculate estimated reading time in minutes based on content length.

    Args:
        content: HTML or plain text content
        words_per_minute: Average reading speed in words per minute

    Returns:
        int: Estimated reading time in minutes (minimum 1)
    """
    return max(1, round(count_words(content) / words_per_minute))


def is_valid_email(email: str) -> bool:
    """
    Check if string is a valid email address.

    Args:
        email: String to validate as email address

    Returns:
        True if valid email, False otherwise
    """
    if not email or len(email) > MAX_EMAIL_LENGTH:
        return False

    return bool(EMAIL_REGEX.match(email))


def is_valid_url(url: str) -> bool:
    return bool(url) and bool(URL_REGEX.match(url))


def is_valid_slug(slug: str) -> bool:
    """Lowercase ASCII words joined by single hyphens."""
    return bool(slug) and bool(SLUG_REGEX.match(slug))


def is_valid_hex_color(color: str) -> bool:
    """Check if string is a ``#rrggbb`` color."""
    return bool(color) and bool(HEX_COLOR_REGEX.match(color))
