"""
Core Utility Constants for the Mente Tech blog.

This module centralizes constants used across utility modules within the
core/utils package, providing consistent values for text processing,
validation and formatting.
"""

from typing import Final, FrozenSet

# ============================================================================
# Validation Patterns
# ============================================================================

MAX_EMAIL_LENGTH: Final[int] = 255

# Basic email pattern
EMAIL_PATTERN: Final[str] = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'

# Lowercase ASCII words joined by single hyphens
SLUG_PATTERN: Final[str] = r'^[a-z0-9]+(?:-[a-z0-9]+)*$'

# Display colors such as "#1f6feb"
HEX_COLOR_PATTERN: Final[str] = r'^#[0-9a-fA-F]{6}$'

URL_PATTERN: Final[str] = r'^https?://[^\s/$.?#].[^\s]*$'

# ============================================================================
# Text Processing
# ============================================================================

DEFAULT_EXCERPT_LENGTH: Final[int] = 160
DEFAULT_TRUNCATE_LENGTH: Final[int] = 100
DEFAULT_TRUNCATE_SUFFIX: Final[str] = "..."
DEFAULT_WORDS_PER_MINUTE: Final[int] = 200

# Slug generation
DEFAULT_SLUG_SEPARATOR: Final[str] = "-"
DEFAULT_SLUG_LOWERCASE: Final[bool] = True
DEFAULT_SLUG_STRIP_DIACRITICS: Final[bool] = True
MAX_SLUG_LENGTH: Final[int] = 200

# Elements removed together with their contents before allow-list cleaning
DANGEROUS_CONTENT_TAGS: Final[FrozenSet[str]] = frozenset(['script', 'style', 'iframe', 'object', 'embed', 'noscript'])
# Removal passes before a still-nested payload is cut off at its first opener
MAX_DANGEROUS_BLOCK_PASSES: Final[int] = 8
