"""Text processing utilities shared across services."""

import re


def slugify(text: str, fallback: str = "user") -> str:
    """
    Convert text to a filesystem-safe slug.

    Word characters (including CJK) are kept; everything else collapses to
    a single underscore.
    """
    text = re.sub(r"[^\w]+", "_", text.strip())
    text = text.strip("_")
    return text[:50] if text else fallback


def truncate_text(text: str, max_length: int = 100, suffix: str = "...") -> str:
    """Truncate text to a maximum length with a suffix."""
    if len(text) <= max_length:
        return text
    return text[:max_length - len(suffix)] + suffix
