"""
Text sanitization helpers.

Strips control and markup-significant characters from third-party text
and derives slugs and human-readable labels.
"""

import re
from typing import Optional

import config.settings as settings

CONTROL_CHARACTERS = re.compile(r"[\u0000-\u001F\u007F]")
HTML_DANGEROUS_CHARS = re.compile(r"[<>\"'`]")
NON_ALPHANUMERIC_RUN = re.compile(r"[^a-z0-9]+")
WORD_START = re.compile(r"\b\w")


def sanitize_text(value) -> Optional[str]:
    """
    Clean a free-text field.

    Returns None for anything that is not a string or that is empty once
    trimmed and stripped of unsafe characters.
    """
    if not isinstance(value, str):
        return None

    trimmed = value.strip()
    if not trimmed:
        return None

    cleaned = HTML_DANGEROUS_CHARS.sub("", CONTROL_CHARACTERS.sub("", trimmed)).strip()
    return cleaned or None


def sanitize_or_default(value, fallback: str) -> str:
    """Sanitize value, substituting fallback when nothing usable remains."""
    cleaned = sanitize_text(value)
    return cleaned if cleaned is not None else fallback


def slugify(value) -> str:
    """Lower-case, hyphen-separated, URL-safe slug."""
    base = sanitize_or_default(value, settings.DEFAULT_LISTING_SLUG).lower()
    slug = NON_ALPHANUMERIC_RUN.sub("-", base).strip("-")
    return slug or settings.DEFAULT_LISTING_SLUG


def humanize_key(key: str) -> str:
    """cleanliness -> Cleanliness, check_in -> Check In."""
    spaced = key.replace("_", " ")
    return WORD_START.sub(lambda match: match.group(0).upper(), spaced)
