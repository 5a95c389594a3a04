"""Title and date normalization helpers."""

import re
from datetime import datetime
from typing import Optional


INVALID_DATE = "Invalid Date"
CANONICAL_DATE_FORMAT = "%Y-%m-%d %H:%M:%S +0000"
DIRECTIVE_MARKER = "Originally Published"

_WHITESPACE = re.compile(r"\s+")
_NON_SLUG_CHARS = re.compile(r"[^a-zA-Z0-9-]")
_TITLE_DATE_PREFIX = re.compile(r"^\d{4}-\d{2}\s*")
_EMBEDDED_DATE = re.compile(
    DIRECTIVE_MARKER + r":\s*(\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2} \+\d{4})"
)


def slugify(title: str) -> str:
    """
    Turn a free-text title into a filesystem-safe slug.

    Whitespace runs become a single hyphen, anything outside [a-zA-Z0-9-]
    is dropped, and the result is lowercased. A title without any
    alphanumeric character yields an empty slug.
    """
    slug = _WHITESPACE.sub("-", title)
    slug = _NON_SLUG_CHARS.sub("", slug)
    return slug.lower()


def canonicalize_date(raw_timestamp: str) -> str:
    """
    Render a source timestamp as ``YYYY-MM-DD HH:MM:SS +0000``.

    EXIF-like ``YYYY:MM:DD`` separators are converted to hyphens and only the
    calendar date is kept. The fields are rendered as parsed, with a literal
    +0000 marker, since the source timezone is unknown.

    Returns:
        The canonical date, or INVALID_DATE if the input cannot be parsed
    """
    if not raw_timestamp:
        return INVALID_DATE
    date_part = raw_timestamp.strip().replace(":", "-")[:10]
    try:
        parsed = datetime.strptime(date_part, "%Y-%m-%d")
    except ValueError:
        return INVALID_DATE
    return parsed.strftime(CANONICAL_DATE_FORMAT)


def is_valid_date(value: Optional[str]) -> bool:
    return bool(value) and value != INVALID_DATE


def strip_date_prefix(title: str) -> str:
    """Remove a leading ``YYYY-MM`` sort prefix from an album title."""
    return _TITLE_DATE_PREFIX.sub("", title)


def extract_embedded_date(description: str) -> Optional[str]:
    """Return the date of an ``Originally Published:`` directive, if any."""
    match = _EMBEDDED_DATE.search(description or "")
    return match.group(1) if match else None


def strip_directive(description: str) -> str:
    """Drop every directive line, whether or not its date is well formed."""
    lines = (description or "").split("\n")
    return "\n".join(line for line in lines if DIRECTIVE_MARKER not in line)


def split_description(description: str) -> tuple[str, str]:
    """
    Split a description into its first line and the trimmed remainder.

    An empty description gives two empty strings.
    """
    first_line = description.split("\n", 1)[0]
    body = description[len(first_line):].strip()
    return first_line, body
