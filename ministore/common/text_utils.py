"""
Text Utilities

Helper functions for handles, categories, filenames, prices and timestamps.
"""

import re
from datetime import datetime, timezone
from pathlib import PurePath
from typing import Optional

_WHITESPACE_RE = re.compile(r'\s+')


def normalize_handle(handle: str) -> str:
    """
    Normalize a store handle for use in the public link.

    Example:
        >>> normalize_handle("My Cool  Shop")
        'my-cool-shop'
    """
    return _WHITESPACE_RE.sub('-', handle.strip().lower())


def normalize_category(category: Optional[str]) -> Optional[str]:
    """Lowercase and trim a category. None stays None, blank becomes ''."""
    if category is None:
        return None
    return category.strip().lower()


def strip_extension(filename: str) -> str:
    """
    Derive a product name from an uploaded filename.

    Example:
        >>> strip_extension("photos/red shirt.JPG")
        'red shirt'
    """
    name = PurePath(filename).name
    stem, dot, _ = name.rpartition('.')
    return stem if dot and stem else name


def format_price(price: float) -> str:
    """Render a price without a trailing '.0' for whole amounts."""
    if float(price).is_integer():
        return str(int(price))
    return str(float(price))


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(moment: datetime) -> str:
    """Format a datetime as ISO 8601 UTC with milliseconds and a Z suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO 8601 timestamp into an aware UTC datetime.

    Returns None for missing or unparseable values. Naive values are
    taken as UTC.
    """
    if not value:
        return None
    text = value.strip()
    if text.endswith(('Z', 'z')):
        text = text[:-1] + '+00:00'
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
