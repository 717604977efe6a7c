"""Helper utilities.

Functions:
    is_valid_url(url: str) -> bool
        Check that a string is a syntactically well-formed absolute URL
    utcnow() -> datetime
        Current time as an aware UTC datetime

Example:
    >>> from shorty.utils.helpers import is_valid_url
    >>> is_valid_url('https://example.com/a?b=c')
    True
    >>> is_valid_url('example.com')
    False
"""

from datetime import datetime, UTC
from urllib.parse import urlsplit


def is_valid_url(url: str) -> bool:
    """Check that url parses as an absolute URL.

    A URL is accepted when it has a scheme and a network location and contains
    no whitespace. Reachability is never checked.

    Args:
        url (str): candidate URL

    Returns:
        bool: True if the URL is well-formed.
    """
    if not isinstance(url, str) or not url or any(char.isspace() for char in url):
        return False

    try:
        parts = urlsplit(url)
        # Accessing .port validates the port component
        parts.port
    except ValueError:
        return False

    return bool(parts.scheme) and bool(parts.netloc)


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(UTC)
