"""
URL validation and normalization for analysis targets.
"""

import re
from urllib.parse import urlparse, urlunparse

from geotest.core.errors import InvalidURLError

_PRIVATE_HOST = re.compile(r"^(10\.|172\.(1[6-9]|2[0-9]|3[0-1])\.|192\.168\.)")


def validate_url(url: str) -> str:
    """
    Normalize a user-supplied URL.

    Adds ``https://`` when no scheme is given and rejects non-HTTP schemes,
    localhost and private network hosts.

    Returns:
        Sanitized URL

    Raises:
        InvalidURLError: If the URL is missing or not analyzable
    """
    if not url or not url.strip():
        raise InvalidURLError("URL is required")

    normalized = url.strip()
    if not re.match(r"^https?://", normalized, re.IGNORECASE):
        if "://" in normalized:
            raise InvalidURLError("URL must use HTTP or HTTPS protocol")
        normalized = f"https://{normalized}"

    try:
        parsed = urlparse(normalized)
        host = parsed.hostname or ""
    except ValueError:
        # unbalanced IPv6 brackets and similar netloc errors
        raise InvalidURLError("Invalid URL format")
    if parsed.scheme.lower() not in ("http", "https"):
        raise InvalidURLError("URL must use HTTP or HTTPS protocol")

    if not host or " " in host:
        raise InvalidURLError("Invalid URL format")
    if host == "localhost" or _PRIVATE_HOST.match(host):
        raise InvalidURLError("Cannot analyze local or private network URLs")

    return urlunparse((parsed.scheme.lower(), parsed.netloc, parsed.path, parsed.params, parsed.query, parsed.fragment))
