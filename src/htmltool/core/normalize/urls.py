"""
Location classification and attribute URL normalization.
"""

from __future__ import annotations

import re
from urllib.parse import urlsplit


URL_PREFIXES = ("http:", "https:")

# Attributes whose values are rewritten to absolute URLs on HTTP(S) origins
URL_ATTRIBUTES = frozenset({"src", "href"})

SCHEME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")
CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


def is_url(location: str) -> bool:
    """Check whether an input location is an HTTP(S) URL rather than a path.

    Only the prefix is checked; malformed URLs still count as URLs.
    """
    return location.lower().startswith(URL_PREFIXES)


def is_absolute_uri(value: str) -> bool:
    """Check whether a value is an absolute URI with a scheme.

    Values such as ``https://a/b``, ``mailto:x@y`` or ``javascript:void(0)``
    are absolute; ``a.png``, ``#top``, ``?q=1`` and ``1x:y`` are not.
    """
    if CONTROL_CHARS.search(value) or not SCHEME_PATTERN.match(value):
        return False
    try:
        urlsplit(value)
    except ValueError:
        return False
    return True


def _origin_parts(origin: str) -> tuple[str, str, str]:
    """Split an origin URL into (scheme, host[:port], path)."""
    parts = urlsplit(origin)
    host = parts.netloc.rpartition("@")[2]
    return parts.scheme, host, parts.path


def normalize_attribute_url(value: str, origin: str) -> str:
    """Make a src/href value absolute against the document's origin URL.

    - ``//cdn/a.png`` becomes ``https://cdn/a.png``
    - ``/img/a.png`` becomes ``scheme://host/img/a.png``
    - absolute URIs are returned unchanged
    - anything else is appended to the origin's scheme, host and full path,
      filename included: ``a.png`` on ``https://h/dir/page.html`` becomes
      ``https://h/dir/page.htmla.png``. No dot-segment resolution happens.

    Args:
        value: Raw attribute value (non-empty)
        origin: HTTP(S) URL the document was fetched from

    Returns:
        Normalized URL string
    """
    if value.startswith("//"):
        return "https:" + value

    try:
        scheme, host, path = _origin_parts(origin)
    except ValueError:
        return value

    if value.startswith("/"):
        return f"{scheme}://{host}{value}"

    if is_absolute_uri(value):
        return value

    return f"{scheme}://{host}{path}{value}"
