"""Built-in validation predicates.

Each predicate is a callable with the signature::

    def rule(value: Any) -> bool:
        '''Return True when *value* is acceptable.'''

Predicates never raise; callers decide which error to surface.
"""

import re
from collections.abc import Callable, Mapping
from typing import Any, TypeAlias
from urllib.parse import urlsplit

from httpmessage.http.status import REASON_PHRASES

# Type alias for a validation predicate
Predicate: TypeAlias = Callable[[Any], bool]

HTTP_METHODS: frozenset[str] = frozenset(
    {
        "GET",
        "POST",
        "PUT",
        "DELETE",
        "HEAD",
        "OPTIONS",
        "TRACE",
        "CONNECT",
        "PATCH",
        "PROPFIND",
    }
)

_HOSTNAME_CHARS = re.compile(r"^([a-z\d](-*[a-z\d])*)(\.([a-z\d](-*[a-z\d])*))*$", re.IGNORECASE)
_HOSTNAME_LABELS = re.compile(r"^[^.]{1,63}(\.[^.]{1,63})*$")


# ---------------------------------------------------------------------------
# URI parts
# ---------------------------------------------------------------------------


def hostname(value: Any) -> bool:
    """Dot-separated labels of letters, digits and inner hyphens.

    At most 253 characters overall and 63 per label.
    """
    if not isinstance(value, str) or not 1 <= len(value) <= 253:
        return False
    return bool(_HOSTNAME_CHARS.fullmatch(value) and _HOSTNAME_LABELS.fullmatch(value))


def url(value: Any) -> bool:
    """An absolute URL with both a scheme and a network location."""
    if not isinstance(value, str) or any(c.isspace() for c in value):
        return False
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    return bool(parts.scheme and parts.netloc)


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------


def http_method(value: Any) -> bool:
    """A known request method, compared case-insensitively."""
    return isinstance(value, str) and value.upper() in HTTP_METHODS


def status_code(value: Any) -> bool:
    """An integer status code with a recommended reason phrase."""
    return isinstance(value, int) and not isinstance(value, bool) and value in REASON_PHRASES


def header_value(value: Any) -> bool:
    """A string, or a non-empty list or tuple made only of strings."""
    if isinstance(value, str):
        return True
    if not isinstance(value, (list, tuple)) or not value:
        return False
    return all(isinstance(item, str) for item in value)


def key_value_mapping(value: Any) -> bool:
    """A flat mapping whose keys and values are all strings."""
    if not isinstance(value, Mapping):
        return False
    return all(isinstance(k, str) and isinstance(v, str) for k, v in value.items())
