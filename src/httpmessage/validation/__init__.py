"""Named validation predicates.

Usage::

    from httpmessage.validation import is_valid

    if not is_valid("hostname", host):
        raise InvalidHostNameError(...)

Predicates are looked up by name. An unknown name is a programming error
and raises ``InvalidArgumentError`` rather than silently passing.
"""

from __future__ import annotations

from types import MappingProxyType

from httpmessage.errors import InvalidArgumentError
from httpmessage.validation.rules import (
    HTTP_METHODS,
    Predicate,
    header_value,
    hostname,
    http_method,
    key_value_mapping,
    status_code,
    url,
)

__all__ = [
    "HTTP_METHODS",
    "VALIDATORS",
    "Predicate",
    "get_validator",
    "header_value",
    "hostname",
    "http_method",
    "is_valid",
    "key_value_mapping",
    "status_code",
    "url",
]

VALIDATORS: MappingProxyType[str, Predicate] = MappingProxyType(
    {
        "hostname": hostname,
        "url": url,
        "http_method": http_method,
        "status_code": status_code,
        "header_value": header_value,
        "key_value_mapping": key_value_mapping,
    }
)


def get_validator(name: str) -> Predicate:
    """Return the predicate registered under *name*.

    Raises:
        InvalidArgumentError: If no predicate has that name.
    """
    try:
        return VALIDATORS[name]
    except (KeyError, TypeError):
        msg = f"Unknown validator {name!r}. Known validators: {', '.join(sorted(VALIDATORS))}"
        raise InvalidArgumentError(msg) from None


def is_valid(validator: str | Predicate, value: object) -> bool:
    """Run a predicate, given by name or as a callable, against *value*."""
    check = validator if callable(validator) else get_validator(validator)
    return check(value)
