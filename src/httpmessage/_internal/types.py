"""Shared type aliases used across httpmessage modules."""

from collections.abc import Callable, Mapping, Sequence
from typing import TypeAlias

# A header value as accepted by with_header / with_added_header
HeaderValue: TypeAlias = str | Sequence[str]

# Callable returning the raw request headers from the hosting server
HeadersCallback: TypeAlias = Callable[[], Mapping[str, str]]
