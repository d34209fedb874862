"""Immutable HTTP message base.

Protocol version, headers, and body shared by ``Request`` and ``Response``.
Every ``.with_*()`` call returns a new message; the receiver never changes.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Self

from httpmessage._internal.types import HeaderValue
from httpmessage.errors import InvalidArgumentError, InvalidVersionError, MissingHeaderError
from httpmessage.http.headers import HeaderBag
from httpmessage.http.stream import BodyStream
from httpmessage.validation import is_valid

PROTOCOL_VERSIONS: frozenset[str] = frozenset({"1.0", "1.1", "2.0"})


def _check_header(name: Any, value: Any) -> None:
    if not isinstance(name, str):
        msg = "The header name can only be a string"
        raise InvalidArgumentError(msg)
    if not is_valid("header_value", value):
        msg = f"The header value for {name} can only be a string or a non-empty list of strings."
        raise InvalidArgumentError(msg)


@dataclass(frozen=True, slots=True)
class Message:
    """An HTTP message: protocol version, headers and a body stream.

    Header names are matched case-insensitively; the casing of the latest
    ``with_header`` call is what ``headers`` reports. Copies share the body
    stream, they do not duplicate it.
    """

    protocol_version: str = "1.1"
    body: BodyStream | None = None

    # Private: stored headers (``headers`` may add derived entries)
    _headers: HeaderBag = field(default_factory=HeaderBag)

    # -- Headers --

    @property
    def headers(self) -> HeaderBag:
        """All headers, keyed by name as stored."""
        return self._headers

    def has_header(self, name: str) -> bool:
        """True if a header matches *name*, ignoring case."""
        return name in self.headers

    def get_header_lines(self, name: str) -> list[str]:
        """All values of header *name*.

        Raises:
            InvalidArgumentError: If *name* is not a string.
            MissingHeaderError: If no header matches *name*.
        """
        if not isinstance(name, str):
            msg = "The header name can only be a string"
            raise InvalidArgumentError(msg)
        try:
            return self.headers[name]
        except KeyError:
            msg = f"The header {name!r} does not exist in the HTTP message."
            raise MissingHeaderError(msg) from None

    def get_header(self, name: str) -> str:
        """All values of header *name*, joined with ``", "``."""
        return ", ".join(self.get_header_lines(name))

    # -- Chainable transformations --

    def with_protocol_version(self, version: str) -> Self:
        """Return a copy speaking HTTP *version* (``"1.0"``, ``"1.1"`` or ``"2.0"``)."""
        if not isinstance(version, str) or version not in PROTOCOL_VERSIONS:
            msg = f"{version!r} is not a valid HTTP protocol version."
            raise InvalidVersionError(msg)
        return replace(self, protocol_version=version)

    def with_header(self, name: str, value: HeaderValue) -> Self:
        """Return a copy where header *name* holds only *value*.

        Any existing header with the same name in another casing is dropped
        and *name* is stored exactly as given.
        """
        _check_header(name, value)
        return replace(self, _headers=self._headers.with_header(name, value))

    def with_added_header(self, name: str, value: HeaderValue) -> Self:
        """Return a copy with *value* appended to header *name*.

        Values join the existing entry under its stored casing.
        """
        _check_header(name, value)
        return replace(self, _headers=self._headers.with_added_header(name, value))

    def without_header(self, name: str) -> Self:
        """Return a copy without header *name*. Missing headers are ignored."""
        return replace(self, _headers=self._headers.without_header(name))

    def with_body(self, body: BodyStream) -> Self:
        """Return a copy whose body is *body*."""
        if not isinstance(body, BodyStream):
            msg = f"The body must be a stream, got {type(body).__name__}"
            raise InvalidArgumentError(msg)
        return replace(self, body=body)
