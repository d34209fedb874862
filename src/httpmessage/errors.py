"""httpmessage exception hierarchy.

Shared by the value objects, parsers, and environment adapters so every
module raises and catches the same types.
"""


class HttpMessageError(Exception):
    """Base for all httpmessage errors."""


class ConfigurationError(HttpMessageError):
    """Raised when configuration is invalid or an optional dependency is missing."""


class InvalidArgumentError(HttpMessageError, ValueError):
    """A constructor or ``with_*`` method received a value it does not accept."""


class InvalidSchemeError(InvalidArgumentError):
    """The URI scheme is not one of ``""``, ``"http"`` or ``"https"``."""


class InvalidHostNameError(InvalidArgumentError):
    """The URI host is not a syntactically valid hostname."""


class InvalidVersionError(InvalidArgumentError):
    """The HTTP protocol version is not one of ``1.0``, ``1.1`` or ``2.0``."""


class MissingHeaderError(HttpMessageError, LookupError):
    """No header matches the requested name (case-insensitively)."""


class MissingContentError(HttpMessageError):
    """A parser was asked to parse without a content stream."""


class ParsingError(HttpMessageError):
    """A parser could not deserialize its content."""
