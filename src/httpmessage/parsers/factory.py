"""Content-type to parser dispatch.

``ParserFactory`` maps media types (``type/subtype``, parameters ignored)
to parser classes. Requests whose media type has no entry get a
``NullParser``; explicit ``lookup`` of an unknown type is an error.

Factories are immutable. ``register`` returns a new factory::

    factory = ParserFactory().register("application/json", JsonParser)
    body = factory.parser_for(request).set_content(request.body).parse()
"""

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Self

from httpmessage.errors import InvalidArgumentError
from httpmessage.parsers.base import BaseParser
from httpmessage.parsers.builtin import NullParser, UrlEncodedParser

logger = logging.getLogger("httpmessage.parsers")

DEFAULT_PARSERS: MappingProxyType[str, type[BaseParser]] = MappingProxyType(
    {
        "application/x-www-form-urlencoded": UrlEncodedParser,
    }
)


def media_type(content_type: str | None) -> str:
    """``"Text/HTML; charset=utf-8"`` → ``"text/html"``."""
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


class ParserFactory:
    """Immutable media type → parser class table."""

    __slots__ = ("_default", "_map")

    def __init__(
        self,
        parsers: Mapping[str, type[BaseParser]] = DEFAULT_PARSERS,
        default: type[BaseParser] = NullParser,
    ) -> None:
        self._map = MappingProxyType({media_type(k): v for k, v in parsers.items()})
        self._default = default

    @property
    def parsers(self) -> Mapping[str, type[BaseParser]]:
        """The registered media types and their parser classes."""
        return self._map

    def register(self, content_type: str, parser: type[BaseParser]) -> Self:
        """Return a new factory that also maps *content_type* to *parser*."""
        key = media_type(content_type)
        if not key:
            msg = "Cannot register a parser for an empty content type"
            raise InvalidArgumentError(msg)
        return type(self)({**self._map, key: parser}, self._default)

    def lookup(self, content_type: str) -> type[BaseParser]:
        """The parser class registered for *content_type*.

        Raises:
            InvalidArgumentError: If nothing is registered for it.
        """
        try:
            return self._map[media_type(content_type)]
        except KeyError:
            msg = f"No parser registered for content type {content_type!r}"
            raise InvalidArgumentError(msg) from None

    def create(self, content_type: str | None) -> BaseParser:
        """A parser for *content_type*, falling back to the default parser."""
        parser_cls = self._map.get(media_type(content_type), self._default)
        logger.debug("Parser for %r: %s", content_type, parser_cls.__name__)
        return parser_cls(content_type or "")

    def parser_for(self, request: Any) -> BaseParser:
        """A parser chosen by the ``Content-Type`` header of *request*."""
        content_type = request.get_header("Content-Type") if request.has_header("Content-Type") else None
        return self.create(content_type)


default_factory = ParserFactory()


def parser_for(request: Any) -> BaseParser:
    """Shorthand for ``default_factory.parser_for(request)``."""
    return default_factory.parser_for(request)
