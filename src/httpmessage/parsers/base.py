"""Parser protocol and shared base class.

A parser turns a body stream into structured data: ``None``, a mapping, or
an object. Parsers are configured fluently::

    data = UrlEncodedParser().set_content(request.body).parse()
"""

from collections.abc import Iterator
from typing import Any, Protocol, Self, runtime_checkable

from httpmessage.errors import MissingContentError
from httpmessage.http.stream import BodyStream


@runtime_checkable
class Parser(Protocol):
    """Structural interface of every body parser."""

    def set_content(self, content: BodyStream) -> Self: ...

    def parse(self) -> Any:
        """Deserialize the configured content.

        Raises:
            MissingContentError: If no content stream was set.
            ParsingError: If the content cannot be deserialized.
        """
        ...


class BaseParser:
    """Common state for the built-in parsers: content type and content stream."""

    __slots__ = ("_content", "content_type")

    def __init__(self, content_type: str = "") -> None:
        self.content_type = content_type
        self._content: BodyStream | None = None

    def set_content(self, content: BodyStream) -> Self:
        """Set the stream to parse. Returns the parser for chaining."""
        self._content = content
        return self

    def _require_content(self) -> BodyStream:
        if self._content is None:
            msg = f"{type(self).__name__} has no content to parse; call set_content() first"
            raise MissingContentError(msg)
        return self._content

    def _read_content(self) -> bytes:
        """The full content of the configured stream."""
        return self._require_content().get_contents()

    def _read_chunks(self, size: int) -> Iterator[bytes]:
        """The configured stream from its first byte, *size* bytes at a time."""
        content = self._require_content()
        if content.is_seekable():
            content.seek(0)
        while not content.eof():
            chunk = content.read(size)
            if not chunk:
                break
            yield chunk

    def parse(self) -> Any:
        raise NotImplementedError
