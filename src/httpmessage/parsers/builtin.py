"""Built-in body parsers for stdlib-decodable content types."""

import json
from typing import Any
from urllib.parse import parse_qsl

from httpmessage.errors import ParsingError
from httpmessage.parsers.base import BaseParser


class NullParser(BaseParser):
    """Used when no parser is registered for the content type. Always None."""

    __slots__ = ()

    def parse(self) -> None:
        return None


class UrlEncodedParser(BaseParser):
    """``application/x-www-form-urlencoded`` bodies as a flat ``dict[str, str]``.

    A repeated field keeps its last value, as form decoding does on most
    servers. An empty body parses to an empty dict.
    """

    __slots__ = ()

    def parse(self) -> dict[str, str]:
        raw = self._read_content()
        try:
            text = raw.decode("utf-8")
            return dict(parse_qsl(text, keep_blank_values=True, strict_parsing=False))
        except (UnicodeDecodeError, ValueError) as exc:
            msg = f"Cannot decode URL-encoded body: {exc}"
            raise ParsingError(msg) from exc


class JsonParser(BaseParser):
    """``application/json`` bodies via the stdlib decoder.

    Scalar documents are rejected: a parsed body is a mapping or a list.
    An empty body parses to None.
    """

    __slots__ = ()

    def parse(self) -> Any:
        raw = self._read_content()
        if not raw.strip():
            return None
        try:
            data = json.loads(raw)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            msg = f"Cannot decode JSON body: {exc}"
            raise ParsingError(msg) from exc
        if not isinstance(data, (dict, list)):
            msg = f"A JSON body must be an object or an array, got {type(data).__name__}"
            raise ParsingError(msg)
        return data
