"""Request body parsers.

Usage::

    from httpmessage.parsers import parser_for

    data = parser_for(request).set_content(request.body).parse()

URL-encoded bodies are parsed by default. JSON and multipart parsers ship
ready to ``register``; multipart needs ``pip install httpmessage[forms]``.
"""

from httpmessage.parsers.base import BaseParser, Parser
from httpmessage.parsers.builtin import JsonParser, NullParser, UrlEncodedParser
from httpmessage.parsers.factory import (
    DEFAULT_PARSERS,
    ParserFactory,
    default_factory,
    media_type,
    parser_for,
)
from httpmessage.parsers.multipart import UPLOAD_ERR_NO_FILE, UPLOAD_ERR_OK, MultipartParser, UploadedFile

__all__ = [
    "DEFAULT_PARSERS",
    "UPLOAD_ERR_NO_FILE",
    "UPLOAD_ERR_OK",
    "BaseParser",
    "JsonParser",
    "MultipartParser",
    "NullParser",
    "Parser",
    "ParserFactory",
    "UploadedFile",
    "UrlEncodedParser",
    "default_factory",
    "media_type",
    "parser_for",
]
