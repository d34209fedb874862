"""Immutable server-side HTTP request.

Everything the hosting server reported about the inbound request: server
parameters, cookies, query string, uploads and the parsed body, plus an
attribute bag for values derived while handling it (route matches,
decoded sessions...).

Server parameters and uploads are ground truth and have no ``with_*``
method. Cookies, query parameters, parsed body and attributes can be
replaced, always on a copy.
"""

import logging
import tempfile
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Literal, Self, TypeAlias

from httpmessage._internal.asgi import Receive, Scope
from httpmessage.config import EnvironmentConfig
from httpmessage.environment.headers import ServerHeaders
from httpmessage.environment.snapshot import EnvironmentSnapshot
from httpmessage.environment.uri import ServerRequestUri
from httpmessage.errors import InvalidArgumentError
from httpmessage.http.message import PROTOCOL_VERSIONS
from httpmessage.http.request import Request
from httpmessage.http.stream import Stream
from httpmessage.parsers.factory import ParserFactory, default_factory
from httpmessage.parsers.multipart import MultipartParser
from httpmessage.validation import is_valid

logger = logging.getLogger("httpmessage.environment")

ParamSource: TypeAlias = Literal["server", "query", "cookie", "body", "files", "attribute"]

_SCALARS = (str, bytes, bytearray, int, float, complex)


def _frozen(mapping: Mapping[str, Any]) -> MappingProxyType[str, Any]:
    """A read-only view over a private copy of *mapping*."""
    return MappingProxyType(dict(mapping))


def _empty() -> MappingProxyType[str, Any]:
    return MappingProxyType({})


@dataclass(frozen=True, slots=True)
class ServerRequest(Request):
    """An inbound request, captured once from the server environment.

    Build one per request, then derive copies::

        request = ServerRequest.from_wsgi(environ)
        request = request.with_attribute("user", user)
        request.get_param("query", "page", "1")
    """

    server_params: Mapping[str, Any] = field(default_factory=_empty)
    cookie_params: Mapping[str, str] = field(default_factory=_empty)
    query_params: Mapping[str, str] = field(default_factory=_empty)
    file_params: Mapping[str, Any] = field(default_factory=_empty)
    parsed_body: Any = None
    attributes: Mapping[str, Any] = field(default_factory=_empty)

    def __post_init__(self) -> None:
        for name in ("server_params", "cookie_params", "query_params", "file_params", "attributes"):
            value = getattr(self, name)
            if not isinstance(value, MappingProxyType):
                object.__setattr__(self, name, _frozen(value))

    # -- Factory --

    @classmethod
    def from_environment(
        cls,
        snapshot: EnvironmentSnapshot,
        *,
        config: EnvironmentConfig | None = None,
        parsers: ParserFactory | None = None,
    ) -> Self:
        """Build the request from a snapshot of the server environment.

        Headers, method, protocol version, URI and request-target are derived
        here and never again. The raw body is copied into a spooled temporary
        file owned by the request and parsed eagerly.

        Raises:
            ParsingError: If the body does not match its content type.
        """
        config = config or EnvironmentConfig()
        parsers = parsers or default_factory
        body_file = tempfile.SpooledTemporaryFile(max_size=config.spool_max_size, mode="w+b")  # noqa: SIM115
        try:
            body_file.write(snapshot.body)
            body_file.seek(0)
            request = cls._capture(snapshot, Stream(body_file), config, parsers)
        except BaseException:
            body_file.close()
            raise
        return request

    @classmethod
    def _capture(
        cls,
        snapshot: EnvironmentSnapshot,
        body: Stream,
        config: EnvironmentConfig,
        parsers: ParserFactory,
    ) -> Self:
        server = snapshot.server
        uri_detector = ServerRequestUri(server, config)
        request = cls(
            body=body,
            _headers=ServerHeaders.get(server, snapshot.headers_callback),
            server_params=_frozen(server),
            cookie_params=_frozen(snapshot.cookies),
            query_params=_frozen(snapshot.query),
            file_params=_frozen(snapshot.files),
            uri=uri_detector.get_uri(),
            _target=uri_detector.get_request_uri(),
        )

        method = server.get("REQUEST_METHOD")
        if method:
            request = replace(request, method=method)
        version = str(server.get("SERVER_PROTOCOL", "")).removeprefix("HTTP/")
        if version in PROTOCOL_VERSIONS:
            request = replace(request, protocol_version=version)

        parser = parsers.parser_for(request)
        parsed = parser.set_content(body).parse()
        body.rewind()
        logger.debug("%s %s parsed with %s", request.method, request.get_request_target(), type(parser).__name__)
        if isinstance(parser, MultipartParser) and parser.files and not snapshot.files:
            # Uploads the server did not report come from the multipart body
            return replace(request, parsed_body=parsed, file_params=_frozen(parser.files))
        return replace(request, parsed_body=parsed)

    @classmethod
    def from_wsgi(cls, environ: Mapping[str, Any], **kwargs: Any) -> Self:
        """Build the request from a WSGI environ."""
        headers_callback = kwargs.pop("headers_callback", None)
        snapshot = EnvironmentSnapshot.from_wsgi(environ, headers_callback=headers_callback)
        return cls.from_environment(snapshot, **kwargs)

    @classmethod
    async def from_asgi(cls, scope: Scope, receive: Receive, **kwargs: Any) -> Self:
        """Build the request from an ASGI HTTP scope and receive callable."""
        headers_callback = kwargs.pop("headers_callback", None)
        snapshot = await EnvironmentSnapshot.from_asgi(scope, receive, headers_callback=headers_callback)
        return cls.from_environment(snapshot, **kwargs)

    # -- Convenience accessors --

    @property
    def base_path(self) -> str:
        """The application mount point, ``"/"`` at the server root."""
        return ServerRequestUri(self.server_params).get_base_path()

    def matches_method(self, method: str) -> bool:
        """True if the request method is *method*, ignoring case. Non-strings never match."""
        if not isinstance(method, str) or not isinstance(self.method, str):
            return False
        return self.method.upper() == method.upper()

    def get_param(self, source: ParamSource, name: str, default: Any = None) -> Any:
        """A single value from one of the request's parameter bags.

        *source* is ``"server"``, ``"query"``, ``"cookie"``, ``"body"``,
        ``"files"`` or ``"attribute"``. Object bodies are read by attribute.
        """
        if source == "body":
            body = self.parsed_body
            if body is None:
                return default
            if isinstance(body, Mapping):
                return body.get(name, default)
            return getattr(body, name, default)
        bags: dict[str, Mapping[str, Any]] = {
            "server": self.server_params,
            "query": self.query_params,
            "cookie": self.cookie_params,
            "files": self.file_params,
            "attribute": self.attributes,
        }
        try:
            bag = bags[source]
        except KeyError:
            msg = f"Unknown parameter source {source!r}"
            raise InvalidArgumentError(msg) from None
        return bag.get(name, default)

    def get_attribute(self, name: str, default: Any = None) -> Any:
        """The attribute *name*, or *default* when it is not set."""
        return self.attributes.get(name, default)

    # -- Chainable transformations --

    def with_cookie_params(self, cookies: Mapping[str, str]) -> Self:
        """Return a copy with *cookies*, a flat ``str → str`` mapping."""
        if not is_valid("key_value_mapping", cookies):
            msg = "Trying to create a request with invalid cookie parameters"
            raise InvalidArgumentError(msg)
        return replace(self, cookie_params=_frozen(cookies))

    def with_query_params(self, query: Mapping[str, str]) -> Self:
        """Return a copy with *query*, a flat ``str → str`` mapping.

        The URI and server parameters are left untouched.
        """
        if not is_valid("key_value_mapping", query):
            msg = "Trying to create a request with invalid query parameters"
            raise InvalidArgumentError(msg)
        return replace(self, query_params=_frozen(query))

    def with_parsed_body(self, data: Any) -> Self:
        """Return a copy with *data* as the parsed body.

        Only None, a mapping, or a structured object is accepted.
        """
        if data is not None and isinstance(data, _SCALARS):
            msg = "Request parsed data can only be a mapping, an object or None"
            raise InvalidArgumentError(msg)
        return replace(self, parsed_body=data)

    def with_attribute(self, name: str, value: Any) -> Self:
        """Return a copy where attribute *name* is *value*."""
        return replace(self, attributes=MappingProxyType({**self.attributes, name: value}))

    def without_attribute(self, name: str) -> Self:
        """Return a copy without attribute *name*. Missing names are ignored."""
        if name not in self.attributes:
            return replace(self)
        remaining = {k: v for k, v in self.attributes.items() if k != name}
        return replace(self, attributes=MappingProxyType(remaining))
