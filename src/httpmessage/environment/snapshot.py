"""Environment snapshots: the raw data a ``ServerRequest`` is built from.

A snapshot holds CGI-style server parameters, cookies, query parameters,
upload metadata and the raw body bytes, captured once per request from a
WSGI environ or an ASGI scope.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Self
from urllib.parse import parse_qsl, quote

from httpmessage._internal.asgi import HTTPScope, Receive, Scope
from httpmessage._internal.types import HeadersCallback


def parse_cookie_header(header: str) -> dict[str, str]:
    """Parse a ``Cookie`` header into a name → value dict.

    The first occurrence of a name wins. Pairs without ``=`` are skipped.
    """
    cookies: dict[str, str] = {}
    for pair in header.split(";"):
        name, sep, value = pair.partition("=")
        name = name.strip()
        if sep and name:
            cookies.setdefault(name, value.strip().strip('"'))
    return cookies


def parse_query_string(query_string: str) -> dict[str, str]:
    """Flat query parameters; a repeated name keeps its last value."""
    return dict(parse_qsl(query_string, keep_blank_values=True))


def _read_wsgi_body(environ: Mapping[str, Any]) -> bytes:
    stream = environ.get("wsgi.input")
    if stream is None:
        return b""
    if environ.get("wsgi.input_terminated"):
        return stream.read()
    try:
        length = int(environ.get("CONTENT_LENGTH") or 0)
    except ValueError:
        length = 0
    return stream.read(length) if length > 0 else b""


def _scope_server_params(http: HTTPScope) -> dict[str, str]:
    """CGI-style parameters equivalent to an ASGI HTTP scope."""
    query_string = http.query_string.decode("latin-1")
    path_info = http.path
    if http.root_path and path_info.startswith(http.root_path):
        path_info = path_info[len(http.root_path) :]
    request_uri = http.raw_path.decode("latin-1") or quote(http.path)
    if query_string:
        request_uri = f"{request_uri}?{query_string}"

    server: dict[str, str] = {
        "REQUEST_METHOD": http.method,
        "REQUEST_SCHEME": http.scheme,
        "REQUEST_URI": request_uri,
        "SCRIPT_NAME": http.root_path,
        "PATH_INFO": path_info,
        "QUERY_STRING": query_string,
        "SERVER_PROTOCOL": f"HTTP/{http.http_version}",
    }
    if http.server is not None:
        host, port = http.server
        server["SERVER_NAME"] = host
        if port is not None:
            server["SERVER_PORT"] = str(port)
    if http.client is not None:
        server["REMOTE_ADDR"], server["REMOTE_PORT"] = http.client[0], str(http.client[1])

    for raw_name, raw_value in http.headers:
        name = raw_name.decode("latin-1").upper().replace("-", "_")
        key = name if name in ("CONTENT_TYPE", "CONTENT_LENGTH") else f"HTTP_{name}"
        value = raw_value.decode("latin-1")
        # Repeated headers fold into one variable, as in CGI
        separator = "; " if key == "HTTP_COOKIE" else ","
        server[key] = f"{server[key]}{separator}{value}" if key in server else value
    return server


@dataclass(frozen=True, slots=True)
class EnvironmentSnapshot:
    """The inbound request as the hosting server reported it.

    ``server`` holds string-valued CGI variables (``REQUEST_METHOD``,
    ``HTTP_*``, ``CONTENT_TYPE``, ``SERVER_NAME``...). ``headers_callback``
    optionally returns the raw request headers, used to recover
    ``Authorization`` when the server withholds it.
    """

    server: Mapping[str, Any] = field(default_factory=dict)
    cookies: Mapping[str, str] = field(default_factory=dict)
    query: Mapping[str, str] = field(default_factory=dict)
    files: Mapping[str, Any] = field(default_factory=dict)
    body: bytes = b""
    headers_callback: HeadersCallback | None = None

    @classmethod
    def from_wsgi(
        cls,
        environ: Mapping[str, Any],
        *,
        headers_callback: HeadersCallback | None = None,
    ) -> Self:
        """Capture a WSGI environ, reading the body from ``wsgi.input``."""
        server = {key: value for key, value in environ.items() if isinstance(value, str)}
        server.setdefault("REQUEST_SCHEME", environ.get("wsgi.url_scheme", "http"))
        if "REQUEST_URI" not in server and "RAW_URI" in server:
            server["REQUEST_URI"] = server["RAW_URI"]
        return cls(
            server=server,
            cookies=parse_cookie_header(server.get("HTTP_COOKIE", "")),
            query=parse_query_string(server.get("QUERY_STRING", "")),
            body=_read_wsgi_body(environ),
            headers_callback=headers_callback,
        )

    @classmethod
    async def from_asgi(
        cls,
        scope: Scope,
        receive: Receive,
        *,
        headers_callback: HeadersCallback | None = None,
    ) -> Self:
        """Capture an ASGI HTTP scope, draining the body from *receive*."""
        http = HTTPScope.from_scope(scope)
        server = _scope_server_params(http)
        chunks: list[bytes] = []
        while True:
            message = await receive()
            chunk = message.get("body", b"")
            if chunk:
                chunks.append(chunk)
            if not message.get("more_body", False):
                break
        return cls(
            server=server,
            cookies=parse_cookie_header(server.get("HTTP_COOKIE", "")),
            query=parse_query_string(server.get("QUERY_STRING", "")),
            body=b"".join(chunks),
            headers_callback=headers_callback,
        )
