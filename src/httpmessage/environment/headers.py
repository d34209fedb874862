"""Request headers recovered from CGI-style server parameters.

``HTTP_USER_AGENT`` becomes ``User-Agent``, ``CONTENT_TYPE`` becomes
``Content-Type``. Values are split on commas and trimmed. Cookies are left
to the cookie parameters and never reported as a header.
"""

import logging
from collections.abc import Mapping
from typing import Any, Self

from httpmessage._internal.types import HeadersCallback
from httpmessage.http.headers import HeaderBag

logger = logging.getLogger("httpmessage.environment")


def header_name(key: str) -> str | None:
    """``"HTTP_ACCEPT_LANGUAGE"`` → ``"Accept-Language"``; None for non-header keys."""
    if key.startswith("HTTP_"):
        return "-".join(part.capitalize() for part in key[5:].split("_"))
    if key.startswith("CONTENT_"):
        suffix = key[8:]
        return "Content-" + (suffix if suffix == "MD5" else suffix.capitalize())
    return None


class ServerHeaders:
    """Reads request headers out of server parameters.

    Some servers keep ``Authorization`` out of the CGI variables. A headers
    callback returning the raw request headers lets it be recovered::

        headers = ServerHeaders(environ, headers_callback=lambda: raw_headers).get_headers()
    """

    __slots__ = ("_headers_callback", "_server")

    def __init__(
        self,
        server: Mapping[str, Any],
        headers_callback: HeadersCallback | None = None,
    ) -> None:
        self._server = dict(server)
        self._headers_callback = headers_callback
        self.normalize_server()

    @classmethod
    def get(cls, server: Mapping[str, Any], headers_callback: HeadersCallback | None = None) -> HeaderBag:
        """Shorthand for ``ServerHeaders(server, headers_callback).get_headers()``."""
        return cls(server, headers_callback).get_headers()

    def set_headers_callback(self, callback: HeadersCallback) -> Self:
        """Replace the callback used to recover ``Authorization``."""
        self._headers_callback = callback
        return self

    def normalize_server(self) -> None:
        """Copy ``Authorization`` from the headers callback when it is missing."""
        if "HTTP_AUTHORIZATION" in self._server or self._headers_callback is None:
            return
        request_headers = self._headers_callback()
        for name in ("Authorization", "authorization"):
            if name in request_headers:
                logger.debug("Recovered Authorization header from headers callback")
                self._server["HTTP_AUTHORIZATION"] = request_headers[name]
                return

    def get_headers(self) -> HeaderBag:
        """All request headers, as ``Header-Case`` names with trimmed value lists."""
        headers: dict[str, list[str]] = {}
        for key, value in self._server.items():
            if not isinstance(key, str) or not value or key.startswith("HTTP_COOKIE"):
                continue
            name = header_name(key)
            if name is not None:
                headers[name] = [item.strip() for item in str(value).split(",")]
        return HeaderBag(headers)
