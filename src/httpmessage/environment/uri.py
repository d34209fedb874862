"""Request URI detection from CGI-style server parameters."""

import logging
from collections.abc import Mapping
from typing import Any, Self
from urllib.parse import quote

from httpmessage.config import EnvironmentConfig
from httpmessage.errors import InvalidArgumentError
from httpmessage.http.uri import Uri

logger = logging.getLogger("httpmessage.environment")

# Characters left unescaped in a path rebuilt from PATH_INFO
_PATH_SAFE = "/:@!$&'()*+,;="


class ServerRequestUri:
    """Derives the request ``Uri`` and request-target from server parameters.

    Scheme comes from ``REQUEST_SCHEME`` (or ``wsgi.url_scheme``), host from
    ``SERVER_NAME``, port from ``SERVER_PORT``, path from ``SCRIPT_NAME`` +
    ``PATH_INFO`` and query from ``QUERY_STRING``.
    """

    __slots__ = ("_config", "_server")

    def __init__(self, server: Mapping[str, Any], config: EnvironmentConfig | None = None) -> None:
        self._server = server
        self._config = config or EnvironmentConfig()

    @classmethod
    def parse(cls, server: Mapping[str, Any], config: EnvironmentConfig | None = None) -> Self:
        return cls(server, config)

    def _get(self, key: str, default: Any = None) -> Any:
        value = self._server.get(key)
        return default if value is None else value

    def get_uri(self) -> Uri:
        """The full request URI.

        Unless ``strict_uri`` is configured, a component the server reports
        in a form ``Uri`` rejects is logged and left unset.
        """
        scheme = self._get("REQUEST_SCHEME") or self._get("wsgi.url_scheme") or self._config.default_scheme
        components = (
            ("scheme", scheme),
            ("host", self._get("SERVER_NAME", "")),
            ("query", self._get("QUERY_STRING", "")),
            ("path", self.get_base_url()),
            ("port", self._get("SERVER_PORT", "")),
        )
        uri = Uri()
        for component, value in components:
            try:
                uri = getattr(uri, f"with_{component}")(value)
            except InvalidArgumentError:
                if self._config.strict_uri:
                    raise
                logger.warning("Ignoring invalid request URI %s from server: %r", component, value)
        return uri

    def get_request_uri(self) -> str | None:
        """The raw request-target (``REQUEST_URI``), when the server reports one."""
        return self._get("REQUEST_URI")

    def get_base_url(self) -> str:
        """The request path: mount point plus the path inside the application."""
        path = self._get("SCRIPT_NAME", "") + self._get("PATH_INFO", "")
        if path:
            return quote(path, safe=_PATH_SAFE, encoding="latin-1")
        request_uri = self.get_request_uri()
        if request_uri:
            return request_uri.split("?", 1)[0]
        return "/"

    def get_base_path(self) -> str:
        """The application mount point (``SCRIPT_NAME``), ``"/"`` at the root."""
        return self._get("SCRIPT_NAME", "").rstrip("/") or "/"
