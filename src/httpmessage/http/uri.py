"""Immutable URI value object.

Each ``.with_*()`` call validates one component and returns a new ``Uri``.
The string form is rebuilt from the components on every ``str()``.
"""

import re
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Any, Self
from urllib.parse import urlsplit

from httpmessage.errors import InvalidArgumentError, InvalidHostNameError, InvalidSchemeError
from httpmessage.validation import is_valid

SCHEMES: frozenset[str] = frozenset({"", "http", "https"})
DEFAULT_PORTS: MappingProxyType[str, int] = MappingProxyType({"http": 80, "https": 443})

# Besides the default ports, only registered/dynamic TCP ports are accepted.
_PORT_RANGE = range(1024, 49152)

_SLASHES = re.compile(r"/{2,}")


@dataclass(frozen=True, slots=True)
class Uri:
    """A URI made of scheme, user info, host, port, path, query and fragment.

    Build one from a string, or start empty and chain transformations::

        uri = Uri.parse("https://example.com/users?page=2")
        uri = Uri().with_scheme("http").with_host("example.com").with_port(8080)

    ``port`` hides the default port of the active scheme, so
    ``Uri().with_scheme("http").with_port(80).port`` is ``None``.
    """

    scheme: str = ""
    user: str = ""
    password: str | None = None
    host: str = ""
    path: str = ""
    query: str = ""
    fragment: str = ""

    # Private: the port as set, before default-port elision
    _port: int | None = None

    # -- Factory --

    @classmethod
    def parse(cls, uri: str) -> Self:
        """Decompose *uri* into components and validate each of them.

        Raises:
            InvalidArgumentError: If *uri* is not a string or cannot be split.
            InvalidSchemeError: If the scheme is not http or https.
            InvalidHostNameError: If the host is not a valid hostname.
        """
        if not isinstance(uri, str):
            msg = f"A URI can only be parsed from a string, got {type(uri).__name__}"
            raise InvalidArgumentError(msg)
        try:
            parts = urlsplit(uri)
            port = parts.port
        except ValueError as exc:
            msg = f"Cannot parse URI {uri!r}: {exc}"
            raise InvalidArgumentError(msg) from exc

        # urlsplit lower-cases .hostname; keep the casing as written
        host = parts.netloc.rpartition("@")[2].partition(":")[0]
        result = (
            cls()
            .with_scheme(parts.scheme)
            .with_user_info(parts.username or "", parts.password)
            .with_host(host)
            .with_path(parts.path)
            .with_query(parts.query)
            .with_fragment(parts.fragment)
        )
        if port is not None:
            result = result.with_port(port)
        return result

    # -- Computed properties --

    @property
    def port(self) -> int | None:
        """The port, or None when unset or equal to the scheme's default."""
        if self._port is None or self._port == DEFAULT_PORTS.get(self.scheme):
            return None
        return self._port

    @property
    def user_info(self) -> str:
        """``user[:password]``, or an empty string without a user."""
        if not self.user:
            return ""
        if self.password:
            return f"{self.user}:{self.password}"
        return self.user

    @property
    def authority(self) -> str:
        """``[user-info@]host[:port]``, leaving out empty and default parts."""
        authority = self.host
        user_info = self.user_info
        if user_info:
            authority = f"{user_info}@{authority}"
        port = self.port
        if port is not None:
            authority = f"{authority}:{port}"
        return authority

    def __str__(self) -> str:
        parts = []
        if self.scheme:
            parts.append(f"{self.scheme}://")
        parts.append(self.authority)
        parts.append(self.path)
        if self.query:
            parts.append(f"?{self.query}")
        if self.fragment:
            parts.append(f"#{self.fragment}")
        return "".join(parts)

    # -- Chainable transformations --

    def with_scheme(self, scheme: str) -> Self:
        """Return a new Uri with *scheme* (``"http"``, ``"https"`` or ``""``).

        A trailing ``://`` is ignored and the scheme is lower-cased.
        """
        message = "Invalid or unsupported scheme. Supported schemes are http, https or '' (empty string)."
        if not isinstance(scheme, str):
            raise InvalidSchemeError(message)
        scheme = scheme.removesuffix("://").lower()
        if scheme not in SCHEMES:
            raise InvalidSchemeError(message)
        return replace(self, scheme=scheme)

    def with_user_info(self, user: str, password: str | None = None) -> Self:
        """Return a new Uri with *user* and optional *password*."""
        if not isinstance(user, str) or not isinstance(password, (str, type(None))):
            msg = "User info can only be made of strings"
            raise InvalidArgumentError(msg)
        return replace(self, user=user, password=password)

    def with_host(self, host: str) -> Self:
        """Return a new Uri with *host*; an empty string removes the host."""
        if host != "" and not is_valid("hostname", host):
            msg = f"The hostname {host!r} is not valid."
            raise InvalidHostNameError(msg)
        return replace(self, host=host)

    def with_port(self, port: Any) -> Self:
        """Return a new Uri with *port*; ``""`` or None removes the port.

        Accepts 80, 443, or a port in the registered range 1024–49151.
        """
        if port is None or port == "":
            return replace(self, _port=None)
        try:
            number = int(port)
        except (TypeError, ValueError):
            msg = f"The port {port!r} is not valid."
            raise InvalidArgumentError(msg) from None
        if number not in DEFAULT_PORTS.values() and number not in _PORT_RANGE:
            msg = f"The port {number} is not valid."
            raise InvalidArgumentError(msg)
        return replace(self, _port=number)

    def with_path(self, path: str) -> Self:
        """Return a new Uri with *path*.

        Repeated slashes collapse, a leading slash is added and the trailing
        slash removed. The root path therefore becomes ``""``.
        """
        if not isinstance(path, str) or any(c.isspace() for c in path):
            msg = f"The path {path!r} is not valid; paths cannot contain whitespace."
            raise InvalidArgumentError(msg)
        path = _SLASHES.sub("/", f"/{path}").rstrip("/")
        return replace(self, path=path)

    def with_query(self, query: str) -> Self:
        """Return a new Uri with *query* (one leading ``?`` is dropped)."""
        if not isinstance(query, str):
            msg = "The query can only be a string"
            raise InvalidArgumentError(msg)
        return replace(self, query=query.removeprefix("?"))

    def with_fragment(self, fragment: str) -> Self:
        """Return a new Uri with *fragment* (one leading ``#`` is dropped)."""
        if not isinstance(fragment, str):
            msg = "The fragment can only be a string"
            raise InvalidArgumentError(msg)
        return replace(self, fragment=fragment.removeprefix("#"))
