"""Immutable HTTP request.

Adds method, target URI and request-target to ``Message``. The ``Host``
header is derived from the URI at read time when none was set explicitly.
"""

from dataclasses import dataclass, replace
from typing import Any, Self

from httpmessage.errors import InvalidArgumentError
from httpmessage.http.headers import HeaderBag
from httpmessage.http.message import Message
from httpmessage.http.uri import Uri
from httpmessage.validation import is_valid


@dataclass(frozen=True, slots=True)
class Request(Message):
    """An immutable HTTP request.

    ``get_request_target()`` prefers an explicit target, then the origin
    form of ``uri`` (path and query), then ``"/"``::

        request = Request().with_uri(Uri.parse("http://example.com/search?q=a"))
        request.get_request_target()  # "/search?q=a"
        request.get_header("Host")  # "example.com"
    """

    method: str = "GET"
    uri: Uri | None = None

    # Private: explicit request-target override, stored verbatim
    _target: Any = None

    # -- Computed properties --

    @property
    def headers(self) -> HeaderBag:
        """Stored headers, plus ``Host`` from the URI when none is stored."""
        stored = self._headers
        if "host" in stored or self.uri is None or not self.uri.host:
            return stored
        return HeaderBag((("Host", (self.uri.host,)), *stored.raw))

    def get_request_target(self) -> Any:
        """The request-target for the request line."""
        if self._target is not None:
            return self._target
        if self.uri is None:
            return "/"
        target = self.uri.path or "/"
        if self.uri.query:
            target = f"{target}?{self.uri.query}"
        return target

    # -- Chainable transformations --

    def with_method(self, method: str) -> Self:
        """Return a copy using *method*, stored with its casing unchanged.

        Raises:
            InvalidArgumentError: If *method* is not a known HTTP method.
        """
        if not is_valid("http_method", method):
            msg = f"Creating a request with invalid method {method!r}."
            raise InvalidArgumentError(msg)
        return replace(self, method=method)

    def with_uri(self, uri: Uri) -> Self:
        """Return a copy targeting *uri*."""
        if not isinstance(uri, Uri):
            msg = f"The request URI must be a Uri, got {type(uri).__name__}"
            raise InvalidArgumentError(msg)
        return replace(self, uri=uri)

    def with_request_target(self, target: Any) -> Self:
        """Return a copy with an explicit request-target (not validated)."""
        return replace(self, _target=target)
