"""Response sinks — write a ``Response`` to a WSGI or ASGI server.

``ResponseEmitter`` drives WSGI's ``start_response`` and remembers whether
headers and content were already sent; those flags belong to the emitter,
not to the immutable response. ``send_response`` translates a response into
ASGI ``http.response.*`` messages, reading the body stream in a worker
thread so file-backed bodies never block the event loop.
"""

import logging
from collections.abc import Callable, Iterator
from typing import Any, Self, TypeAlias

from anyio import to_thread

from httpmessage._internal.asgi import Send
from httpmessage.config import EnvironmentConfig
from httpmessage.http.response import Response
from httpmessage.http.stream import BodyStream

logger = logging.getLogger("httpmessage.server")

StartResponse: TypeAlias = Callable[[str, list[tuple[str, str]]], Any]

DEFAULT_CHUNK_SIZE = EnvironmentConfig().chunk_size


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


def header_lines(response: Response) -> list[tuple[str, str]]:
    """One ``(name, value)`` pair per header value, in storage order."""
    return [(name, value) for name, values in response.headers.raw for value in values]


def _rewind(body: BodyStream) -> None:
    if body.is_seekable():
        body.seek(0)


def _read_chunks(body: BodyStream, chunk_size: int) -> Iterator[bytes]:
    _rewind(body)
    while not body.eof():
        chunk = body.read(chunk_size)
        if not chunk:
            break
        yield chunk


class ResponseEmitter:
    """Sends one ``Response`` through a WSGI server.

    Usage inside a WSGI application::

        def app(environ, start_response):
            response = handle(ServerRequest.from_wsgi(environ))
            return ResponseEmitter(response).send(start_response)
    """

    __slots__ = ("chunk_size", "content_sent", "headers_sent", "response")

    def __init__(self, response: Response, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        self.response = response
        self.chunk_size = chunk_size
        self.headers_sent = False
        self.content_sent = False

    @property
    def status(self) -> str:
        """The WSGI status string, ``"<code> <reason>"`` even when the reason is empty."""
        return f"{self.response.status_code} {self.response.reason_phrase}"

    def send_headers(self, start_response: StartResponse) -> Self:
        """Call *start_response* once; later calls are no-ops."""
        if self.headers_sent:
            return self
        start_response(self.status, header_lines(self.response))
        self.headers_sent = True
        logger.debug("Sent %s", self.response.render_status_line())
        return self

    def send_content(self) -> Iterator[bytes]:
        """Yield the body in chunks; empty once the content was sent."""
        if self.content_sent:
            return
        self.content_sent = True
        body = self.response.body
        if body is None or not _body_allowed(self.response.status_code):
            return
        yield from _read_chunks(body, self.chunk_size)

    def send(self, start_response: StartResponse) -> Iterator[bytes]:
        """Send headers, then return the body iterable for the WSGI server."""
        return self.send_headers(start_response).send_content()


async def send_response(
    response: Response,
    send: Send,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> None:
    """Translate a Response into ASGI send() calls."""
    raw_headers: list[tuple[bytes, bytes]] = [
        (name.lower().encode("latin-1"), value.encode("latin-1")) for name, value in header_lines(response)
    ]
    body = response.body if _body_allowed(response.status_code) else None

    if body is not None and body.is_readable() and not response.has_header("Content-Length"):
        size = body.get_size()
        if size is not None:
            raw_headers.append((b"content-length", str(size).encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": response.status_code,
            "headers": raw_headers,
        }
    )

    if body is not None:
        await to_thread.run_sync(_rewind, body)
        while True:
            chunk = await to_thread.run_sync(body.read, chunk_size)
            if not chunk:
                break
            await send({"type": "http.response.body", "body": chunk, "more_body": True})

    await send({"type": "http.response.body", "body": b"", "more_body": False})
    logger.debug("Sent %s", response.render_status_line())
