"""Server environment adapters.

Inbound: ``EnvironmentSnapshot`` captures a WSGI environ or an ASGI scope;
``ServerHeaders`` and ``ServerRequestUri`` derive headers and the request
URI from it. Outbound: ``ResponseEmitter`` (WSGI) and ``send_response``
(ASGI) write a ``Response`` to the server.
"""

from httpmessage.environment.headers import ServerHeaders, header_name
from httpmessage.environment.sender import ResponseEmitter, header_lines, send_response
from httpmessage.environment.snapshot import EnvironmentSnapshot, parse_cookie_header, parse_query_string
from httpmessage.environment.uri import ServerRequestUri

__all__ = [
    "EnvironmentSnapshot",
    "ResponseEmitter",
    "ServerHeaders",
    "ServerRequestUri",
    "header_lines",
    "header_name",
    "parse_cookie_header",
    "parse_query_string",
    "send_response",
]
