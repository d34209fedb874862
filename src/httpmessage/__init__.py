"""httpmessage — immutable HTTP messages for Python servers.

Requests, responses and URIs are value objects: every ``.with_*()`` call
returns a new instance and leaves the original untouched.

Basic usage::

    from httpmessage import Response, ResponseEmitter, ServerRequest

    def app(environ, start_response):
        request = ServerRequest.from_wsgi(environ)
        response = Response().with_header("Content-Type", "text/plain")
        return ResponseEmitter(response).send(start_response)

Multipart form parsing (``pip install httpmessage[forms]``)::

    from httpmessage.parsers import MultipartParser, default_factory
    factory = default_factory.register("multipart/form-data", MultipartParser)
"""

__version__ = "0.1.0"
__all__ = [
    "BodyStream",
    "Buffer",
    "ConfigurationError",
    "EnvironmentConfig",
    "EnvironmentSnapshot",
    "HeaderBag",
    "HttpMessageError",
    "InvalidArgumentError",
    "InvalidHostNameError",
    "InvalidSchemeError",
    "InvalidVersionError",
    "Message",
    "MissingContentError",
    "MissingHeaderError",
    "ParserFactory",
    "ParsingError",
    "Request",
    "Response",
    "ResponseEmitter",
    "ServerRequest",
    "Stream",
    "Uri",
    "send_response",
]

# Public name -> defining module
_LAZY_IMPORTS: dict[str, str] = {
    "Buffer": "httpmessage.http.stream",
    "BodyStream": "httpmessage.http.stream",
    "Stream": "httpmessage.http.stream",
    "HeaderBag": "httpmessage.http.headers",
    "Message": "httpmessage.http.message",
    "Request": "httpmessage.http.request",
    "Response": "httpmessage.http.response",
    "ServerRequest": "httpmessage.http.server_request",
    "Uri": "httpmessage.http.uri",
    "EnvironmentConfig": "httpmessage.config",
    "EnvironmentSnapshot": "httpmessage.environment.snapshot",
    "ResponseEmitter": "httpmessage.environment.sender",
    "send_response": "httpmessage.environment.sender",
    "ParserFactory": "httpmessage.parsers.factory",
    "ConfigurationError": "httpmessage.errors",
    "HttpMessageError": "httpmessage.errors",
    "InvalidArgumentError": "httpmessage.errors",
    "InvalidHostNameError": "httpmessage.errors",
    "InvalidSchemeError": "httpmessage.errors",
    "InvalidVersionError": "httpmessage.errors",
    "MissingContentError": "httpmessage.errors",
    "MissingHeaderError": "httpmessage.errors",
    "ParsingError": "httpmessage.errors",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import httpmessage`` fast while providing a clean top-level API.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    return getattr(importlib.import_module(module_name), name)
