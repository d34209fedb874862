"""Environment configuration.

EnvironmentConfig is a frozen dataclass — immutable after creation, shared
by the environment adapters and ``ServerRequest.from_environment``.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class EnvironmentConfig:
    """Settings used when turning a server environment into a request.

    All fields have sensible defaults. Override what you need::

        config = EnvironmentConfig(strict_uri=True, spool_max_size=64 * 1024)
    """

    # Request body spool: kept in memory up to this size, then rolled to disk
    spool_max_size: int = 2 * 1024 * 1024  # 2 MB

    # ASGI sink: bytes read from the body stream per http.response.body message
    chunk_size: int = 64 * 1024

    # URI detection
    default_scheme: str = "http"
    strict_uri: bool = False  # raise on bad SERVER_NAME / SERVER_PORT instead of logging
