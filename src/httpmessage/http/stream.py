"""Message body streams.

``BodyStream`` is the structural protocol every message body satisfies.
Two implementations ship with the package:

- ``Stream`` wraps a binary file object (or opens a path), the way a
  request body spooled to a temporary file is held.
- ``Buffer`` is an in-memory FIFO with a high-water mark. ``write`` keeps
  appending past the mark but returns ``None`` so producers can back off.

Failure results follow one convention: ``None`` for "no value" (``read``,
``write``, ``tell``), ``False`` for "did not happen" (``seek``). Streams are
not thread-safe; two messages sharing one stream share its cursor.
"""

import io
import os
from typing import IO, Any, Protocol, runtime_checkable

from httpmessage.errors import InvalidArgumentError


@runtime_checkable
class BodyStream(Protocol):
    """Anything usable as a message body."""

    def read(self, length: int) -> bytes | None: ...
    def write(self, data: bytes) -> int | None: ...
    def seek(self, offset: int, whence: int = os.SEEK_SET) -> bool: ...
    def tell(self) -> int | None: ...
    def eof(self) -> bool: ...
    def is_readable(self) -> bool: ...
    def is_writable(self) -> bool: ...
    def is_seekable(self) -> bool: ...
    def get_contents(self) -> bytes: ...
    def get_metadata(self, key: str | None = None) -> Any: ...
    def get_size(self) -> int | None: ...
    def close(self) -> None: ...
    def detach(self) -> Any: ...


class Stream:
    """A body stream over a binary file object.

    Usage::

        body = Stream(open("upload.bin", "rb"))
        body = Stream("/tmp/report.csv", "r+b")
        body = Stream(io.BytesIO(b"payload"))
    """

    __slots__ = ("_eof", "_resource")

    def __init__(self, stream: IO[bytes] | str, mode: str = "rb") -> None:
        if isinstance(stream, str):
            if "b" not in mode:
                mode += "b"
            stream = open(stream, mode)  # noqa: SIM115  owned until close()
        elif not hasattr(stream, "read") and not hasattr(stream, "write"):
            msg = "Invalid stream provided; must be a file path or a binary file object"
            raise InvalidArgumentError(msg)
        self._resource: IO[bytes] | None = stream
        self._eof = False

    def __str__(self) -> str:
        return self.get_contents().decode("utf-8", errors="replace")

    def __repr__(self) -> str:
        state = "detached" if self._resource is None else repr(self._resource)
        return f"Stream({state})"

    # -- Lifecycle --

    def close(self) -> None:
        """Close and detach the underlying file object."""
        resource = self.detach()
        if resource is not None:
            resource.close()

    def detach(self) -> IO[bytes] | None:
        """Release the underlying file object; the stream becomes unusable."""
        resource = self._resource
        self._resource = None
        return resource

    def _usable(self) -> IO[bytes] | None:
        resource = self._resource
        if resource is None or resource.closed:
            return None
        return resource

    # -- Capabilities --

    def is_readable(self) -> bool:
        resource = self._usable()
        return resource is not None and resource.readable()

    def is_writable(self) -> bool:
        resource = self._usable()
        return resource is not None and resource.writable()

    def is_seekable(self) -> bool:
        resource = self._usable()
        return resource is not None and resource.seekable()

    # -- Positioning --

    def get_size(self) -> int | None:
        """Total size in bytes, or None when it cannot be known."""
        if not self.is_seekable():
            return None
        resource = self._resource
        position = resource.tell()
        size = resource.seek(0, os.SEEK_END)
        resource.seek(position)
        return size

    def tell(self) -> int | None:
        resource = self._usable()
        if resource is None:
            return None
        try:
            return resource.tell()
        except (OSError, ValueError):
            return None

    def eof(self) -> bool:
        if self._usable() is None:
            return True
        if self.is_seekable():
            return self._resource.tell() >= self.get_size()
        return self._eof

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> bool:
        if not self.is_seekable():
            return False
        try:
            self._resource.seek(offset, whence)
        except (OSError, ValueError):
            return False
        self._eof = False
        return True

    def rewind(self) -> bool:
        return self.seek(0)

    # -- I/O --

    def read(self, length: int) -> bytes | None:
        """Read up to *length* bytes; ``b""`` at end of stream, None if unreadable."""
        if not self.is_readable():
            return None
        if self.eof():
            return b""
        data = self._resource.read(length)
        if len(data) < length:
            self._eof = True
        return data

    def write(self, data: bytes) -> int | None:
        """Write *data*; returns the byte count, or None if unwritable."""
        if not self.is_writable():
            return None
        return self._resource.write(data)

    def get_contents(self) -> bytes:
        """The whole content, from the first byte, leaving the cursor at the end."""
        if not self.is_readable():
            return b""
        if self.is_seekable():
            self._resource.seek(0)
        data = self._resource.read()
        self._eof = True
        return data

    def get_metadata(self, key: str | None = None) -> Any:
        """Describe the underlying file object; a single entry when *key* is given."""
        resource = self._resource
        metadata: dict[str, Any] = {
            "mode": getattr(resource, "mode", None),
            "name": getattr(resource, "name", None),
            "closed": resource is None or resource.closed,
            "readable": self.is_readable(),
            "writable": self.is_writable(),
            "seekable": self.is_seekable(),
        }
        if key is None:
            return metadata
        return metadata.get(key)


class Buffer:
    """In-memory FIFO body with a high-water mark.

    Reads consume from the front. The buffer is not seekable and has no
    position. ``write`` returns None once the buffered size reaches *hwm*,
    although the data is still appended.
    """

    __slots__ = ("_buffer", "_hwm")

    def __init__(self, hwm: int = 16384) -> None:
        self._hwm = hwm
        self._buffer = bytearray()

    def __str__(self) -> str:
        return self._buffer.decode("utf-8", errors="replace")

    def __repr__(self) -> str:
        return f"Buffer({len(self._buffer)} bytes, hwm={self._hwm})"

    def close(self) -> None:
        self._buffer.clear()

    def detach(self) -> None:
        self.close()

    def get_size(self) -> int:
        return len(self._buffer)

    def tell(self) -> None:
        return None

    def eof(self) -> bool:
        return not self._buffer

    def is_seekable(self) -> bool:
        return False

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> bool:  # noqa: ARG002
        return False

    def rewind(self) -> bool:
        return self.seek(0)

    def is_writable(self) -> bool:
        return True

    def is_readable(self) -> bool:
        return True

    def write(self, data: bytes) -> int | None:
        self._buffer += data
        if len(self._buffer) >= self._hwm:
            return None
        return len(data)

    def read(self, length: int) -> bytes:
        result = bytes(self._buffer[:length])
        del self._buffer[:length]
        return result

    def get_contents(self) -> bytes:
        result = bytes(self._buffer)
        self._buffer.clear()
        return result

    def get_metadata(self, key: str | None = None) -> Any:
        if key == "hwm":
            return self._hwm
        return None if key else {}


def stream_from_bytes(data: bytes) -> Stream:
    """A seekable in-memory ``Stream`` holding *data*, positioned at the start."""
    return Stream(io.BytesIO(data))
