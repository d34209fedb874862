"""``multipart/form-data`` parsing.

Parts are streamed from the body in chunks. Plain fields become the parsed
body, a flat ``dict[str, str]`` like the urlencoded parser returns. File
parts are kept apart as ``UploadedFile`` entries in the shape a CGI server
reports uploads: client file name, media type, size, an upload error code,
and the content spooled to a temporary file.

``python-multipart`` is an optional dependency (``pip install httpmessage[forms]``).
"""

import tempfile
from collections.abc import Callable
from dataclasses import dataclass
from typing import IO, Any

from httpmessage.errors import ConfigurationError, ParsingError
from httpmessage.http.stream import Stream
from httpmessage.parsers.base import BaseParser

UPLOAD_ERR_OK = 0
UPLOAD_ERR_NO_FILE = 4

# Upload content stays in memory up to this size, then rolls to disk
UPLOAD_SPOOL_SIZE = 1024 * 1024


@dataclass(frozen=True, slots=True)
class UploadedFile:
    """A file part, as the client sent it.

    ``name`` is the client-side file name. ``error`` is ``UPLOAD_ERR_NO_FILE``
    when the form field was submitted without choosing a file.
    """

    name: str
    type: str
    size: int
    stream: Stream
    error: int = UPLOAD_ERR_OK

    def to_dict(self) -> dict[str, Any]:
        """The CGI upload entry: ``name``, ``type``, ``size``, ``error``, ``tmp_name``."""
        return {
            "name": self.name,
            "type": self.type,
            "size": self.size,
            "error": self.error,
            "tmp_name": self.stream.get_metadata("name"),
        }


class _PartCollector:
    """Receives python-multipart events and assembles fields and uploads.

    Header names and values may arrive split over several chunks, so they
    are accumulated until ``on_header_end``.
    """

    __slots__ = (
        "_data",
        "_field",
        "_filename",
        "_header_name",
        "_header_value",
        "_headers",
        "_options",
        "_spool",
        "fields",
        "files",
    )

    def __init__(self, parse_options: Callable[[bytes], tuple[bytes, dict[bytes, bytes]]]) -> None:
        self._options = parse_options
        self.fields: dict[str, str] = {}
        self.files: dict[str, UploadedFile] = {}
        self._reset()

    def _reset(self) -> None:
        self._headers: dict[str, bytes] = {}
        self._header_name = bytearray()
        self._header_value = bytearray()
        self._data = bytearray()
        self._field: str | None = None
        self._filename: str | None = None
        self._spool: IO[bytes] | None = None

    def callbacks(self) -> dict[str, Callable[..., None]]:
        return {
            "on_part_begin": self._reset,
            "on_header_field": self.on_header_field,
            "on_header_value": self.on_header_value,
            "on_header_end": self.on_header_end,
            "on_headers_finished": self.on_headers_finished,
            "on_part_data": self.on_part_data,
            "on_part_end": self.on_part_end,
        }

    def on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._header_name += data[start:end]

    def on_header_value(self, data: bytes, start: int, end: int) -> None:
        self._header_value += data[start:end]

    def on_header_end(self) -> None:
        name = self._header_name.decode("latin-1").strip().lower()
        self._headers[name] = bytes(self._header_value).strip()
        self._header_name = bytearray()
        self._header_value = bytearray()

    def on_headers_finished(self) -> None:
        _, params = self._options(self._headers.get("content-disposition", b""))
        if b"name" in params:
            self._field = params[b"name"].decode("utf-8", errors="replace")
        if b"filename" in params:
            self._filename = params[b"filename"].decode("utf-8", errors="replace")
            self._spool = tempfile.SpooledTemporaryFile(max_size=UPLOAD_SPOOL_SIZE, mode="w+b")  # noqa: SIM115

    def on_part_data(self, data: bytes, start: int, end: int) -> None:
        if self._spool is not None:
            self._spool.write(data[start:end])
        else:
            self._data += data[start:end]

    def on_part_end(self) -> None:
        if self._field is None:
            # Nameless parts cannot be addressed; drop them
            if self._spool is not None:
                self._spool.close()
            return
        if self._spool is None:
            self.fields[self._field] = self._data.decode("utf-8", errors="replace")
            return
        size = self._spool.tell()
        self._spool.seek(0)
        previous = self.files.get(self._field)
        if previous is not None:
            previous.stream.close()
        self.files[self._field] = UploadedFile(
            name=self._filename or "",
            type=self._headers.get("content-type", b"application/octet-stream").decode("latin-1"),
            size=size,
            stream=Stream(self._spool),
            error=UPLOAD_ERR_OK if self._filename or size else UPLOAD_ERR_NO_FILE,
        )

    def close(self) -> None:
        """Release every spooled upload, including a part still being read."""
        if self._spool is not None:
            self._spool.close()
        for upload in self.files.values():
            upload.stream.close()


class MultipartParser(BaseParser):
    """``multipart/form-data`` bodies: fields as a ``dict[str, str]``.

    The boundary is read from the ``content_type`` the parser was built
    with. After ``parse()``, ``files`` maps field names to ``UploadedFile``.
    A repeated field name keeps its last part.

    Raises ``ConfigurationError`` from ``parse()`` if ``python-multipart``
    is not installed.
    """

    __slots__ = ("chunk_size", "files")

    def __init__(self, content_type: str = "", chunk_size: int = 64 * 1024) -> None:
        super().__init__(content_type)
        self.chunk_size = chunk_size
        self.files: dict[str, UploadedFile] = {}

    def parse(self) -> dict[str, str]:
        try:
            from python_multipart.exceptions import MultipartParseError
            from python_multipart.multipart import MultipartParser as StreamingParser
            from python_multipart.multipart import parse_options_header
        except ImportError:
            msg = (
                "Multipart form parsing requires the 'python-multipart' package. "
                "Install it with: pip install httpmessage[forms]"
            )
            raise ConfigurationError(msg) from None

        _, options = parse_options_header(self.content_type.encode("latin-1"))
        boundary = options.get(b"boundary")
        if not boundary:
            msg = "Multipart form data missing boundary parameter"
            raise ParsingError(msg)

        collector = _PartCollector(parse_options_header)
        stream_parser = StreamingParser(boundary, collector.callbacks())
        try:
            for chunk in self._read_chunks(self.chunk_size):
                stream_parser.write(chunk)
            stream_parser.finalize()
        except MultipartParseError as exc:
            collector.close()
            msg = f"Cannot decode multipart body: {exc}"
            raise ParsingError(msg) from exc

        self.files = collector.files
        return collector.fields
