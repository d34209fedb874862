"""Tests for httpmessage.http.stream — file-backed Stream and in-memory Buffer."""

import io
from pathlib import Path

import pytest

from httpmessage.errors import InvalidArgumentError
from httpmessage.http.stream import BodyStream, Buffer, Stream, stream_from_bytes


class TestStream:
    def test_read_and_eof(self) -> None:
        stream = stream_from_bytes(b"hello world")
        assert stream.read(5) == b"hello"
        assert not stream.eof()
        assert stream.read(100) == b" world"
        assert stream.eof()
        assert stream.read(10) == b""

    def test_size_and_tell(self) -> None:
        stream = stream_from_bytes(b"abcdef")
        stream.read(2)
        assert stream.get_size() == 6
        assert stream.tell() == 2

    def test_seek_and_rewind(self) -> None:
        stream = stream_from_bytes(b"abcdef")
        stream.read(6)
        assert stream.rewind()
        assert stream.read(3) == b"abc"
        assert stream.seek(-1, io.SEEK_END)
        assert stream.read(1) == b"f"

    def test_get_contents_reads_from_start(self) -> None:
        stream = stream_from_bytes(b"abcdef")
        stream.read(4)
        assert stream.get_contents() == b"abcdef"
        assert stream.eof()

    def test_str_decodes_contents(self) -> None:
        assert str(stream_from_bytes("héllo".encode())) == "héllo"

    def test_write(self) -> None:
        stream = Stream(io.BytesIO())
        assert stream.write(b"data") == 4
        assert stream.get_contents() == b"data"

    def test_write_on_read_only_file(self, tmp_path: Path) -> None:
        path = tmp_path / "body.bin"
        path.write_bytes(b"x")
        stream = Stream(str(path))
        assert stream.is_readable()
        assert not stream.is_writable()
        assert stream.write(b"y") is None
        stream.close()

    def test_open_path_forces_binary(self, tmp_path: Path) -> None:
        path = tmp_path / "body.txt"
        path.write_bytes(b"text")
        stream = Stream(str(path), "r")
        assert stream.read(4) == b"text"
        assert stream.get_metadata("mode") == "rb"
        stream.close()

    def test_rejects_non_stream(self) -> None:
        with pytest.raises(InvalidArgumentError):
            Stream(42)  # type: ignore[arg-type]

    def test_close_makes_unusable(self) -> None:
        stream = stream_from_bytes(b"abc")
        stream.close()
        assert not stream.is_readable()
        assert stream.read(1) is None
        assert stream.tell() is None
        assert stream.get_size() is None
        assert stream.eof()
        assert stream.seek(0) is False
        assert stream.get_contents() == b""

    def test_detach_returns_resource(self) -> None:
        resource = io.BytesIO(b"abc")
        stream = Stream(resource)
        assert stream.detach() is resource
        assert stream.detach() is None
        assert not resource.closed

    def test_metadata(self) -> None:
        stream = stream_from_bytes(b"abc")
        metadata = stream.get_metadata()
        assert metadata["seekable"] is True
        assert metadata["closed"] is False
        assert stream.get_metadata("readable") is True
        assert stream.get_metadata("unknown") is None

    def test_satisfies_protocol(self) -> None:
        assert isinstance(stream_from_bytes(b""), BodyStream)


class TestBuffer:
    def test_fifo_reads(self) -> None:
        buffer = Buffer()
        buffer.write(b"abcdef")
        assert buffer.read(2) == b"ab"
        assert buffer.read(10) == b"cdef"
        assert buffer.eof()

    def test_high_water_mark(self) -> None:
        buffer = Buffer(hwm=4)
        assert buffer.write(b"ab") == 2
        assert buffer.write(b"cd") is None
        assert buffer.get_size() == 4

    def test_get_contents_drains(self) -> None:
        buffer = Buffer()
        buffer.write(b"abc")
        assert buffer.get_contents() == b"abc"
        assert buffer.get_size() == 0

    def test_not_seekable(self) -> None:
        buffer = Buffer()
        assert not buffer.is_seekable()
        assert buffer.seek(0) is False
        assert buffer.rewind() is False
        assert buffer.tell() is None

    def test_always_readable_and_writable(self) -> None:
        buffer = Buffer()
        assert buffer.is_readable()
        assert buffer.is_writable()

    def test_metadata(self) -> None:
        buffer = Buffer(hwm=10)
        assert buffer.get_metadata("hwm") == 10
        assert buffer.get_metadata("other") is None
        assert buffer.get_metadata() == {}

    def test_close_clears(self) -> None:
        buffer = Buffer()
        buffer.write(b"abc")
        buffer.close()
        assert buffer.eof()
        assert str(buffer) == ""

    def test_satisfies_protocol(self) -> None:
        assert isinstance(Buffer(), BodyStream)
