"""Tests for httpmessage.http.server_request — requests built from the server environment."""

import io
import tempfile
import types

import pytest

from httpmessage.config import EnvironmentConfig
from httpmessage.environment import EnvironmentSnapshot
from httpmessage.errors import InvalidArgumentError, ParsingError
from httpmessage.http.server_request import ServerRequest
from httpmessage.parsers import JsonParser, MultipartParser, default_factory


def _environ(**overrides: object) -> dict[str, object]:
    body = overrides.pop("body", b"")
    environ: dict[str, object] = {
        "REQUEST_METHOD": "GET",
        "SERVER_PROTOCOL": "HTTP/1.1",
        "SERVER_NAME": "example.com",
        "SERVER_PORT": "80",
        "SCRIPT_NAME": "",
        "PATH_INFO": "/items",
        "QUERY_STRING": "",
        "REQUEST_URI": "/items",
        "HTTP_HOST": "example.com",
        "wsgi.url_scheme": "http",
        "wsgi.input": io.BytesIO(body),  # type: ignore[arg-type]
        "CONTENT_LENGTH": str(len(body)),  # type: ignore[arg-type]
    }
    environ.update(overrides)
    return environ


class TestFromWsgi:
    def test_basic_request(self) -> None:
        request = ServerRequest.from_wsgi(_environ(QUERY_STRING="page=2", REQUEST_URI="/items?page=2"))
        assert request.method == "GET"
        assert request.protocol_version == "1.1"
        assert str(request.uri) == "http://example.com/items?page=2"
        assert request.get_request_target() == "/items?page=2"
        assert request.get_header("Host") == "example.com"
        assert request.query_params == {"page": "2"}
        assert request.server_params["SERVER_NAME"] == "example.com"

    def test_cookies(self) -> None:
        request = ServerRequest.from_wsgi(_environ(HTTP_COOKIE="sid=abc; theme=dark"))
        assert request.cookie_params == {"sid": "abc", "theme": "dark"}
        assert not request.has_header("Cookie")

    def test_protocol_version(self) -> None:
        assert ServerRequest.from_wsgi(_environ(SERVER_PROTOCOL="HTTP/1.0")).protocol_version == "1.0"

    def test_unknown_protocol_keeps_default(self) -> None:
        assert ServerRequest.from_wsgi(_environ(SERVER_PROTOCOL="HTTP/3.0")).protocol_version == "1.1"

    def test_urlencoded_body_parsed(self) -> None:
        request = ServerRequest.from_wsgi(
            _environ(
                REQUEST_METHOD="POST",
                CONTENT_TYPE="application/x-www-form-urlencoded",
                body=b"name=Ada&lang=en",
            )
        )
        assert request.parsed_body == {"name": "Ada", "lang": "en"}
        assert request.body.get_contents() == b"name=Ada&lang=en"

    def test_body_rewound_after_parsing(self) -> None:
        request = ServerRequest.from_wsgi(
            _environ(REQUEST_METHOD="POST", CONTENT_TYPE="application/x-www-form-urlencoded", body=b"a=1")
        )
        assert request.body.tell() == 0
        assert request.body.read(3) == b"a=1"

    def test_unregistered_type_parses_to_none(self) -> None:
        request = ServerRequest.from_wsgi(
            _environ(REQUEST_METHOD="POST", CONTENT_TYPE="application/json", body=b'{"a": 1}')
        )
        assert request.parsed_body is None
        assert request.body.get_contents() == b'{"a": 1}'

    def test_registered_json_parser(self) -> None:
        parsers = default_factory.register("application/json", JsonParser)
        request = ServerRequest.from_wsgi(
            _environ(REQUEST_METHOD="POST", CONTENT_TYPE="application/json", body=b'{"a": 1}'),
            parsers=parsers,
        )
        assert request.parsed_body == {"a": 1}

    def test_invalid_json_raises(self) -> None:
        parsers = default_factory.register("application/json", JsonParser)
        with pytest.raises(ParsingError):
            ServerRequest.from_wsgi(
                _environ(REQUEST_METHOD="POST", CONTENT_TYPE="application/json", body=b"{"),
                parsers=parsers,
            )

    def test_body_file_closed_when_parsing_fails(self, monkeypatch: pytest.MonkeyPatch) -> None:
        created: list[tempfile.SpooledTemporaryFile] = []
        real_spool = tempfile.SpooledTemporaryFile

        def recording_spool(*args: object, **kwargs: object) -> tempfile.SpooledTemporaryFile:
            spool = real_spool(*args, **kwargs)  # type: ignore[call-overload]
            created.append(spool)
            return spool

        monkeypatch.setattr(tempfile, "SpooledTemporaryFile", recording_spool)
        parsers = default_factory.register("application/json", JsonParser)
        with pytest.raises(ParsingError):
            ServerRequest.from_wsgi(
                _environ(REQUEST_METHOD="POST", CONTENT_TYPE="application/json", body=b"{"),
                parsers=parsers,
            )
        assert len(created) == 1
        assert created[0].closed

    def test_multipart_body(self) -> None:
        pytest.importorskip("python_multipart")
        body = (
            b"--xyz\r\n"
            b'Content-Disposition: form-data; name="title"\r\n'
            b"\r\n"
            b"Hello\r\n"
            b"--xyz--\r\n"
        )
        parsers = default_factory.register("multipart/form-data", MultipartParser)
        request = ServerRequest.from_wsgi(
            _environ(REQUEST_METHOD="POST", CONTENT_TYPE="multipart/form-data; boundary=xyz", body=body),
            parsers=parsers,
        )
        assert request.parsed_body["title"] == "Hello"

    def test_small_spool_rolls_to_disk(self) -> None:
        config = EnvironmentConfig(spool_max_size=4)
        request = ServerRequest.from_wsgi(_environ(REQUEST_METHOD="POST", body=b"larger than four"), config=config)
        assert request.body.get_contents() == b"larger than four"

    def test_authorization_from_callback(self) -> None:
        request = ServerRequest.from_wsgi(_environ(), headers_callback=lambda: {"Authorization": "Bearer t"})
        assert request.get_header("Authorization") == "Bearer t"

    def test_params_are_read_only(self) -> None:
        request = ServerRequest.from_wsgi(_environ())
        with pytest.raises(TypeError):
            request.server_params["REQUEST_METHOD"] = "POST"  # type: ignore[index]


class TestFromAsgi:
    @pytest.mark.anyio
    async def test_builds_request(self) -> None:
        scope = {
            "type": "http",
            "method": "POST",
            "scheme": "https",
            "http_version": "1.1",
            "path": "/submit",
            "raw_path": b"/submit",
            "root_path": "",
            "query_string": b"next=%2F",
            "headers": [
                (b"host", b"example.com"),
                (b"content-type", b"application/x-www-form-urlencoded"),
            ],
            "server": ("example.com", 443),
        }

        async def receive() -> dict:
            return {"type": "http.request", "body": b"q=search", "more_body": False}

        request = await ServerRequest.from_asgi(scope, receive)
        assert request.method == "POST"
        assert str(request.uri) == "https://example.com/submit?next=%2F"
        assert request.query_params == {"next": "/"}
        assert request.parsed_body == {"q": "search"}
        assert request.get_request_target() == "/submit?next=%2F"


class TestFromEnvironment:
    def test_defaults_without_server_data(self) -> None:
        request = ServerRequest.from_environment(EnvironmentSnapshot())
        assert request.method == "GET"
        assert request.parsed_body is None
        assert request.get_request_target() == "/"
        assert request.file_params == {}


class TestTransformations:
    def test_with_cookie_params(self) -> None:
        original = ServerRequest()
        changed = original.with_cookie_params({"sid": "abc"})
        assert changed.cookie_params == {"sid": "abc"}
        assert original.cookie_params == {}

    @pytest.mark.parametrize("value", [{"a": 1}, {23: "x"}, ["x"], "a=1"])
    def test_invalid_cookie_params(self, value: object) -> None:
        with pytest.raises(InvalidArgumentError):
            ServerRequest().with_cookie_params(value)  # type: ignore[arg-type]

    def test_with_query_params_leaves_uri(self) -> None:
        request = ServerRequest.from_wsgi(_environ(QUERY_STRING="a=1"))
        changed = request.with_query_params({"b": "2"})
        assert changed.query_params == {"b": "2"}
        assert changed.uri == request.uri
        assert changed.server_params["QUERY_STRING"] == "a=1"

    def test_invalid_query_params(self) -> None:
        with pytest.raises(InvalidArgumentError):
            ServerRequest().with_query_params({"a": ["1"]})  # type: ignore[dict-item]

    @pytest.mark.parametrize("data", [None, {"a": "1"}, [1, 2], types.SimpleNamespace(a=1)])
    def test_with_parsed_body(self, data: object) -> None:
        assert ServerRequest().with_parsed_body(data).parsed_body == data

    @pytest.mark.parametrize("data", ["text", b"raw", 1, 1.5, True])
    def test_with_parsed_body_rejects_scalars(self, data: object) -> None:
        with pytest.raises(InvalidArgumentError):
            ServerRequest().with_parsed_body(data)

    def test_attributes(self) -> None:
        request = ServerRequest().with_attribute("user", "ada")
        assert request.get_attribute("user") == "ada"
        assert request.attributes == {"user": "ada"}
        removed = request.without_attribute("user")
        assert removed.get_attribute("user", "anonymous") == "anonymous"
        assert request.get_attribute("user") == "ada"

    def test_without_missing_attribute(self) -> None:
        request = ServerRequest().with_attribute("a", 1)
        changed = request.without_attribute("b")
        assert changed.attributes == {"a": 1}
        assert changed is not request

    def test_attributes_survive_other_transformations(self) -> None:
        request = ServerRequest().with_attribute("a", 1).with_method("POST").with_header("X", "1")
        assert request.get_attribute("a") == 1
        assert isinstance(request, ServerRequest)


class TestGetParam:
    def _request(self) -> ServerRequest:
        return (
            ServerRequest.from_wsgi(_environ(QUERY_STRING="page=2", HTTP_COOKIE="sid=abc"))
            .with_parsed_body({"name": "Ada"})
            .with_attribute("route", "items")
        )

    def test_sources(self) -> None:
        request = self._request()
        assert request.get_param("query", "page") == "2"
        assert request.get_param("cookie", "sid") == "abc"
        assert request.get_param("body", "name") == "Ada"
        assert request.get_param("server", "REQUEST_METHOD") == "GET"
        assert request.get_param("attribute", "route") == "items"
        assert request.get_param("files", "upload") is None

    def test_default(self) -> None:
        assert self._request().get_param("query", "missing", "1") == "1"

    def test_object_body(self) -> None:
        request = ServerRequest().with_parsed_body(types.SimpleNamespace(name="Ada"))
        assert request.get_param("body", "name") == "Ada"
        assert request.get_param("body", "other", "x") == "x"

    def test_no_body(self) -> None:
        assert ServerRequest().get_param("body", "name", "x") == "x"

    def test_unknown_source(self) -> None:
        with pytest.raises(InvalidArgumentError, match="Unknown parameter source"):
            ServerRequest().get_param("headers", "Host")  # type: ignore[arg-type]


class TestHelpers:
    def test_matches_method(self) -> None:
        request = ServerRequest().with_method("post")
        assert request.matches_method("POST")
        assert not request.matches_method("GET")

    @pytest.mark.parametrize("method", [None, 1, b"POST"])
    def test_matches_method_non_string(self, method: object) -> None:
        assert not ServerRequest().with_method("POST").matches_method(method)  # type: ignore[arg-type]

    def test_base_path(self) -> None:
        request = ServerRequest.from_wsgi(_environ(SCRIPT_NAME="/app", PATH_INFO="/items"))
        assert request.base_path == "/app"
        assert ServerRequest().base_path == "/"


class TestConstructor:
    def test_mappings_become_read_only_copies(self) -> None:
        cookies = {"sid": "abc"}
        request = ServerRequest(cookie_params=cookies)
        cookies["sid"] = "changed"
        assert request.cookie_params == {"sid": "abc"}
        with pytest.raises(TypeError):
            request.cookie_params["sid"] = "x"  # type: ignore[index]


class TestMultipartUploads:
    def test_uploads_become_file_params(self) -> None:
        pytest.importorskip("python_multipart")
        body = (
            b"--xyz\r\n"
            b'Content-Disposition: form-data; name="avatar"; filename="me.png"\r\n'
            b"Content-Type: image/png\r\n"
            b"\r\n"
            b"PNGDATA\r\n"
            b"--xyz--\r\n"
        )
        parsers = default_factory.register("multipart/form-data", MultipartParser)
        request = ServerRequest.from_wsgi(
            _environ(REQUEST_METHOD="POST", CONTENT_TYPE="multipart/form-data; boundary=xyz", body=body),
            parsers=parsers,
        )
        upload = request.get_param("files", "avatar")
        assert upload.name == "me.png"
        assert upload.type == "image/png"
        assert upload.stream.read(100) == b"PNGDATA"
        assert request.parsed_body == {}
