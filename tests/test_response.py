"""Tests for httpmessage.http.response — status codes and reason phrases."""

import pytest

from httpmessage.errors import InvalidArgumentError
from httpmessage.http.response import Response


class TestDefaults:
    def test_default_status(self) -> None:
        response = Response()
        assert response.status_code == 200
        assert response.reason_phrase == "OK"
        assert response.protocol_version == "1.1"
        assert response.body is None


class TestWithStatus:
    def test_recommended_phrase(self) -> None:
        response = Response().with_status(404)
        assert response.status_code == 404
        assert response.reason_phrase == "Not Found"

    def test_custom_phrase(self) -> None:
        response = Response().with_status(404, "Nope")
        assert response.reason_phrase == "Nope"

    def test_empty_custom_phrase_kept(self) -> None:
        assert Response().with_status(204, "").reason_phrase == ""

    @pytest.mark.parametrize("code", [99, 299, 600, "200", 200.0, True])
    def test_invalid_codes(self, code: object) -> None:
        with pytest.raises(InvalidArgumentError):
            Response().with_status(code)  # type: ignore[arg-type]

    def test_teapot(self) -> None:
        assert Response().with_status(418).reason_phrase == "I'm a teapot"

    def test_original_unchanged(self) -> None:
        original = Response()
        original.with_status(500)
        assert original.status_code == 200


class TestReasonPhraseTable:
    def test_read_only(self) -> None:
        table = Response.recommended_reason_phrases()
        with pytest.raises(TypeError):
            table[999] = "Custom"  # type: ignore[index]

    def test_covers_common_codes(self) -> None:
        table = Response.recommended_reason_phrases()
        assert table[100] == "Continue"
        assert table[201] == "Created"
        assert table[301] == "Moved Permanently"
        assert table[503] == "Service Unavailable"
        assert table[511] == "Network Authentication Required"


class TestStatusLine:
    def test_render(self) -> None:
        assert Response().with_status(201).render_status_line() == "HTTP/1.1 201 Created"

    def test_render_with_version(self) -> None:
        response = Response().with_protocol_version("2.0").with_status(404)
        assert response.render_status_line() == "HTTP/2.0 404 Not Found"

    def test_render_without_phrase(self) -> None:
        assert Response().with_status(204, "").render_status_line() == "HTTP/1.1 204"
