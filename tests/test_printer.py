"""Tests for response output."""

import io

import pytest
from rich.json import JSON
from rich.syntax import Syntax
from rich.text import Text

from longboard import Response
from longboard.printer import (
    ResponsePrinter,
    body_title,
    format_headers,
    format_status,
    is_json_type,
    looks_binary,
    render_body,
)


class BytesStdout(io.StringIO):
    """Text stream exposing a binary buffer, like sys.stdout."""

    def __init__(self):
        super().__init__()
        self.buffer = io.BytesIO()


def make_response(content=b"", content_type=None, url="https://example.com/", status=200, reason="OK"):
    headers = {"Content-Type": content_type} if content_type else {}
    return Response(status_code=status, reason=reason, headers=headers, content=content, url=url)


class TestHelpers:
    """Tests for formatting helpers."""

    def test_format_headers_lists_cookies_once(self):
        """Test Set-Cookie kept in the header map is not shown twice."""
        response = Response(
            status_code=200,
            headers={"Content-Type": "text/plain", "Set-Cookie": "token=1; Max-Age=100"},
            set_cookies=["token=1; Max-Age=100"],
            content=b"",
            url="https://example.com/",
        )

        lines = format_headers(response).splitlines()

        assert lines == ["Content-Type: text/plain", "set-cookie: token=1; Max-Age=100"]

    def test_format_status(self):
        """Test status line formatting."""
        assert format_status(make_response(status=404, reason="Not Found")) == "404: Not Found"
        assert format_status(make_response(status=599, reason="")) == "599"

    def test_body_title(self):
        """Test body panel titles mention the content type."""
        assert body_title(make_response(content_type="text/html")) == "response body (text/html)"
        assert body_title(make_response()) == "response body"

    @pytest.mark.parametrize(
        "content_type, expected",
        [
            ("application/json", True),
            ("application/problem+json", True),
            ("text/html", False),
            (None, False),
        ],
    )
    def test_is_json_type(self, content_type, expected):
        """Test JSON media type detection."""
        assert is_json_type(content_type) is expected

    def test_looks_binary(self):
        """Test binary detection."""
        assert looks_binary(b"\x89PNG\r\n\x1a\n\x00\x00") is True
        assert looks_binary("héllo".encode("utf-8")) is False


class TestRenderBody:
    """Tests for body renderable selection."""

    def test_json_body(self):
        """Test JSON bodies are rendered as JSON."""
        response = make_response(b'{"a": 1}', "application/json; charset=utf-8")

        assert isinstance(render_body(response), JSON)

    def test_invalid_json_falls_back(self):
        """Test a JSON content type with a non-JSON body still renders."""
        response = make_response(b"not json", "application/json")

        assert isinstance(render_body(response), Syntax)

    def test_lexer_from_url_path(self):
        """Test the lexer is guessed from the URL file name."""
        response = make_response(b"def f():\n    pass\n", "text/plain", url="https://example.com/src/app.py")

        assert render_body(response).lexer.name == "Python"

    def test_binary_summarized(self):
        """Test binary bodies are summarized."""
        rendered = render_body(make_response(b"\x00\x01\x02", "application/octet-stream"))

        assert isinstance(rendered, Text)
        assert "3 bytes of binary data" in rendered.plain

    def test_empty_body(self):
        """Test empty bodies render a placeholder."""
        assert render_body(make_response()).plain == "(empty)"


class TestResponsePrinter:
    """Tests for ResponsePrinter."""

    def test_raw_output_when_not_a_terminal(self):
        """Test piped output is the raw body bytes."""
        stream = BytesStdout()
        printer = ResponsePrinter(stream)

        printer.print(make_response(b"\x00raw body\xff", "application/octet-stream"))

        assert printer.pretty is False
        assert stream.buffer.getvalue() == b"\x00raw body\xff"
        assert stream.getvalue() == ""

    def test_raw_output_without_buffer(self):
        """Test text-only streams receive the decoded body."""
        stream = io.StringIO()

        ResponsePrinter(stream).print(make_response(b"hello"))

        assert stream.getvalue() == "hello"

    def test_pretty_output(self):
        """Test pretty output shows headers, status and body panels."""
        stream = io.StringIO()
        response = Response(
            status_code=200,
            reason="OK",
            headers={"Content-Type": "application/json", "X-Trace": "abc"},
            set_cookies=["token=1; Max-Age=100"],
            content=b'{"success": true}',
            url="https://example.com/api",
        )

        ResponsePrinter(stream, pretty=True).print(response)

        output = stream.getvalue()
        assert "response headers" in output
        assert "X-Trace: abc" in output
        assert "set-cookie: token=1; Max-Age=100" in output
        assert "200: OK" in output
        assert "response body (application/json)" in output
        assert '"success"' in output
