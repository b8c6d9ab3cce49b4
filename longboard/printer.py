"""Response output: rich panels on a terminal, raw body bytes otherwise."""

from __future__ import annotations

import json
import posixpath
import sys
from typing import TextIO
from urllib.parse import urlsplit

from rich.console import Console, Group, RenderableType
from rich.json import JSON
from rich.panel import Panel
from rich.syntax import Syntax
from rich.text import Text

from .models import Response

JSON_TYPES = ("application/json", "text/json")


def is_json_type(content_type: str | None) -> bool:
    if not content_type:
        return False
    return content_type in JSON_TYPES or content_type.endswith("+json")


def looks_binary(content: bytes) -> bool:
    """Heuristic: NUL bytes or invalid UTF-8 in the first block."""
    sample = content[:8192]
    if b"\x00" in sample:
        return True
    try:
        sample.decode("utf-8")
    except UnicodeDecodeError as e:
        # A multi-byte sequence cut off at the sample boundary is fine
        truncated = len(content) > len(sample) and e.start >= len(sample) - 3
        return not truncated
    return False


def format_status(response: Response) -> str:
    """Status line shown in the status panel, e.g. ``200: OK``."""
    if response.reason:
        return f"{response.status_code}: {response.reason}"
    return str(response.status_code)


def format_headers(response: Response) -> str:
    lines = [
        f"{name}: {value}" for name, value in response.headers.items()
        if name.lower() != "set-cookie"
    ]
    lines.extend(f"set-cookie: {cookie}" for cookie in response.set_cookies)
    return "\n".join(lines)


def body_title(response: Response) -> str:
    content_type = response.headers.get("content-type")
    if content_type:
        return f"response body ({content_type})"
    return "response body"


def render_body(response: Response) -> RenderableType:
    """Pick a renderable for the body based on content type and URL path."""
    content = response.content
    if not content:
        return Text("(empty)", style="dim")
    if looks_binary(content):
        return Text(f"<{len(content):,} bytes of binary data>", style="dim")

    text = response.text
    if is_json_type(response.content_type):
        try:
            return JSON(text)
        except json.JSONDecodeError:
            pass

    filename = posixpath.basename(urlsplit(response.url).path) or "body.txt"
    lexer = Syntax.guess_lexer(filename, code=text)
    return Syntax(text, lexer, word_wrap=True, theme="ansi_dark", background_color="default")


class ResponsePrinter:
    """Writes a response to standard output.

    Args:
        stream: Output stream (defaults to stdout).
        pretty: Force pretty (True) or raw (False) output. None picks pretty
            output only when the stream is a terminal.
    """

    def __init__(self, stream: TextIO | None = None, pretty: bool | None = None):
        self.stream = stream or sys.stdout
        if pretty is None:
            isatty = getattr(self.stream, "isatty", None)
            pretty = bool(isatty and isatty())
        self.pretty = pretty

    def print(self, response: Response) -> None:
        if self.pretty:
            self._print_pretty(response)
        else:
            self._print_raw(response)

    def _print_pretty(self, response: Response) -> None:
        console = Console(file=self.stream, highlight=False)
        console.print(
            Group(
                Panel(
                    Text(format_headers(response)),
                    title="response headers",
                    title_align="left",
                ),
                Panel(
                    Text(format_status(response), style=_status_style(response.status_code)),
                    title="status",
                    title_align="left",
                ),
                Panel(render_body(response), title=body_title(response), title_align="left"),
            )
        )

    def _print_raw(self, response: Response) -> None:
        buffer = getattr(self.stream, "buffer", None)
        if buffer is not None:
            self.stream.flush()
            buffer.write(response.content)
            buffer.flush()
        else:
            self.stream.write(response.text)
            self.stream.flush()


def _status_style(status_code: int) -> str:
    if status_code < 300:
        return "bold green"
    if status_code < 400:
        return "bold yellow"
    return "bold red"
