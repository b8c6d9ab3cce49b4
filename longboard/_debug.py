"""Verbose mode for longboard."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, TextIO

from .models import Request, Response


@dataclass
class DebugInfo:
    """Debug information for a request/response cycle."""

    # Request info
    timestamp: datetime
    method: str
    url: str

    # Backend info
    backend: str

    # Request details
    request_headers: dict[str, str] = field(default_factory=dict)
    body_length: int | None = None
    cookies_sent: dict[str, str] = field(default_factory=dict)

    # Response details (populated after request)
    final_url: str | None = None
    status_code: int | None = None
    http_version: str | None = None
    response_headers: dict[str, str] = field(default_factory=dict)
    cookies_received: list[str] = field(default_factory=list)
    content_length: int = 0
    elapsed: float = 0.0

    # Error info
    error: str | None = None

    @classmethod
    def for_request(
        cls,
        request: Request,
        backend: str,
        cookies_sent: dict[str, str] | None = None,
    ) -> "DebugInfo":
        return cls(
            timestamp=datetime.now(),
            method=request.method.value,
            url=request.url,
            backend=backend,
            request_headers=dict(request.headers.items()),
            body_length=len(request.body) if request.body is not None else None,
            cookies_sent=dict(cookies_sent or {}),
        )

    def record_response(self, response: Response) -> None:
        """Fill in the response section."""
        self.final_url = response.url
        self.status_code = response.status_code
        self.http_version = response.http_version
        self.response_headers = {
            name: value for name, value in response.headers.items()
            if name.lower() != "set-cookie"
        }
        self.cookies_received = [
            cookie for hop in [*response.history, response] for cookie in hop.set_cookies
        ]
        self.content_length = len(response.content)
        self.elapsed = response.elapsed


class DebugOutput:
    """Handles verbose output formatting and dispatch."""

    def __init__(
        self,
        enabled: bool = False,
        output: TextIO | None = None,
        callback: Callable[[DebugInfo], None] | None = None,
    ):
        """Initialize debug output handler.

        Args:
            enabled: Whether verbose output is enabled.
            output: Output stream (defaults to stderr).
            callback: Optional callback for programmatic capture.
        """
        self.enabled = enabled
        self.output = output or sys.stderr
        self.callback = callback

    def log_request(self, info: DebugInfo) -> None:
        """Log debug info for a request/response cycle."""
        if not self.enabled:
            return

        if self.callback:
            self.callback(info)

        self._print_formatted(info)

    def _print_formatted(self, info: DebugInfo) -> None:
        out = self.output
        sep = "=" * 80

        out.write(f"\n{sep}\n")
        out.write(f"[{info.timestamp.strftime('%Y-%m-%d %H:%M:%S')}] ")
        out.write(f"{info.method} {info.url}\n")
        out.write(f"{sep}\n")
        out.write(f"Backend: {info.backend}\n")

        if info.request_headers:
            out.write("\n> Request Headers:\n")
            for header, value in info.request_headers.items():
                out.write(f"  {header}: {_truncate(value, 80)}\n")

        if info.cookies_sent:
            cookies_str = "; ".join(f"{k}={v}" for k, v in info.cookies_sent.items())
            out.write(f"\n> Cookies Sent: {_truncate(cookies_str, 100)}\n")

        if info.body_length is not None:
            out.write(f"> Body Length: {info.body_length:,} bytes\n")

        out.write("\n" + "-" * 80 + "\n")

        if info.error:
            out.write(f"< ERROR: {info.error}\n")
        elif info.status_code is not None:
            out.write(f"< {info.http_version or 'HTTP'} {info.status_code}")
            if info.elapsed:
                out.write(f"  [{info.elapsed:.3f}s]")
            out.write("\n")

            if info.final_url and info.final_url != info.url:
                out.write(f"< Redirected to: {info.final_url}\n")

            if info.response_headers:
                out.write("\n< Response Headers:\n")
                for header, value in info.response_headers.items():
                    out.write(f"  {header}: {_truncate(value, 80)}\n")

            if info.cookies_received:
                out.write("\n< Cookies Received:\n")
                for cookie in info.cookies_received:
                    out.write(f"  {_truncate(cookie, 100)}\n")

            out.write(f"\n< Content Length: {info.content_length:,} bytes\n")

        out.write(f"{sep}\n")
        out.flush()


def _truncate(value: str, limit: int) -> str:
    if len(value) > limit:
        return value[:limit - 3] + "..."
    return value
