"""Request and Response dataclasses."""

from __future__ import annotations

from collections.abc import MutableMapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Iterator


class Method(str, Enum):
    """HTTP request methods."""

    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    CONNECT = "CONNECT"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"
    PATCH = "PATCH"

    @classmethod
    def parse(cls, value: str) -> "Method":
        """Parse a method name case-insensitively.

        Raises:
            ValueError: If the name is not a known HTTP method.
        """
        try:
            return cls(value.upper())
        except ValueError:
            raise ValueError(f"invalid HTTP method: {value!r}") from None

    def __str__(self) -> str:
        return self.value


class Headers(MutableMapping):
    """Case-insensitive header mapping.

    Setting a header replaces any previous value regardless of case; the
    casing of the most recent write is kept for display.
    """

    def __init__(self, items: Iterable[tuple[str, str]] | dict[str, str] | None = None):
        self._store: dict[str, tuple[str, str]] = {}
        if items is not None:
            self.update(items)

    def __setitem__(self, name: str, value: str) -> None:
        self._store[name.lower()] = (name, value)

    def __getitem__(self, name: str) -> str:
        return self._store[name.lower()][1]

    def __delitem__(self, name: str) -> None:
        del self._store[name.lower()]

    def __iter__(self) -> Iterator[str]:
        return (name for name, _ in self._store.values())

    def __len__(self) -> int:
        return len(self._store)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Headers):
            other_items = other.lower_items()
        elif isinstance(other, dict):
            other_items = {k.lower(): v for k, v in other.items()}
        else:
            return NotImplemented
        return self.lower_items() == other_items

    def __repr__(self) -> str:
        return f"Headers({dict(self.items())!r})"

    def lower_items(self) -> dict[str, str]:
        """Return headers keyed by lowercase name."""
        return {key: value for key, (_, value) in self._store.items()}

    def copy(self) -> "Headers":
        return Headers(self.items())


@dataclass
class Request:
    """HTTP request representation.

    Attributes:
        method: HTTP method.
        url: The request URL.
        headers: Request headers (case-insensitive).
        body: Raw request body, if any.
    """

    method: Method
    url: str
    headers: Headers = field(default_factory=Headers)
    body: bytes | None = None

    def __post_init__(self) -> None:
        """Normalize method and headers."""
        if not isinstance(self.method, Method):
            self.method = Method.parse(self.method)
        if not isinstance(self.headers, Headers):
            self.headers = Headers(self.headers)


@dataclass
class Response:
    """HTTP response representation.

    Attributes:
        status_code: HTTP status code.
        headers: Response headers (case-insensitive, one value per name).
        content: Raw response content as bytes.
        url: Final URL after redirects.
        reason: Reason phrase for the status code.
        set_cookies: Every raw Set-Cookie header value, in order.
        http_version: Protocol version reported by the backend.
        elapsed: Request duration in seconds.
        request: The original request object.
        history: Redirect responses that led to this one, oldest first.
    """

    status_code: int
    headers: Headers
    content: bytes
    url: str
    reason: str = ""
    set_cookies: list[str] = field(default_factory=list)
    http_version: str = "HTTP/1.1"
    elapsed: float = 0.0
    request: Request | None = None
    history: list["Response"] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not isinstance(self.headers, Headers):
            self.headers = Headers(self.headers)

    @property
    def text(self) -> str:
        """Decode content as UTF-8 text."""
        return self.content.decode("utf-8", errors="replace")

    @property
    def ok(self) -> bool:
        """Check if status code indicates success (2xx)."""
        return 200 <= self.status_code < 300

    @property
    def content_type(self) -> str | None:
        """Media type of the body without parameters, lowercased."""
        value = self.headers.get("content-type")
        if not value:
            return None
        return value.split(";", 1)[0].strip().lower() or None

    def json(self) -> Any:
        """Parse content as JSON."""
        import json as json_module
        return json_module.loads(self.content)


class LongboardError(Exception):
    """Base exception for longboard errors."""
    pass


class ConfigError(LongboardError):
    """Invalid configuration value or unknown backend."""
    pass


class BodySourceError(LongboardError):
    """Request body file is missing or unreadable."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"cannot read body file {path}: {reason}")
        self.path = path
        self.reason = reason


class CookieJarError(LongboardError):
    """Cookie jar file cannot be read, parsed, or written."""

    def __init__(self, path: str, message: str, line: int | None = None):
        location = f"{path}:{line}" if line is not None else path
        super().__init__(f"cookie jar {location}: {message}")
        self.path = path
        self.line = line


class TransportError(LongboardError):
    """Error during HTTP transport (connection, TLS, protocol, etc.)."""

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.original_error = original_error
