"""Configuration dataclasses and enums for the longboard CLI."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from urllib.parse import urlsplit

from .models import ConfigError, Method


# Canonical backend name -> accepted spellings
BACKEND_ALIASES: dict[str, tuple[str, ...]] = {
    "h1": ("h1", "async-h1", "httpx"),
    "curl": ("curl", "isahc", "curl_cffi", "curl-cffi"),
    "hyper": ("hyper", "h2", "http2"),
}

DEFAULT_BACKEND = "h1"


def resolve_backend_name(name: str) -> str:
    """Map a backend name or alias to its canonical name.

    Raises:
        ConfigError: If the name is not recognized.
    """
    wanted = name.strip().lower()
    for canonical, aliases in BACKEND_ALIASES.items():
        if wanted in aliases:
            return canonical
    raise ConfigError(f"unrecognized backend {name}")


class BodyKind(str, Enum):
    """Where the request body comes from."""

    LITERAL = "literal"
    FILE = "file"


@dataclass(frozen=True)
class BodySource:
    """Request body source selected on the command line.

    Attributes:
        kind: Literal text or file path.
        value: The literal body text, or the file path.
    """

    kind: BodyKind
    value: str


@dataclass
class LongboardConfig:
    """Configuration for a single longboard invocation.

    Attributes:
        method: HTTP method (case-insensitive on input).
        url: Absolute http or https URL.
        headers: Header (name, value) pairs in command-line order.
        body_source: Explicit body source; None means use piped stdin if any.
        backend: Backend name or alias; normalized to the canonical name.
        cookie_jar: Path of the persistent cookie jar, or None to disable.
        follow_redirects: Whether the backend follows redirects.
        verify_ssl: Whether to verify TLS certificates.
        verbose: Whether to print the request/response trace to stderr.
    """

    method: Method
    url: str

    headers: list[tuple[str, str]] = field(default_factory=list)
    body_source: BodySource | None = None

    backend: str = DEFAULT_BACKEND
    cookie_jar: Path | None = None

    follow_redirects: bool = False
    verify_ssl: bool = True

    verbose: bool = False

    def __post_init__(self) -> None:
        """Normalize and validate configuration values."""
        if not isinstance(self.method, Method):
            try:
                self.method = Method.parse(self.method)
            except ValueError as e:
                raise ConfigError(str(e)) from e

        self.backend = resolve_backend_name(self.backend)

        parts = urlsplit(self.url)
        if parts.scheme.lower() not in ("http", "https"):
            raise ConfigError(f"unsupported URL scheme in {self.url!r}")
        if not parts.hostname:
            raise ConfigError(f"URL has no host: {self.url!r}")

        if self.cookie_jar is not None:
            self.cookie_jar = Path(self.cookie_jar)
