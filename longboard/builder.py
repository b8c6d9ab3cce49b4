"""Request construction from command-line configuration."""

from __future__ import annotations

import logging
import sys
from typing import BinaryIO

from .config import BodyKind, BodySource, LongboardConfig
from .models import BodySourceError, Headers, Request

logger = logging.getLogger(__name__)


def parse_header(text: str) -> tuple[str, str]:
    """Split a ``KEY=value`` argument on the first ``=``.

    Raises:
        ValueError: If no ``=`` is present, the name is empty, or the
            text is not ASCII.
    """
    name, sep, value = text.partition("=")
    if not sep:
        raise ValueError(f"invalid KEY=value: no `=` found in `{text}`")
    if not name.strip():
        raise ValueError(f"invalid KEY=value: empty header name in `{text}`")
    if not text.isascii():
        raise ValueError(f"invalid KEY=value: header must be ASCII in `{text}`")
    return name.strip(), value


def read_body(source: BodySource) -> bytes:
    """Resolve an explicit body source to bytes.

    Raises:
        BodySourceError: If the body file cannot be read.
    """
    if source.kind is BodyKind.LITERAL:
        return source.value.encode("utf-8")

    try:
        with open(source.value, "rb") as f:
            return f.read()
    except FileNotFoundError as e:
        raise BodySourceError(source.value, "no such file") from e
    except IsADirectoryError as e:
        raise BodySourceError(source.value, "is a directory") from e
    except OSError as e:
        raise BodySourceError(source.value, e.strerror or str(e)) from e


def read_stdin_body(stdin: BinaryIO | None = None) -> bytes | None:
    """Read the whole of piped standard input.

    Returns None when stdin is attached to a terminal or closed.
    """
    if stdin is None:
        if sys.stdin is None or sys.stdin.closed:
            return None
        stream = sys.stdin
        if stream.isatty():
            return None
        stdin = getattr(stream, "buffer", None)
        if stdin is None:
            return stream.read().encode("utf-8")
    data = stdin.read()
    if isinstance(data, str):
        return data.encode("utf-8")
    return data


def render_cookie_header(cookies: dict[str, str]) -> str:
    """Render a name/value dict as a Cookie header value."""
    return "; ".join(f"{name}={value}" for name, value in cookies.items())


def build_request(
    config: LongboardConfig,
    stdin: BinaryIO | None = None,
    cookies: dict[str, str] | None = None,
) -> Request:
    """Assemble the request for one invocation.

    Args:
        config: Parsed command-line configuration.
        stdin: Body stream used when no body source is given. Defaults to
            the process stdin when it is not a terminal.
        cookies: Cookies from the jar to send with the request.

    Returns:
        Request object.

    Raises:
        BodySourceError: If the body file cannot be read.
    """
    headers = Headers()
    for name, value in config.headers:
        headers[name] = value

    if cookies:
        if "cookie" in headers:
            logger.debug("Cookie header given explicitly, not attaching jar cookies")
        else:
            headers["Cookie"] = render_cookie_header(cookies)

    if config.body_source is not None:
        body = read_body(config.body_source)
    else:
        body = read_stdin_body(stdin)

    return Request(
        method=config.method,
        url=config.url,
        headers=headers,
        body=body,
    )
