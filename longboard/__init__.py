"""longboard: a command-line HTTP client over swappable backends.

The tool parses a method and URL plus optional headers and body, sends one
request through httpx (HTTP/1.1 or HTTP/2) or curl_cffi, and prints the
response. An optional cookie jar file keeps persistent cookies between
invocations.

Basic usage:

    $ longboard get https://example.com
    $ longboard post https://httpbin.org/post -b hello -h X-Trace=1 -c curl
    $ longboard get https://example.com/login -j cookies.jsonl

Programmatic usage:

    from longboard import LongboardConfig, build_request, get_backend

    config = LongboardConfig(method="get", url="https://example.com")
    with get_backend(config.backend) as backend:
        response = backend.send(build_request(config))
    print(response.status_code, response.text)
"""

__version__ = "0.1.0"

from ._backends import BaseBackend, get_backend
from .builder import build_request, parse_header
from .config import BodyKind, BodySource, LongboardConfig
from .cookie_jar import CookieJar, CookieJarEntry
from .models import (
    Method,
    Headers,
    Request,
    Response,
    LongboardError,
    ConfigError,
    BodySourceError,
    CookieJarError,
    TransportError,
)

__all__ = [
    # Configuration
    "LongboardConfig",
    "BodyKind",
    "BodySource",
    # Models
    "Method",
    "Headers",
    "Request",
    "Response",
    # Exceptions
    "LongboardError",
    "ConfigError",
    "BodySourceError",
    "CookieJarError",
    "TransportError",
    # Request construction and sending
    "build_request",
    "parse_header",
    "BaseBackend",
    "get_backend",
    # Cookies
    "CookieJar",
    "CookieJarEntry",
    # Version
    "__version__",
]
