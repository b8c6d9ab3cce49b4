"""Backend implementations, selected by name with ``-c``."""

from __future__ import annotations

from ..config import resolve_backend_name
from .base import BaseBackend
from .curl_backend import CURL_AVAILABLE, CurlBackend
from .httpx_backend import Http2Backend, HttpxBackend

BACKENDS: dict[str, type[BaseBackend]] = {
    "h1": HttpxBackend,
    "curl": CurlBackend,
    "hyper": Http2Backend,
}


def get_backend(
    name: str,
    follow_redirects: bool = False,
    verify_ssl: bool = True,
) -> BaseBackend:
    """Create the backend registered under ``name`` or one of its aliases.

    Raises:
        ConfigError: If the name is not recognized.
    """
    backend_cls = BACKENDS[resolve_backend_name(name)]
    return backend_cls(follow_redirects=follow_redirects, verify_ssl=verify_ssl)


__all__ = [
    "BACKENDS",
    "BaseBackend",
    "CURL_AVAILABLE",
    "CurlBackend",
    "Http2Backend",
    "HttpxBackend",
    "get_backend",
]
