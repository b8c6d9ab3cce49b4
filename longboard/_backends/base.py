"""Abstract backend interface for sending one HTTP request."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from ..models import Request, Response


class BaseBackend(ABC):
    """Abstract base class for backend implementations.

    A backend wraps an HTTP client library, sends a ``Request`` and
    converts the library's response into a ``Response``. Failures raised by
    the library are reported as ``TransportError``.
    """

    #: Canonical backend name, as accepted by ``-c``.
    name: str = ""

    def __init__(
        self,
        follow_redirects: bool = False,
        verify_ssl: bool = True,
    ):
        """Initialize backend.

        Args:
            follow_redirects: Whether to follow redirects.
            verify_ssl: Whether to verify SSL certificates.
        """
        self._follow_redirects = follow_redirects
        self._verify_ssl = verify_ssl
        self._closed = False

    @property
    def is_closed(self) -> bool:
        """Check if backend has been closed."""
        return self._closed

    @abstractmethod
    def send(self, request: Request) -> Response:
        """Execute an HTTP request.

        Args:
            request: The request to execute.

        Returns:
            Response object.

        Raises:
            TransportError: On connection or transport errors.
        """
        raise NotImplementedError

    def close(self) -> None:
        """Release the underlying client session."""
        self._closed = True

    def __enter__(self) -> "BaseBackend":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
