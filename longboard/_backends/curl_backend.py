"""curl_cffi-based HTTP backend."""

from __future__ import annotations

from http import HTTPStatus
from typing import Any

from ..models import Headers, Request, Response, TransportError
from .base import BaseBackend

# Optional curl_cffi import
try:
    from curl_cffi import CurlError
    from curl_cffi.requests import Session
    CURL_AVAILABLE = True
except ImportError:
    CURL_AVAILABLE = False
    CurlError = None
    Session = None


# CURLINFO_HTTP_VERSION values
_HTTP_VERSIONS = {
    1: "HTTP/1.0",
    2: "HTTP/1.1",
    3: "HTTP/2",
    4: "HTTP/2",
    30: "HTTP/3",
}


class CurlBackend(BaseBackend):
    """curl_cffi wrapper, sending requests through libcurl."""

    name = "curl"

    def __init__(
        self,
        follow_redirects: bool = False,
        verify_ssl: bool = True,
    ):
        """Initialize curl backend.

        Args:
            follow_redirects: Whether to follow redirects.
            verify_ssl: Whether to verify SSL certificates.

        Raises:
            ImportError: If curl_cffi is not installed.
        """
        if not CURL_AVAILABLE:
            raise ImportError(
                "curl_cffi is required for curl backend. "
                "Install with: pip install curl_cffi"
            )
        super().__init__(follow_redirects=follow_redirects, verify_ssl=verify_ssl)
        self._session: Session | None = None

    def _get_session(self) -> Session:
        """Get or create session (lazy initialization)."""
        if self._session is None:
            self._session = Session(verify=self._verify_ssl)
        return self._session

    def send(self, request: Request) -> Response:
        """Execute HTTP request.

        Raises:
            TransportError: On connection/transport errors.
        """
        try:
            session = self._get_session()
            resp = session.request(
                method=request.method.value,
                url=request.url,
                headers=dict(request.headers.items()),
                data=request.body,
                allow_redirects=self._follow_redirects,
            )
        except CurlError as e:
            raise TransportError(str(e), original_error=e) from e
        except UnicodeEncodeError as e:
            raise TransportError(f"cannot encode request: {e}", original_error=e) from e

        return self._convert_response(resp, request)

    def _convert_response(self, resp: Any, request: Request) -> Response:
        """Convert curl_cffi response to our Response model."""
        reason = getattr(resp, "reason", "") or ""
        if not reason:
            try:
                reason = HTTPStatus(resp.status_code).phrase
            except ValueError:
                reason = ""

        elapsed = getattr(resp, "elapsed", 0.0)
        if hasattr(elapsed, "total_seconds"):
            elapsed = elapsed.total_seconds()

        return Response(
            status_code=resp.status_code,
            reason=reason,
            headers=Headers(resp.headers.items()),
            set_cookies=list(resp.headers.get_list("set-cookie")),
            content=resp.content,
            url=str(resp.url),
            http_version=_HTTP_VERSIONS.get(getattr(resp, "http_version", 0), "HTTP/1.1"),
            elapsed=float(elapsed or 0.0),
            request=request,
        )

    def close(self) -> None:
        """Close session."""
        if self._session:
            self._session.close()
            self._session = None
        super().close()
