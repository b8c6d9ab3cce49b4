"""httpx-based HTTP backends (HTTP/1.1 and HTTP/2)."""

from __future__ import annotations

import httpx

from ..models import Headers, Request, Response, TransportError
from .base import BaseBackend


class HttpxBackend(BaseBackend):
    """Simple httpx wrapper for HTTP requests.

    The client session is created lazily on first use. With ``http2``
    enabled the ``h2`` package must be installed (``httpx[http2]``).
    """

    name = "h1"

    def __init__(
        self,
        follow_redirects: bool = False,
        verify_ssl: bool = True,
        http2: bool = False,
    ):
        """Initialize httpx backend.

        Args:
            follow_redirects: Whether to follow redirects.
            verify_ssl: Whether to verify SSL certificates.
            http2: Whether to negotiate HTTP/2.
        """
        super().__init__(follow_redirects=follow_redirects, verify_ssl=verify_ssl)
        self._http2 = http2
        self._client: httpx.Client | None = None

    def _get_client(self) -> httpx.Client:
        """Get or create client (lazy initialization)."""
        if self._client is None:
            self._client = httpx.Client(
                verify=self._verify_ssl,
                http2=self._http2,
                follow_redirects=self._follow_redirects,
                timeout=None,
            )
        return self._client

    def send(self, request: Request) -> Response:
        """Execute HTTP request.

        Raises:
            TransportError: On connection/transport errors.
        """
        try:
            client = self._get_client()
            resp = client.request(
                method=request.method.value,
                url=request.url,
                headers=list(request.headers.items()),
                content=request.body,
            )
        except httpx.HTTPError as e:
            raise TransportError(str(e) or type(e).__name__, original_error=e) from e
        except UnicodeEncodeError as e:
            raise TransportError(f"cannot encode request: {e}", original_error=e) from e

        return self._convert_response(resp, request)

    def _convert_response(self, httpx_resp: httpx.Response, request: Request) -> Response:
        """Convert httpx.Response to our Response model.

        Redirect responses are converted too, so cookies set on the way to
        the final URL are not lost.
        """
        return Response(
            status_code=httpx_resp.status_code,
            reason=httpx_resp.reason_phrase,
            headers=Headers(httpx_resp.headers.items()),
            set_cookies=httpx_resp.headers.get_list("set-cookie"),
            content=httpx_resp.content,
            url=str(httpx_resp.url),
            http_version=httpx_resp.http_version,
            elapsed=httpx_resp.elapsed.total_seconds(),
            request=request,
            history=[self._convert_response(r, request) for r in httpx_resp.history],
        )

    def close(self) -> None:
        """Close client."""
        if self._client:
            self._client.close()
            self._client = None
        super().close()


class Http2Backend(HttpxBackend):
    """httpx with HTTP/2 negotiation enabled."""

    name = "hyper"

    def __init__(self, follow_redirects: bool = False, verify_ssl: bool = True):
        super().__init__(
            follow_redirects=follow_redirects,
            verify_ssl=verify_ssl,
            http2=True,
        )
