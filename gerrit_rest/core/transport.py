"""
HTTP transport built on urllib.

Returns every HTTP answer, including error statuses, as a Response so that
classification happens in one place (the response decoder). Only failures
that never produce a response are raised.
"""

import http.client
import logging
import ssl
import urllib.error
import urllib.request

from gerrit_rest.core.errors import TransportError
from gerrit_rest.core.response import Response

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60


def _read_body(error: urllib.error.HTTPError) -> bytes:
    """Read an error response body, wrapping a dropped connection."""
    try:
        return error.read()
    except (http.client.HTTPException, OSError) as e:
        raise TransportError(f"Incomplete response: {e!r}", cause=e) from e


class _NoRedirectHandler(urllib.request.HTTPRedirectHandler):
    """Surface 3xx answers instead of following them."""

    def redirect_request(self, req, fp, code, msg, headers, newurl):
        return None


class Transport:
    """
    Blocking HTTP transport with per-realm Basic authentication.

    Credentials are sent in answer to a ``WWW-Authenticate`` challenge for
    the registered realm, not preemptively.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        proxies: dict[str, str] | None = None,
        follow_redirects: bool = True,
        ssl_context: ssl.SSLContext | None = None,
    ):
        """
        Initialize the transport.

        Args:
            timeout: Socket timeout in seconds for each request
            proxies: Scheme to proxy URL mapping (environment proxies when None)
            follow_redirects: Follow 3xx answers (urllib rules) when True
            ssl_context: TLS context for https URLs

        """
        self.timeout = timeout
        self.follow_redirects = follow_redirects
        self.headers: dict[str, str] = {}
        self._passwords = urllib.request.HTTPPasswordMgr()

        handlers: list[urllib.request.BaseHandler] = [
            urllib.request.ProxyHandler(proxies),
            urllib.request.HTTPBasicAuthHandler(self._passwords),
            urllib.request.HTTPSHandler(context=ssl_context),
        ]
        if not follow_redirects:
            handlers.append(_NoRedirectHandler())
        self._opener = urllib.request.build_opener(*handlers)

    def add_header(self, name: str, value: str) -> None:
        """Send ``name: value`` with every request."""
        self.headers[name] = value

    def add_credentials(self, uri: str, realm: str, username: str, password: str) -> None:
        """Register Basic credentials for ``realm`` on the host:port of ``uri``."""
        self._passwords.add_password(realm, uri, username, password)

    def request(
        self,
        method: str,
        url: str,
        body: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> Response:
        """
        Perform one HTTP request.

        Returns:
            The response, whatever its status

        Raises:
            TransportError: When no response was received

        """
        req = urllib.request.Request(
            url,
            data=body,
            headers={**self.headers, **(headers or {})},
            method=method,
        )
        logger.debug("%s %s", method, url)

        try:
            with self._opener.open(req, timeout=self.timeout) as resp:
                response = Response(resp.status, resp.headers.get("Content-Type"), resp.read())
        except urllib.error.HTTPError as e:
            with e:
                response = Response(e.code, e.headers.get("Content-Type") if e.headers else None, _read_body(e))
        except urllib.error.URLError as e:
            raise TransportError(f"Connection error: {e.reason}", cause=e) from e
        except TimeoutError as e:
            raise TransportError(f"Request timed out after {self.timeout} seconds", cause=e) from e
        except OSError as e:
            raise TransportError(f"Connection error: {e}", cause=e) from e
        except http.client.HTTPException as e:
            raise TransportError(f"Incomplete response: {e!r}", cause=e) from e

        logger.debug("%s %s -> %s %s", method, url, response.status, response.content_type)
        return response
