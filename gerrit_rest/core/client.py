"""
Core REST client for the Gerrit Code Review API.

Handles authentication setup, JSON request encoding, and response decoding
for the four HTTP verbs Gerrit exposes.
"""

import json
import logging
import urllib.parse
from typing import Any

from gerrit_rest.core.auth import CredentialSource, NetrcCredentials
from gerrit_rest.core.errors import ConfigurationError
from gerrit_rest.core.response import decode
from gerrit_rest.core.transport import Transport

logger = logging.getLogger(__name__)

# Configuration
DEFAULT_REALM = "Gerrit Code Review"
JSON_CONTENT_TYPE = "application/json;charset=UTF-8"

# Marks a PUT/POST without a body (distinct from sending JSON null)
_NO_VALUE: Any = object()


class RESTClient:
    """
    Thin client for Gerrit's REST API.

    Every resource path is sent under ``/a`` so Gerrit serves the
    authenticated view of the endpoint.

    Example:
        rest = RESTClient("https://review.example.com", "alice", "http-password")
        project = rest.GET("/projects/myproject")
        rest.PUT("/groups/newgroup", {"description": "New group", "visible_to_all": True})

    """

    def __init__(
        self,
        url: str | urllib.parse.SplitResult | urllib.parse.ParseResult,
        username: str | None = None,
        password: str | None = None,
        *,
        realm: str = DEFAULT_REALM,
        compact_json: bool = True,
        credential_source: CredentialSource | None = None,
        transport: Transport | None = None,
        transport_config: dict[str, Any] | None = None,
    ):
        """
        Initialize the REST client.

        Args:
            url: Gerrit base URL (scheme, host, optional port and path)
            username: HTTP username
            password: HTTP password
            realm: Basic authentication realm the credentials are scoped to
            compact_json: Ask for compact JSON with ``Accept: application/json``
            credential_source: Consulted when neither username nor password
                is given (netrc by default)
            transport: Pre-built transport; ``transport_config`` is ignored
                when given
            transport_config: Keyword arguments for :class:`Transport`
                (timeout, proxies, follow_redirects, ssl_context)

        Raises:
            ConfigurationError: Bad URL, only one of username/password, or
                failed credential lookup

        """
        if not isinstance(url, str):
            url = url.geturl()
        parts = urllib.parse.urlsplit(url)
        if parts.scheme not in ("http", "https") or not parts.hostname:
            raise ConfigurationError(f"Invalid Gerrit URL: {url!r}")

        self._url = url.rstrip("/")
        self._realm = realm
        self._username, password = self._resolve_credentials(
            parts.hostname, username, password, credential_source or NetrcCredentials()
        )

        self._transport = transport or Transport(**(transport_config or {}))
        if compact_json:
            self._transport.add_header("Accept", "application/json")
        self._transport.add_credentials(self._url, realm, self._username, password)

    @staticmethod
    def _resolve_credentials(
        host: str,
        username: str | None,
        password: str | None,
        source: CredentialSource,
    ) -> tuple[str, str]:
        """Apply the both-or-neither rule, falling back to the credential source."""
        if username is not None and password is not None:
            return username, password
        if username is not None or password is not None:
            raise ConfigurationError("The arguments 'username' and 'password' must be both set or both omitted.")
        logger.debug("No credentials given, looking up %s", host)
        return source.lookup(host)

    @property
    def url(self) -> str:
        """Base URL of the Gerrit server."""
        return self._url

    @property
    def realm(self) -> str:
        """Authentication realm."""
        return self._realm

    @property
    def username(self) -> str:
        """User the client authenticates as."""
        return self._username

    @property
    def transport(self) -> Transport:
        """Underlying HTTP transport."""
        return self._transport

    def _build_url(self, resource: str) -> str:
        """Build the authenticated URL for a resource path."""
        return f"{self._url}/a{resource}"

    def _request(self, method: str, resource: str, value: Any = _NO_VALUE) -> Any:
        """
        Send one request and decode the answer.

        Args:
            method: HTTP method
            resource: Resource path, e.g. /projects/myproject
            value: JSON-serializable request body (omitted: no body)

        Returns:
            Decoded response value

        Raises:
            HTTPStatusError: On non-2xx answers
            ProtocolError: On answers the decoder cannot interpret
            TransportError: When no answer was received

        """
        body = None
        headers = {}
        if value is not _NO_VALUE:
            body = json.dumps(value, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
            headers["Content-Type"] = JSON_CONTENT_TYPE

        response = self._transport.request(method, self._build_url(resource), body, headers)
        return decode(response)

    # =========================================================================
    # HTTP Methods
    # =========================================================================

    def GET(self, resource: str) -> Any:
        """Make a GET request."""
        return self._request("GET", resource)

    def DELETE(self, resource: str) -> Any:
        """Make a DELETE request."""
        return self._request("DELETE", resource)

    def PUT(self, resource: str, value: Any = _NO_VALUE) -> Any:
        """Make a PUT request, JSON-encoding ``value`` as the body."""
        return self._request("PUT", resource, value)

    def POST(self, resource: str, value: Any = _NO_VALUE) -> Any:
        """Make a POST request, JSON-encoding ``value`` as the body."""
        return self._request("POST", resource, value)

    get = GET
    delete = DELETE
    put = PUT
    post = POST
