"""
Core layer - REST client, response decoding, and errors.

This layer provides:
- The four-verb RESTClient with realm-scoped Basic authentication
- The response decoder for Gerrit's ``)]}'``-prefixed JSON
- Typed dataclasses for Gerrit entities
"""

from gerrit_rest.core.auth import CredentialSource, NetrcCredentials, StaticCredentials
from gerrit_rest.core.client import DEFAULT_REALM, RESTClient
from gerrit_rest.core.errors import (
    ConfigurationError,
    GerritError,
    HTTPStatusError,
    ProtocolError,
    RESTError,
    TransportError,
)
from gerrit_rest.core.htmltext import render_html
from gerrit_rest.core.response import JSON_PREFIX, Response, decode_response
from gerrit_rest.core.transport import Transport
from gerrit_rest.core.types import AccountInfo, ChangeInfo, GroupInfo, ProjectInfo

__all__ = [
    "DEFAULT_REALM",
    "JSON_PREFIX",
    "AccountInfo",
    "ChangeInfo",
    "ConfigurationError",
    "CredentialSource",
    "GerritError",
    "GroupInfo",
    "HTTPStatusError",
    "NetrcCredentials",
    "ProjectInfo",
    "ProtocolError",
    "RESTClient",
    "RESTError",
    "Response",
    "StaticCredentials",
    "Transport",
    "TransportError",
    "decode_response",
    "render_html",
]
