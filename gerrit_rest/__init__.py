"""
Gerrit REST - A thin wrapper around Gerrit's REST API.

Layers:
- core: REST client, response decoding, errors
- sdk: High-level GerritClient with typed operations
- cli: Command-line interface
"""

from gerrit_rest.core.client import RESTClient
from gerrit_rest.core.errors import GerritError, HTTPStatusError, ProtocolError, RESTError, TransportError
from gerrit_rest.sdk import GerritClient

__version__ = "0.1.0"
__all__ = [
    "GerritClient",
    "GerritError",
    "HTTPStatusError",
    "ProtocolError",
    "RESTClient",
    "RESTError",
    "TransportError",
]
