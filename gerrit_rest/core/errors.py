"""
Error classes for the Gerrit REST client.

Every REST failure carries the (code, type, content) triple taken from the
HTTP response, or a locally assigned code for failures detected on the
client side.
"""

import logging
from collections.abc import Callable
from typing import Any

from gerrit_rest.core.htmltext import render_html

logger = logging.getLogger(__name__)

# Status assigned to errors synthesised locally (bad framing, unknown type)
PROTOCOL_ERROR_CODE = 500
# Status assigned when no HTTP response was received at all
TRANSPORT_ERROR_CODE = 0


class GerritError(Exception):
    """Base error class for gerrit-rest errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        result: dict[str, Any] = {"error": self.message}
        if self.details:
            result["details"] = self.details
        return result


class ConfigurationError(GerritError):
    """Invalid client configuration or unresolvable credentials."""


class RESTError(GerritError):
    """
    A failed REST call.

    Attributes:
        code: HTTP status code (or a locally assigned one)
        type: Response Content-Type, verbatim; None when absent
        content: Response body text
        raw: Response body bytes exactly as received (None when the error
            was built from text alone)

    """

    def __init__(
        self,
        code: int,
        content_type: str | None,
        content: str,
        message: str | None = None,
        details: dict | None = None,
        raw: bytes | None = None,
    ):
        super().__init__(message or f"HTTP {code}", details)
        self.code = code
        self.type = content_type
        self.content = content
        self.raw = raw

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        result = super().to_dict()
        result["status"] = self.code
        if self.type:
            result["content_type"] = self.type
        if self.content:
            result["content"] = self.content
        return result

    def as_text(self, html_renderer: Callable[[str], str] | None = render_html) -> str:
        """
        Render the error for humans as ``<code>: <content>``.

        HTML bodies go through ``html_renderer``; pass None to skip HTML
        conversion. Content types that cannot be shown fall back to a
        placeholder. The result always ends in exactly one newline.
        """
        return f"{self.code}: {self._render_content(html_renderer)}".rstrip("\n") + "\n"

    def _render_content(self, html_renderer: Callable[[str], str] | None) -> str:
        content_type = (self.type or "").lower()
        if content_type.startswith("text/plain"):
            return self.content
        if content_type.startswith("text/html") and html_renderer is not None:
            try:
                return html_renderer(self.content)
            except Exception:
                logger.debug("HTML rendering failed for %s error body", self.code, exc_info=True)
        return f"<unconvertable Content-Type '{self.type or ''}'>"


class HTTPStatusError(RESTError):
    """The server answered with a non-2xx status."""


class ProtocolError(RESTError):
    """A 2xx answer whose framing or Content-Type the client cannot decode."""

    def __init__(self, message: str, content_type: str | None, content: str, raw: bytes | None = None):
        super().__init__(PROTOCOL_ERROR_CODE, content_type, content, message=message, raw=raw)

    def _render_content(self, html_renderer: Callable[[str], str] | None) -> str:
        return f"{self.message}\n{self.content}"


class TransportError(RESTError):
    """The request never produced a complete HTTP response (DNS, refused, timeout, cut-off body)."""

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(TRANSPORT_ERROR_CODE, None, "", message=message)
        self.cause = cause

    def _render_content(self, html_renderer: Callable[[str], str] | None) -> str:
        return self.message
