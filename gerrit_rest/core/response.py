"""
Response decoding for the Gerrit REST API.

Gerrit prefixes every JSON body with ``)]}'`` and a newline so the payload
cannot be executed as a script from another origin. The decoder checks the
status first, then dispatches on Content-Type.
"""

import json
from dataclasses import dataclass
from email.message import Message
from typing import Any

from gerrit_rest.core.errors import HTTPStatusError, ProtocolError

JSON_PREFIX = ")]}'"
# The prefix plus the newline that follows it
JSON_PREFIX_LENGTH = len(JSON_PREFIX) + 1


@dataclass(frozen=True)
class Response:
    """A completed HTTP exchange as seen by the decoder."""

    status: int
    content_type: str | None
    body: bytes = b""

    @property
    def charset(self) -> str:
        """Charset from the Content-Type parameters (UTF-8 when missing)."""
        if not self.content_type:
            return "utf-8"
        msg = Message()
        msg["Content-Type"] = self.content_type
        return msg.get_content_charset() or "utf-8"

    @property
    def text(self) -> str:
        """Body decoded with the declared charset."""
        try:
            return self.body.decode(self.charset, errors="replace")
        except LookupError:
            return self.body.decode("utf-8", errors="replace")


def decode_response(
    code: int | str,
    content_type: str | None,
    content: str,
    raw: bytes | None = None,
) -> Any:
    """
    Turn a completed response into a Python value.

    Args:
        code: HTTP status code
        content_type: Content-Type header value, or None when absent
        content: Response body text
        raw: Response body bytes, attached unmodified to any error raised

    Returns:
        The parsed JSON value, the plain-text body, or None when the
        response has no Content-Type

    Raises:
        HTTPStatusError: Status does not start with "2"
        ProtocolError: JSON body without the ``)]}'`` prefix or with a
            malformed payload, or an unrecognised Content-Type

    """
    if not str(code).startswith("2"):
        raise HTTPStatusError(int(code), content_type, content, raw=raw)

    if content_type is None:
        return None

    kind = content_type.lower()
    if kind.startswith("application/json"):
        if not content.startswith(JSON_PREFIX):
            raise ProtocolError(f"Missing \"{JSON_PREFIX}\" prefix for JSON content", content_type, content, raw)
        try:
            return json.loads(content[JSON_PREFIX_LENGTH:])
        except json.JSONDecodeError as e:
            raise ProtocolError(f"Invalid JSON response: {e}", content_type, content, raw) from e
    if kind.startswith("text/plain"):
        return content

    raise ProtocolError(f"Unrecognized Content-Type '{content_type}'", content_type, content, raw)


def decode(response: Response) -> Any:
    """Decode a :class:`Response` (see :func:`decode_response`)."""
    return decode_response(response.status, response.content_type, response.text, response.body)
