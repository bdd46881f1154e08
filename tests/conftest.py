"""Pytest configuration - loads .env for live tests and provides test doubles."""

import base64
import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path

import pytest
from dotenv import load_dotenv

from gerrit_rest.core.auth import StaticCredentials
from gerrit_rest.core.client import RESTClient
from gerrit_rest.core.response import JSON_PREFIX, Response
from gerrit_rest.core.transport import Transport

# Load .env from project root
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)

BASE_URL = "https://review.example.com"
USERNAME = "alice"
PASSWORD = "secret"
REALM = "Gerrit Code Review"


def json_response(value, status: int = 200) -> Response:
    """Build a Gerrit-style JSON response."""
    body = f"{JSON_PREFIX}\n{json.dumps(value)}".encode()
    return Response(status, "application/json; charset=UTF-8", body)


# =============================================================================
# Fake Transport
# =============================================================================


class FakeTransport(Transport):
    """Transport that records requests and replays queued responses."""

    def __init__(self, *responses: Response):
        super().__init__()
        self.responses = list(responses)
        self.requests: list[dict] = []
        self.credentials: list[tuple[str, str, str, str]] = []

    def add_credentials(self, uri, realm, username, password):
        self.credentials.append((uri, realm, username, password))
        super().add_credentials(uri, realm, username, password)

    def request(self, method, url, body=None, headers=None):
        self.requests.append(
            {
                "method": method,
                "url": url,
                "body": body,
                "headers": {**self.headers, **(headers or {})},
            }
        )
        if not self.responses:
            raise AssertionError(f"Unexpected request: {method} {url}")
        return self.responses.pop(0)


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def rest(fake_transport):
    """A RESTClient wired to the fake transport."""
    return RESTClient(BASE_URL, USERNAME, PASSWORD, transport=fake_transport)


# =============================================================================
# Local Gerrit stand-in
# =============================================================================


class GerritHandler(BaseHTTPRequestHandler):
    """Answers a few /a/ endpoints behind a Basic auth challenge."""

    routes: dict = {}
    seen: list = []

    def log_message(self, format, *args):
        pass

    def _authorized(self) -> bool:
        expected = base64.b64encode(f"{USERNAME}:{PASSWORD}".encode()).decode()
        return self.headers.get("Authorization") == f"Basic {expected}"

    def _handle(self):
        length = int(self.headers.get("Content-Length") or 0)
        body = self.rfile.read(length) if length else b""
        self.seen.append((self.command, self.path, self.headers, body))

        if not self._authorized():
            self._send(401, "text/plain", b"Unauthorized", {"WWW-Authenticate": f'Basic realm="{REALM}"'})
            return

        route = self.routes.get((self.command, self.path))
        if route is None:
            self._send(404, "text/plain", b"Not found")
            return
        status, content_type, payload, extra = route
        self._send(status, content_type, payload, extra)

    def _send(self, status, content_type, payload, extra=None):
        self.send_response(status)
        if content_type:
            self.send_header("Content-Type", content_type)
        extra = {"Content-Length": str(len(payload)), **(extra or {})}
        for name, value in extra.items():
            self.send_header(name, value)
        self.end_headers()
        self.wfile.write(payload)

    do_GET = do_PUT = do_POST = do_DELETE = _handle


@pytest.fixture
def gerrit_server():
    """Run a local Gerrit stand-in; yields (base_url, routes, seen)."""
    routes: dict = {}
    seen: list = []
    handler = type("Handler", (GerritHandler,), {"routes": routes, "seen": seen})
    server = ThreadingHTTPServer(("127.0.0.1", 0), handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.server_address[1]}", routes, seen
    finally:
        server.shutdown()
        server.server_close()


@pytest.fixture
def static_credentials():
    return StaticCredentials({"review.example.com": (USERNAME, PASSWORD)})
