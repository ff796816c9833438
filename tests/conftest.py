"""Shared test fixtures for the URL digester."""

from __future__ import annotations

import os
import threading
import time
from dataclasses import dataclass
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import TYPE_CHECKING, Any

import pytest

if TYPE_CHECKING:
    from collections.abc import Iterator


class StubFetcher:
    """In-memory fetcher: returns bodies by URL, raises mapped exceptions.

    ``body_sequences`` hands out a different body on each call for a URL,
    in call order.
    """

    def __init__(
        self,
        bodies: dict[str, bytes] | None = None,
        errors: dict[str, Exception] | None = None,
        latency: float = 0.0,
        default_body: bytes = b"",
        body_sequences: dict[str, list[bytes]] | None = None,
    ) -> None:
        self.timeout = 5.0
        self.bodies = bodies or {}
        self.errors = errors or {}
        self.latency = latency
        self.default_body = default_body
        self.body_sequences = {url: list(seq) for url, seq in (body_sequences or {}).items()}
        self.calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()

    def fetch(self, url: str) -> bytes:
        with self._lock:
            self.calls.append(url)
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
            sequenced = self.body_sequences[url].pop(0) if self.body_sequences.get(url) else None
        try:
            if self.latency:
                time.sleep(self.latency)
            if url in self.errors:
                raise self.errors[url]
            if sequenced is not None:
                return sequenced
            return self.bodies.get(url, self.default_body)
        finally:
            with self._lock:
                self.in_flight -= 1


@dataclass(frozen=True)
class _Route:
    status: int = 200
    body: bytes = b""
    declared_length: int | None = None
    header_delay: float = 0.0
    byte_delay: float = 0.0


class _RouteHandler(BaseHTTPRequestHandler):
    """Serves the fixture's routes table, optionally stalling or trickling bytes."""

    server: _RouteServer

    def do_GET(self) -> None:  # noqa: N802
        route = self.server.routes.get(self.path, _Route(status=404, body=b"not found"))
        try:
            if route.header_delay:
                time.sleep(route.header_delay)
            self.send_response(route.status)
            self.send_header("Content-Type", "application/octet-stream")
            self.send_header("Content-Length", str(route.declared_length or len(route.body)))
            self.end_headers()
            if not route.byte_delay:
                self.wfile.write(route.body)
                return
            self.wfile.flush()
            for offset in range(len(route.body)):
                time.sleep(route.byte_delay)
                self.wfile.write(route.body[offset : offset + 1])
                self.wfile.flush()
        except (BrokenPipeError, ConnectionResetError):
            # Client gave up on a slow route.
            return

    def log_message(self, format: str, *args: object) -> None:  # noqa: A002
        pass


class _RouteServer(ThreadingHTTPServer):
    daemon_threads = True

    def __init__(self) -> None:
        super().__init__(("127.0.0.1", 0), _RouteHandler)
        self.routes: dict[str, _Route] = {}

    @property
    def base_url(self) -> str:
        host, port = self.server_address[:2]
        return f"http://{host}:{port}"

    def add_route(self, path: str, **route: Any) -> str:
        """Register a route and return its absolute URL."""
        self.routes[path] = _Route(**route)
        return f"{self.base_url}{path}"


@pytest.fixture
def http_server() -> Iterator[_RouteServer]:
    """Provide a local threaded HTTP server with configurable routes."""
    server = _RouteServer()
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield server
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)


@pytest.fixture
def random_body() -> bytes:
    """32 random bytes used as a response body."""
    return os.urandom(32)


@pytest.fixture
def stub_fetcher() -> StubFetcher:
    return StubFetcher()


@pytest.fixture
def make_fetcher() -> type[StubFetcher]:
    """Provide the StubFetcher class for tests that need custom bodies or errors."""
    return StubFetcher
