"""requests-based fetcher shared by every worker of a digester."""

from __future__ import annotations

import contextlib
import socket
import threading
import time
from typing import TYPE_CHECKING

import requests
import structlog

from url_digester.core.errors import ByteError, HttpError
from url_digester.models.config import DEFAULT_REQUEST_TIMEOUT

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = structlog.get_logger(__name__)

DEFAULT_USER_AGENT = "url-digester/1.0"

# Body read size; each chunk is checked against the request deadline.
_CHUNK_SIZE = 64 * 1024


def _shutdown_socket(sock: socket.socket) -> None:
    """Wake any thread blocked reading ``sock``; the read then sees EOF."""
    with contextlib.suppress(OSError):
        sock.shutdown(socket.SHUT_RDWR)


@contextlib.contextmanager
def _deadline_watchdog(response: requests.Response, remaining: float) -> Iterator[None]:
    """Cut the response's connection once ``remaining`` seconds have passed.

    Socket timeouts in ``requests`` bound each read separately, so a server
    trickling its body would otherwise hold the worker indefinitely.
    """
    connection = getattr(response.raw, "connection", None)
    sock = getattr(connection, "sock", None)
    if sock is None:
        yield
        return

    timer = threading.Timer(remaining, _shutdown_socket, args=(sock,))
    timer.daemon = True
    timer.start()
    try:
        yield
    finally:
        timer.cancel()


class HttpFetcher:
    """Issues one GET per URL and buffers the whole response body.

    ``timeout`` bounds the whole request, from connecting until the last
    body byte has been read.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        session: requests.Session | None = None,
    ) -> None:
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()
        self.session.headers.update({"User-Agent": user_agent})

    def fetch(self, url: str) -> bytes:
        """GET ``url`` and return its body.

        Raises:
            HttpError: the request could not be completed, the headers did
                not arrive in time, or the remote answered with a status code
                of 400 or above.
            ByteError: the response body could not be read, or was not
                complete before the timeout ran out.
        """
        timeout = self.timeout
        deadline = time.monotonic() + timeout
        try:
            response = self.session.get(url, timeout=timeout, stream=True)
        except requests.RequestException as exc:
            raise HttpError(str(exc) or type(exc).__name__, url=url, cause=exc) from exc

        with response:
            if response.status_code >= 400:
                raise HttpError(
                    f"remote returned rsp code {response.status_code}",
                    url=url,
                    status_code=response.status_code,
                )
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise HttpError(f"timed out after {timeout}s waiting for response headers", url=url)
            body = self._read_body(url, response, remaining, deadline, timeout)

        logger.debug("body_fetched", url=url, status_code=response.status_code, size=len(body))
        return body

    def _read_body(
        self,
        url: str,
        response: requests.Response,
        remaining: float,
        deadline: float,
        timeout: float,
    ) -> bytes:
        chunks: list[bytes] = []
        try:
            with _deadline_watchdog(response, remaining):
                for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                    chunks.append(chunk)
                    if time.monotonic() >= deadline:
                        break
        except (requests.RequestException, OSError) as exc:
            if time.monotonic() >= deadline:
                raise ByteError(
                    f"timed out after {timeout}s reading response body", url=url, cause=exc
                ) from exc
            raise ByteError(f"failed to read response body ({exc})", url=url, cause=exc) from exc

        # A cut connection can also look like a clean end of a close-delimited body.
        if time.monotonic() >= deadline:
            raise ByteError(f"timed out after {timeout}s reading response body", url=url)
        return b"".join(chunks)

    def close(self) -> None:
        self.session.close()
