"""Service protocols defining the substitutable fetch and digest capabilities."""

from __future__ import annotations

from typing import Protocol


class FetcherProtocol(Protocol):
    """Retrieves the full body of a URL.

    Implementations raise ``HttpError`` for transport failures and error
    statuses, and ``ByteError`` when the body cannot be read.
    """

    timeout: float

    def fetch(self, url: str) -> bytes: ...


class HasherProtocol(Protocol):
    """Turns a response body into a hex-encoded digest."""

    name: str

    def digest(self, body: bytes) -> str: ...
