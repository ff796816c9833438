"""Failure taxonomy for fetch-and-hash jobs."""

from __future__ import annotations


class DigestError(Exception):
    """Base class for failures while digesting a single URL."""

    def __init__(self, message: str, url: str | None = None, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.cause = cause


class HttpError(DigestError):
    """Raised on transport failure or when the remote answers with status >= 400."""

    def __init__(
        self,
        message: str,
        url: str | None = None,
        cause: BaseException | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, url=url, cause=cause)
        self.status_code = status_code


class ByteError(DigestError):
    """Raised when the response body cannot be read."""


class HashError(DigestError):
    """Raised when the digest of a body cannot be computed."""
