"""Digest core -- checksum computation and the failure taxonomy."""

from __future__ import annotations

from url_digester.core.checksum import Md5Hasher, compute_body_checksum
from url_digester.core.errors import ByteError, DigestError, HashError, HttpError

__all__ = [
    # checksum
    "Md5Hasher",
    "compute_body_checksum",
    # errors
    "ByteError",
    "DigestError",
    "HashError",
    "HttpError",
]
