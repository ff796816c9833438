"""Response body checksum computation."""

from __future__ import annotations

import hashlib


def compute_body_checksum(body: bytes) -> str:
    """Compute MD5 hex digest of a response body.

    Returns lowercase 32-character hex string.
    """
    return hashlib.md5(body).hexdigest()


class Md5Hasher:
    """Default hasher: MD5 over the full body."""

    name = "md5"

    def digest(self, body: bytes) -> str:
        return compute_body_checksum(body)
