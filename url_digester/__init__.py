"""Concurrent URL fetcher that reports the MD5 digest of each response body."""

from __future__ import annotations

from url_digester.services.digester import DEFAULT_TIMEOUT, Digester

__all__ = ["DEFAULT_TIMEOUT", "Digester"]

__version__ = "1.0.0"
