"""Data models for the URL digester."""

from url_digester.models.config import Config, resolve_parallel
from url_digester.models.digest_job import DigestJob, DigestResult

__all__ = [
    "Config",
    "DigestJob",
    "DigestResult",
    "resolve_parallel",
]
