"""CLI entry point for the URL digester."""

from __future__ import annotations

from url_digester.cli.commands import digest

main = digest

__all__ = ["digest", "main"]
