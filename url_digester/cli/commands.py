"""CLI command implementations for the URL digester."""

from __future__ import annotations

import json

import click

from url_digester.models.config import Config, resolve_parallel
from url_digester.services.digester import Digester
from url_digester.services.http_fetcher import HttpFetcher
from url_digester.utils.logger import configure_logging


def _get_config() -> Config:
    """Load configuration from the environment and .env file."""
    return Config()


def _print_results(results: dict[str, str], output_format: str, sort: bool) -> None:
    """Print one ``<url>: <result>`` line per URL, or the mapping as JSON."""
    if output_format == "json":
        click.echo(json.dumps(results, indent=2, sort_keys=sort))
        return
    urls = sorted(results) if sort else list(results)
    for url in urls:
        click.echo(f"{url}: {results[url]}")


@click.command()
@click.option("--parallel", default=None, type=int, help="Maximum concurrent requests")
@click.option("--timeout", default=None, type=float, help="Per-request timeout in seconds")
@click.option(
    "--output-format",
    default="text",
    type=click.Choice(["text", "json"]),
    help="Output format",
)
@click.option("--sort/--no-sort", default=False, help="Print URLs in sorted order")
@click.argument("urls", nargs=-1)
def digest(
    parallel: int | None,
    timeout: float | None,
    output_format: str,
    sort: bool,
    urls: tuple[str, ...],
) -> None:
    """Fetch URLS concurrently and print the MD5 digest of each response body."""
    config = _get_config()
    configure_logging(config.log_level)

    fetcher = HttpFetcher(timeout=config.request_timeout, user_agent=config.user_agent)
    digester = Digester(resolve_parallel(parallel, config.parallel), fetcher=fetcher)
    if timeout is not None and timeout > 0:
        digester.set_timeout(timeout)

    try:
        results = digester.run(list(urls))
    finally:
        fetcher.close()

    _print_results(results, output_format, sort)
