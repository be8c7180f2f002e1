"""Click CLI for imgcache — inspect fingerprints and maintain a disk cache."""

from __future__ import annotations

import asyncio
import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from imgcache.config.hierarchy import load_config_hierarchy
from imgcache.config.schema import CacheConfig
from imgcache.errors.exceptions import ImgCacheError

console = Console()
error_console = Console(stderr=True)


def _setup_logging(verbosity: int) -> None:
    """Configure logging based on verbosity level."""
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_time=False, show_path=False)],
    )


def _load_config(**overrides: object) -> CacheConfig:
    try:
        return CacheConfig.from_mapping(load_config_hierarchy(**overrides))
    except ImgCacheError as e:
        error_console.print(f"[red]Invalid configuration:[/red] {e}")
        sys.exit(1)


def _open_manager(config: CacheConfig):
    from imgcache.cache.manager import ImageCacheManager

    try:
        return ImageCacheManager(config)
    except ImgCacheError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)


@click.group()
@click.version_option(package_name="imgcache")
def cli() -> None:
    """imgcache — Fingerprint and expire cached images."""


@cli.command()
@click.argument("request_path")
@click.option("--full-path", type=str, default=None, help="Resolved path (defaults to REQUEST_PATH).")
@click.option("-q", "--query", type=str, default="", help="Processing-instruction querystring.")
@click.option("--timeout", type=float, default=None, help="Remote probe timeout in seconds.")
@click.option(
    "--include-query", is_flag=True, default=False, help="Hash the querystring into the key."
)
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug).")
def fingerprint(
    request_path: str,
    full_path: str | None,
    query: str,
    timeout: float | None,
    include_query: bool,
    verbose: int,
) -> None:
    """Print the cached file name for an image request."""
    _setup_logging(verbose)
    from imgcache.cache.freshness import EMPTY_SIGNAL, FreshnessProbe
    from imgcache.cache.keys import generate_cached_file_name

    config = _load_config(
        probe_timeout=timeout,
        key_includes_querystring=include_query or None,
    )
    probe = FreshnessProbe(timeout=config.probe_timeout)
    signal = asyncio.run(probe.probe(request_path))
    name = generate_cached_file_name(
        signal,
        full_path or request_path,
        query,
        include_querystring=config.key_includes_querystring,
    )

    console.print(name)
    if verbose >= 1:
        shown = signal if signal != EMPTY_SIGNAL else "(none)"
        error_console.print(f"Freshness signal: {shown}")


@cli.group()
def cache() -> None:
    """Cache management commands."""


@cache.command("trim")
@click.option("--max-days", type=int, default=None, help="Override the configured max age.")
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug).")
def cache_trim(max_days: int | None, verbose: int) -> None:
    """Remove expired entries from the disk cache."""
    _setup_logging(verbose)
    config = _load_config(max_days=max_days, backend="disk")
    mgr = _open_manager(config)
    try:
        removed = asyncio.run(mgr.trim())
    except ImgCacheError as e:
        error_console.print(f"[red]Error during trim:[/red] {e}")
        sys.exit(1)
    finally:
        mgr.close()
    console.print(f"[green]Removed {removed} expired entries.[/green]")


@cache.command("stats")
def cache_stats() -> None:
    """Show cache statistics."""
    config = _load_config(backend="disk")
    mgr = _open_manager(config)

    table = Table(title="Cache Statistics", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value")

    stats = mgr.stats()
    table.add_row("Location", config.settings.get("cache_dir", "-"))
    table.add_row("Entries", str(stats.entries))
    table.add_row("Size (MB)", f"{stats.size_mb:.1f}")
    table.add_row("Max age (days)", str(config.max_days))
    table.add_row("Browser max age (days)", str(config.browser_max_days))

    console.print(table)
    mgr.close()


@cache.command("clear")
@click.confirmation_option(prompt="Are you sure you want to clear the cache?")
def cache_clear() -> None:
    """Clear all cached images."""
    config = _load_config(backend="disk")
    mgr = _open_manager(config)
    try:
        mgr.clear()
    except ImgCacheError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    finally:
        mgr.close()
    console.print("[green]Cache cleared.[/green]")


def main() -> None:
    """Entry point for the CLI."""
    cli()
