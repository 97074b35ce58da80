"""CLI commands for maintaining the icon cache"""

import asyncio
import logging
from datetime import timedelta

import typer

from favicache.cache.filesystem import FilesystemIconCache
from favicache.configs import settings as config
from favicache.exceptions import CacheStorageError
from favicache.providers import icons
from favicache.utils.domain import normalize_domain

logger = logging.getLogger(__name__)

cache_dir_option = typer.Option(
    config.icons.cache_dir,
    "--cache-dir",
    help="Directory holding the cached icons",
)

cache_cmd = typer.Typer(
    name="cache",
    help="Commands for inspecting and cleaning the icon cache",
)


@cache_cmd.command()
def prune(
    cache_dir: str = cache_dir_option,
    ttl_days: int = typer.Option(
        config.icons.cache_ttl_days, "--ttl-days", help="Age in days of stale entries"
    ),
):
    """Remove stale entries and leftover temporary files from the cache directory"""
    cache = FilesystemIconCache(cache_dir=cache_dir, ttl=timedelta(days=ttl_days))
    try:
        removed = cache.prune()
    except CacheStorageError as e:
        logger.error(f"Pruning the icon cache failed: {e}")
        raise typer.Exit(code=1)
    typer.echo(f"Removed {removed} files from {cache_dir}")


@cache_cmd.command()
def lookup(
    url: str = typer.Argument(..., help="Domain or URL to look up"),
    refresh: bool = typer.Option(
        False, "--refresh", help="Evict the cached entry first and ask the favicon services"
    ),
):
    """Resolve the icon of a domain through the cache and print where it came from"""
    try:
        asyncio.run(_lookup(url, refresh))
    except CacheStorageError as e:
        logger.error(f"Looking up {url} failed: {e}")
        raise typer.Exit(code=1)


async def _lookup(url: str, refresh: bool) -> None:
    await icons.init_provider()
    try:
        provider = icons.get_provider()
        domain = normalize_domain(url)
        if refresh and domain:
            provider.cache.evict(domain)

        source = await provider.get_icon(url)
        if source is None:
            typer.echo(f"No icon available for '{domain}', the default icon is missing")
            raise typer.Exit(code=1)

        typer.echo(
            f"domain={domain or '-'} origin={source.origin.value} "
            f"size={len(source.content)} sha1={source.fingerprint} "
            f"last_modified={source.last_modified.isoformat()}"
        )
    finally:
        await icons.shutdown_provider()
