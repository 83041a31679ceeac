"""CLI entry point for the hindsight scraper."""

from __future__ import annotations

import asyncio
import logging
import sys

import click

from hindsight_scraper.config import load_config
from hindsight_scraper.environment import Environment
from hindsight_scraper.errors import CacheWriteFailed, ConfigMissing, ScraperError
from hindsight_scraper.models.records import PipelineResult
from hindsight_scraper.pipeline import clean_cache, is_clean_mode, run_scraper

log = logging.getLogger(__name__)


def _echo_result(result: PipelineResult) -> None:
    click.echo(f"Source:        {result.state.value}")
    if result.total_fetched:
        click.echo(f"Total events:  {result.total_fetched}")
    click.echo(f"Eligible:      {len(result.events)}")
    click.echo(f"Transactions:  {len(result.transactions)}")
    if result.failed_resolutions:
        click.echo(f"Unresolved:    {result.failed_resolutions}")


@click.command()
@click.argument("mode", required=False, default="run")
@click.option("-c", "--config", "config_path", default=None, help="Path to config TOML file")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def cli(mode: str, config_path: str | None, verbose: bool) -> None:
    """hindsight-scraper - cache MEV-Share history for Uniswap events.

    MODE "clean" or "delete" removes the cache file; anything else runs the
    scraper, replaying the cache when one exists.
    """
    cfg = load_config(config_path)

    level = logging.DEBUG if verbose or cfg.log_level.lower() == "debug" else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if is_clean_mode(mode):
        deleted = asyncio.run(clean_cache(cfg))
        click.echo("Cache deleted." if deleted else "No cache to delete.")
        return

    try:
        env = Environment.from_config(cfg)
    except ConfigMissing as exc:
        click.echo(f"Error: {exc}", err=True)
        click.echo("Set HINDSIGHT_RPC_URL_HTTP and HINDSIGHT_AUTH_SIGNER_PRIVATE_KEY "
                   "or the [ethereum] section of the config.", err=True)
        sys.exit(1)

    try:
        result = asyncio.run(run_scraper(cfg, env))
    except CacheWriteFailed as exc:
        log.error("Cache write failed: %s", exc)
        if exc.result is not None:
            _echo_result(exc.result)
        sys.exit(1)
    except ScraperError as exc:
        log.error("Scraper failed: %s", exc)
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    _echo_result(result)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
