"""Entrypoint for the command line interface."""

import typer

from favicache.configs.app_configs.config_logging import configure_logging
from favicache.jobs.cache_maintenance import cache_cmd

cli = typer.Typer(no_args_is_help=True, add_completion=False)

# Add the icon cache subcommands
cli.add_typer(cache_cmd, no_args_is_help=True)


@cli.callback()
def setup():
    """CLI Entrypoint"""
    configure_logging()


if __name__ == "__main__":
    cli()
