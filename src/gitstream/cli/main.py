"""gitstream CLI main entry point.

This module provides the main CLI interface for gitstream.
"""

import click

from gitstream import __version__
from gitstream.config import settings
from gitstream.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="gitstream")
@click.option(
    "--log-level",
    default=settings.log_level,
    show_default=True,
    help="Logging level (DEBUG, INFO, WARNING, ERROR)",
)
@click.option(
    "--log-format",
    type=click.Choice(["console", "json"]),
    default=settings.log_format,
    show_default=True,
    help="Log output format",
)
def cli(log_level: str, log_format: str) -> None:
    """gitstream - stream git history as structured records."""
    configure_logging(log_level=log_level, log_format=log_format)


# Import and register subcommands
from gitstream.cli.blame import blame  # noqa: E402
from gitstream.cli.history import log  # noqa: E402
from gitstream.cli.listing import ls_files, ls_tree  # noqa: E402

cli.add_command(log)
cli.add_command(blame)
cli.add_command(ls_tree)
cli.add_command(ls_files)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
