"""gitstream blame command."""

import click

from gitstream.base import GitStreamError
from gitstream.blame import blame as run_blame


@click.command("blame")
@click.argument("repo", type=click.Path(exists=True, file_okay=False))
@click.argument("file_path")
@click.option("--revision", "-r", default=None, help="Revision to blame at")
def blame(repo: str, file_path: str, revision: str | None) -> None:
    """Show which commit last touched each line of FILE_PATH."""
    try:
        entries = run_blame(repo, file_path, revision=revision)
    except GitStreamError as e:
        raise click.ClickException(str(e)) from e

    for entry in entries:
        click.echo(f"{entry.sha[:12]} {entry.final_line_no:>5} {entry.line}")
