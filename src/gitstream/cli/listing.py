"""gitstream ls-tree and ls-files commands."""

import click

from gitstream.base import GitStreamError
from gitstream.lsfiles import ls_files as run_ls_files
from gitstream.lstree import ls_tree as run_ls_tree


@click.command("ls-tree")
@click.argument("repo", type=click.Path(exists=True, file_okay=False))
@click.argument("treeish", default="HEAD")
@click.option("--recurse", "-r", is_flag=True, help="Recurse into subtrees")
def ls_tree(repo: str, treeish: str, recurse: bool) -> None:
    """List the contents of TREEISH in REPO."""
    try:
        with run_ls_tree(repo, treeish, recurse=recurse) as objects:
            for obj in objects:
                click.echo(str(obj))
    except GitStreamError as e:
        raise click.ClickException(str(e)) from e


@click.command("ls-files")
@click.argument("repo", type=click.Path(exists=True, file_okay=False))
@click.argument("pattern", required=False)
@click.option(
    "--no-empty-directory", is_flag=True, help="Do not list empty directories"
)
def ls_files(repo: str, pattern: str | None, no_empty_directory: bool) -> None:
    """List the files tracked in REPO."""
    try:
        with run_ls_files(
            repo, files=pattern, no_empty_directory=no_empty_directory
        ) as paths:
            for path in paths:
                click.echo(path)
    except GitStreamError as e:
        raise click.ClickException(str(e)) from e
