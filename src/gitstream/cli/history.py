"""gitstream log command."""

import json
from dataclasses import asdict
from typing import Any

import click

from gitstream.base import Commit, GitStreamError
from gitstream.history import CommitOrder, LogOptions, Scheme, exec_log, render_tagged

ORDERS = {
    "date": CommitOrder.DATE,
    "author-date": CommitOrder.AUTHOR_DATE,
    "topo": CommitOrder.TOPO,
    "reverse": CommitOrder.REVERSE,
}


def commit_to_dict(commit: Commit) -> dict[str, Any]:
    """Convert a commit to a JSON-serializable dict."""
    data = asdict(commit)
    data.pop("has_trailing_newline", None)
    for key, event in (("author", commit.author), ("committer", commit.committer)):
        data[key]["when"] = event.when.isoformat() if event.when else None
    return data


def _render(commit: Commit, output: str) -> str:
    if output == "json":
        return json.dumps(commit_to_dict(commit))
    if output == "raw":
        # render_tagged already ends every line with a newline
        return render_tagged(commit).removesuffix("\n")
    return commit.sha


@click.command("log")
@click.argument("repo", type=click.Path(exists=True, file_okay=False), default=".")
@click.option("--revision", "-r", default=None, help="Revision range to walk")
@click.option("--stats", is_flag=True, help="Include per-file line statistics")
@click.option("--no-merges", is_flag=True, help="Skip merge commits")
@click.option("--first-parent", is_flag=True, help="Follow only first parents")
@click.option(
    "--order",
    type=click.Choice(sorted(ORDERS)),
    default=None,
    help="Commit ordering",
)
@click.option("-m", "show_merges", is_flag=True, help="Show merges once per parent")
@click.option("--path", "file_filter", default=None, help="Limit to a path")
@click.option(
    "--scheme",
    type=click.Choice([s.value for s in Scheme]),
    default=Scheme.TAGGED.value,
    show_default=True,
    help="Output format requested from git",
)
@click.option(
    "--output",
    "-o",
    type=click.Choice(["sha", "json", "raw"]),
    default="sha",
    show_default=True,
    help="How to print each commit",
)
def log(
    repo: str,
    revision: str | None,
    stats: bool,
    no_merges: bool,
    first_parent: bool,
    order: str | None,
    show_merges: bool,
    file_filter: str | None,
    scheme: str,
    output: str,
) -> None:
    """Print the commit history of REPO."""
    options = LogOptions(
        no_merges=no_merges,
        first_parent=first_parent,
        order=ORDERS[order] if order else None,
        m=show_merges,
        stats=stats,
        file_filter=file_filter,
        revision=revision,
        scheme=Scheme(scheme),
    )

    try:
        with exec_log(repo, options) as commits:
            for commit in commits:
                click.echo(_render(commit, output))
    except GitStreamError as e:
        raise click.ClickException(str(e)) from e
