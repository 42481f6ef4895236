"""Output formats requested from ``git log``.

Two schemes are supported:

- ``TAGGED``: a custom ``--format`` template where every field sits on its
  own line behind a reserved prefix and the free-form message is closed by a
  NUL byte on its own line. Messages pass through untouched.
- ``NATIVE``: git's built-in ``raw`` format, where fields are introduced by
  fixed keywords and the message is indented by four columns.
"""

from datetime import datetime
from enum import Enum

from gitstream.base import Commit, FormatError, Stat

__all__ = [
    "Scheme",
    "build_format",
    "render_tagged",
    "parse_iso_date",
    "format_iso_date",
    "BODY_TERMINATOR",
]

# Line prefixes used in the tagged format string
COMMIT_HASH_PREFIX = "_H:"
TREE_HASH_PREFIX = "_T:"
PARENT_HASHES_PREFIX = "_P:"
AUTHOR_NAME_PREFIX = "_aN:"
AUTHOR_EMAIL_PREFIX = "_aE:"
AUTHOR_DATE_PREFIX = "_aI:"
COMMITTER_NAME_PREFIX = "_cN:"
COMMITTER_EMAIL_PREFIX = "_cE:"
COMMITTER_DATE_PREFIX = "_cI:"
COMMIT_BODY_PREFIX = "_B:"

BODY_TERMINATOR = "\x00"

NATIVE_FORMAT = "raw"


class Scheme(str, Enum):
    """Output scheme requested from git and understood by the decoder."""

    TAGGED = "tagged"
    NATIVE = "native"


def build_format(scheme: Scheme = Scheme.TAGGED) -> str:
    """Construct the value passed to ``git log --format=``.

    Args:
        scheme: Which output scheme to request

    Returns:
        The literal format string
    """
    if scheme is Scheme.NATIVE:
        return NATIVE_FORMAT

    parts = [
        COMMIT_HASH_PREFIX + "%H%n",
        TREE_HASH_PREFIX + "%T%n",
        PARENT_HASHES_PREFIX + "%P%n",
        AUTHOR_NAME_PREFIX + "%aN%n",
        AUTHOR_EMAIL_PREFIX + "%aE%n",
        AUTHOR_DATE_PREFIX + "%aI%n",
        COMMITTER_NAME_PREFIX + "%cN%n",
        COMMITTER_EMAIL_PREFIX + "%cE%n",
        COMMITTER_DATE_PREFIX + "%cI%n",
        # %n puts the terminator on a line of its own even when %B is empty
        COMMIT_BODY_PREFIX + "%B%n%x00",
    ]
    return "".join(parts)


def parse_iso_date(value: str) -> datetime:
    """Parse git's strict ISO 8601 date (``%aI``/``%cI``).

    Raises:
        FormatError: If the value is not a valid ISO 8601 timestamp with offset
    """
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as e:
        raise FormatError(f"malformed ISO 8601 date: {value!r}") from e
    if parsed.tzinfo is None:
        raise FormatError(f"ISO 8601 date has no UTC offset: {value!r}")
    return parsed


def format_iso_date(value: datetime | None) -> str:
    """Render a datetime the way git's strict ISO 8601 placeholders do."""
    if value is None:
        return ""
    return value.isoformat()


def _format_count(count: int | None) -> str:
    return "-" if count is None else str(count)


def _render_stat(stat: Stat) -> str:
    return (
        f"{_format_count(stat.additions)}\t"
        f"{_format_count(stat.deletions)}\t{stat.file_path}\n"
    )


def render_tagged(commit: Commit) -> str:
    """Render a commit exactly as ``git log`` prints it with the tagged format.

    Decoding a tagged stream and concatenating ``render_tagged`` of every
    commit reproduces git's output byte for byte.
    """
    lines = [
        f"{COMMIT_HASH_PREFIX}{commit.sha}\n",
        f"{TREE_HASH_PREFIX}{commit.tree}\n",
        f"{PARENT_HASHES_PREFIX}{' '.join(commit.parents)}\n",
        f"{AUTHOR_NAME_PREFIX}{commit.author.name}\n",
        f"{AUTHOR_EMAIL_PREFIX}{commit.author.email}\n",
        f"{AUTHOR_DATE_PREFIX}{format_iso_date(commit.author.when)}\n",
        f"{COMMITTER_NAME_PREFIX}{commit.committer.name}\n",
        f"{COMMITTER_EMAIL_PREFIX}{commit.committer.email}\n",
        f"{COMMITTER_DATE_PREFIX}{format_iso_date(commit.committer.when)}\n",
        f"{COMMIT_BODY_PREFIX}{commit.message}\n{BODY_TERMINATOR}\n",
    ]

    if commit.stats or commit.has_trailing_newline:
        lines.append("\n")

    lines.extend(_render_stat(stat) for stat in commit.stats)
    return "".join(lines)
