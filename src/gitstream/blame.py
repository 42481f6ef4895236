"""Line attribution via ``git blame --line-porcelain``."""

from collections.abc import Iterable
from pathlib import Path

import structlog

from gitstream.base import (
    Blame,
    Event,
    is_object_hash,
    parse_count,
    parse_epoch,
    parse_offset,
)
from gitstream.lines import LineReader
from gitstream.process import GitProcess

logger = structlog.get_logger(__name__)

AUTHOR = "author "
AUTHOR_MAIL = "author-mail "
AUTHOR_TIME = "author-time "
AUTHOR_TZ = "author-tz "

COMMITTER = "committer "
COMMITTER_MAIL = "committer-mail "
COMMITTER_TIME = "committer-time "
COMMITTER_TZ = "committer-tz "

SUMMARY = "summary "
BOUNDARY = "boundary"
PREVIOUS = "previous "
FILENAME = "filename "
LINE_PREFIX = "\t"


def _apply_tz(event: Event, value: str) -> None:
    # *-tz always follows *-time, so the instant is known by now
    offset = parse_offset(value)
    if event.when is not None:
        event.when = event.when.astimezone(offset)


def _open_entry(line: str) -> Blame | None:
    fields = line.split(" ")
    if not is_object_hash(fields[0]) or len(fields) < 3:
        return None
    return Blame(
        sha=fields[0],
        original_line_no=parse_count(fields[1]),
        final_line_no=parse_count(fields[2]),
        lines_in_group=parse_count(fields[3]) if len(fields) > 3 else 0,
    )


def parse_line_porcelain(lines: Iterable[str]) -> list[Blame]:
    """Decode ``--line-porcelain`` output into one Blame per line of the file.

    Raises:
        FormatError: If a line number, time or timezone field is malformed
    """
    result: list[Blame] = []
    current: Blame | None = None

    for line in lines:
        if line.startswith(LINE_PREFIX):
            if current is not None:
                current.line = line[len(LINE_PREFIX):]
            continue

        entry = _open_entry(line)
        if entry is not None:
            if current is not None:
                result.append(current)
            current = entry
            continue

        if current is None:
            continue

        if line.startswith(AUTHOR):
            current.author.name = line[len(AUTHOR):]
        elif line.startswith(AUTHOR_MAIL):
            current.author.email = line[len(AUTHOR_MAIL):].strip("<>")
        elif line.startswith(AUTHOR_TIME):
            current.author.when = parse_epoch(line[len(AUTHOR_TIME):])
        elif line.startswith(AUTHOR_TZ):
            _apply_tz(current.author, line[len(AUTHOR_TZ):])
        elif line.startswith(COMMITTER):
            current.committer.name = line[len(COMMITTER):]
        elif line.startswith(COMMITTER_MAIL):
            current.committer.email = line[len(COMMITTER_MAIL):].strip("<>")
        elif line.startswith(COMMITTER_TIME):
            current.committer.when = parse_epoch(line[len(COMMITTER_TIME):])
        elif line.startswith(COMMITTER_TZ):
            _apply_tz(current.committer, line[len(COMMITTER_TZ):])
        elif line.startswith(SUMMARY):
            current.summary = line[len(SUMMARY):]
        elif line.startswith(BOUNDARY):
            current.boundary = True
        elif line.startswith(PREVIOUS):
            current.previous = line[len(PREVIOUS):]
        elif line.startswith(FILENAME):
            current.filename = line[len(FILENAME):]

    if current is not None:
        result.append(current)

    return result


def blame(
    repo_path: str | Path,
    file_path: str,
    revision: str | None = None,
    git_path: str | None = None,
    max_line_length: int | None = None,
) -> list[Blame]:
    """Blame every line of ``file_path``.

    Args:
        repo_path: Path to the repository
        file_path: File to blame, relative to the repository root
        revision: Revision to blame at; defaults to the working tree
        git_path: Resolved git executable; defaults to the configured one
        max_line_length: Ceiling on the length of a single output line

    Returns:
        One Blame per line of the file, in file order

    Raises:
        ProcessError: If git blame fails (e.g. the file is not tracked)
        FormatError: If the porcelain output is malformed
    """
    args = ["blame", "--line-porcelain"]
    if revision:
        args.append(revision)
    args.extend(["--", file_path])

    with GitProcess(args, cwd=repo_path, git_path=git_path) as process:
        result = parse_line_porcelain(
            LineReader(process.stdout, max_line_length=max_line_length)
        )
        process.check()

    logger.debug("blame_completed", file_path=file_path, lines=len(result))
    return result
