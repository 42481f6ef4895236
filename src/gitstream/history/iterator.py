"""Pull-based iteration over commits decoded from ``git log``."""

from collections.abc import Iterable, Iterator
from pathlib import Path
from types import TracebackType
from typing import BinaryIO

import structlog

from gitstream.base import Commit, GitStreamError
from gitstream.lines import LineReader
from gitstream.process import GitProcess

from .assembler import CommitAssembler, scheme_parser
from .formats import Scheme
from .options import LogOptions

logger = structlog.get_logger(__name__)


class CommitIterator:
    """Iterator over the commits of a single ``git log`` run.

    Each ``next()`` reads just enough output to complete one commit. At end
    of stream the process (if any) is waited on: a non-zero exit raises
    ``ProcessError`` and the last, possibly truncated, record is dropped.
    Otherwise the final record is returned and iteration stops.

    Termination is sticky: once ``StopIteration`` or an error has been
    raised, every later call raises the same thing again.
    """

    def __init__(
        self,
        lines: Iterable[str],
        assembler: CommitAssembler,
        process: GitProcess | None = None,
    ) -> None:
        self._lines = iter(lines)
        self._assembler = assembler
        self._process = process
        self._done = False
        self._error: GitStreamError | None = None
        self.count = 0

    @classmethod
    def from_stream(
        cls,
        stream: BinaryIO,
        scheme: Scheme = Scheme.TAGGED,
        stats: bool = False,
        process: GitProcess | None = None,
        max_line_length: int | None = None,
    ) -> "CommitIterator":
        """Build an iterator that decodes ``stream`` with the given scheme."""
        reader = LineReader(stream, max_line_length=max_line_length)
        assembler = CommitAssembler(scheme_parser(scheme, stats=stats))
        return cls(reader, assembler, process=process)

    def __iter__(self) -> Iterator[Commit]:
        return self

    def __next__(self) -> Commit:
        if self._error is not None:
            raise self._error
        if self._done:
            raise StopIteration

        try:
            commit = self._advance()
        except GitStreamError as e:
            self._error = e
            self._assembler.discard()
            logger.warning(
                "commit_iteration_failed",
                error=str(e),
                error_type=type(e).__name__,
                commits=self.count,
            )
            self.close()
            raise

        if commit is None:
            logger.debug("commit_iteration_finished", commits=self.count)
            raise StopIteration

        self.count += 1
        return commit

    def _advance(self) -> Commit | None:
        for line in self._lines:
            commit = self._assembler.feed(line)
            if commit is not None:
                return commit

        # End of stream: the exit status decides whether the tail is trusted
        if self._process is not None:
            self._process.check()

        commit = self._assembler.finish()
        # Nothing is left to read, so the next call must stop
        self.close()
        return commit

    def close(self) -> None:
        """Stop the underlying process, if any, and end iteration."""
        if self._error is None:
            self._done = True
        if self._process is not None:
            self._process.close()

    def __enter__(self) -> "CommitIterator":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def exec_log(
    repo_path: str | Path,
    options: LogOptions | None = None,
    git_path: str | None = None,
    max_line_length: int | None = None,
) -> CommitIterator:
    """Run ``git log`` against a repository on disk and iterate its commits.

    Args:
        repo_path: Path to the repository (working tree or git dir)
        options: Which commits to list and how to format them
        git_path: Resolved git executable; defaults to the configured one
        max_line_length: Ceiling on the length of a single output line

    Returns:
        A CommitIterator; use it as a context manager to guarantee the
        process is cleaned up when iteration stops early

    Raises:
        GitNotFoundError: If git cannot be found
    """
    options = options or LogOptions()
    process = GitProcess(options.to_args(), cwd=repo_path, git_path=git_path)
    return CommitIterator.from_stream(
        process.stdout,
        scheme=options.scheme,
        stats=options.stats,
        process=process,
        max_line_length=max_line_length,
    )
