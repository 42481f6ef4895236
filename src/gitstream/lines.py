"""Line splitting over a git process's binary output stream."""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from types import TracebackType
from typing import TYPE_CHECKING, BinaryIO, Generic, TypeVar

from gitstream.base import GitStreamError, LineTooLongError, TransportError
from gitstream.config import settings

if TYPE_CHECKING:
    from gitstream.process import GitProcess

T = TypeVar("T")


class LineReader:
    """Lazily split a byte stream into text lines.

    Unlike ``str.splitlines`` this only breaks on ``\\n``, keeps every blank
    line (commit messages rely on them as paragraph breaks) and yields a
    final line even when the stream does not end with a newline. Lines are
    returned without their terminator.

    The reader never closes ``stream``; whoever spawned the process owns it.
    Iterating a second time continues from the current stream position, so a
    fresh reader is needed to start over.
    """

    def __init__(
        self,
        stream: BinaryIO,
        max_line_length: int | None = None,
        encoding: str | None = None,
        errors: str | None = None,
    ) -> None:
        self.stream = stream
        self.max_line_length = max_line_length or settings.max_line_length
        self.encoding = encoding or settings.encoding
        self.errors = errors or settings.decode_errors

    def __iter__(self) -> Iterator[str]:
        while True:
            raw = self._readline()
            if not raw:
                return
            if raw.endswith(b"\n"):
                raw = raw[:-1]
            elif len(raw) > self.max_line_length:
                raise LineTooLongError(self.max_line_length)
            try:
                line = raw.decode(self.encoding, self.errors)
            except UnicodeDecodeError as e:
                raise TransportError(
                    f"git output is not valid {self.encoding}: {e}"
                ) from e
            yield line

    def _readline(self) -> bytes:
        # Reading one byte past the ceiling tells an over-long line apart from
        # a line that is exactly at the limit plus its newline.
        try:
            return self.stream.readline(self.max_line_length + 1)
        except (OSError, ValueError) as e:
            raise TransportError(f"failed to read git output: {e}") from e


class LineRecordIterator(ABC, Generic[T]):
    """Iterator that turns each output line of a git process into one record.

    At end of stream the process is checked, so a failing command raises
    ``ProcessError`` after every line it did print has been returned.
    Termination is sticky: once the iterator has stopped or raised, later
    calls repeat the same outcome.
    """

    def __init__(
        self, lines: Iterable[str], process: "GitProcess | None" = None
    ) -> None:
        self._lines = iter(lines)
        self._process = process
        self._done = False
        self._error: GitStreamError | None = None

    @abstractmethod
    def parse_line(self, line: str) -> T:
        """Convert one output line into a record."""

    def __iter__(self) -> Iterator[T]:
        return self

    def __next__(self) -> T:
        if self._error is not None:
            raise self._error
        if self._done:
            raise StopIteration

        try:
            line = next(self._lines, None)
            if line is None:
                if self._process is not None:
                    self._process.check()
                self.close()
                raise StopIteration
            return self.parse_line(line)
        except GitStreamError as e:
            self._error = e
            self.close()
            raise

    def close(self) -> None:
        """Stop the underlying process, if any, and end iteration."""
        if self._error is None:
            self._done = True
        if self._process is not None:
            self._process.close()

    def __enter__(self) -> "LineRecordIterator[T]":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
