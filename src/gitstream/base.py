"""Base dataclasses, enums, and errors shared across git integrations."""

import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

# Error classes


class GitStreamError(Exception):
    """Base exception for all gitstream errors."""

    pass


class GitNotFoundError(GitStreamError):
    """The git executable could not be located."""

    pass


class TransportError(GitStreamError):
    """The output stream of a git process could not be read."""

    pass


class LineTooLongError(TransportError):
    """A single output line exceeded the configured buffer ceiling."""

    def __init__(self, limit: int) -> None:
        super().__init__(f"line exceeds maximum length of {limit} bytes")
        self.limit = limit


class FormatError(GitStreamError):
    """A field in git's output did not have the expected shape."""

    pass


class ProcessError(GitStreamError):
    """git exited with a non-zero status."""

    def __init__(
        self, command: list[str], returncode: int, stderr: str = ""
    ) -> None:
        message = f"git {' '.join(command[:1])} exited with status {returncode}"
        if stderr.strip():
            message = f"{message}: {stderr.strip()}"
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.stderr = stderr


# Data classes


@dataclass
class Event:
    """The who and when of a commit event."""

    name: str = ""
    email: str = ""
    when: datetime | None = None  # Timezone-aware, in the original offset


@dataclass
class Stat:
    """Line counts for a single file changed by a commit.

    ``additions`` and ``deletions`` are ``None`` for binary files, where git
    reports ``-`` instead of a number.
    """

    file_path: str
    additions: int | None
    deletions: int | None


@dataclass
class Commit:
    """Represents a commit decoded from ``git log`` output."""

    sha: str = ""
    tree: str = ""
    parents: list[str] = field(default_factory=list)
    author: Event = field(default_factory=Event)
    committer: Event = field(default_factory=Event)
    message: str = ""
    signature: str | None = None
    stats: list[Stat] = field(default_factory=list)
    # Set when a blank separator line followed the body terminator
    has_trailing_newline: bool = field(default=False, repr=False, compare=False)


@dataclass
class Blame:
    """Blame information for a single line of a file."""

    sha: str
    original_line_no: int
    final_line_no: int
    lines_in_group: int = 0
    author: Event = field(default_factory=Event)
    committer: Event = field(default_factory=Event)
    line: str = ""
    summary: str = ""
    boundary: bool = False
    previous: str = ""
    filename: str = ""

    def __str__(self) -> str:
        return f"{self.sha}: {self.author.name} <{self.author.email}>"


# Parsing helpers shared by the decoders

_HASH_RE = re.compile(r"^(?:[0-9a-f]{40}|[0-9a-f]{64})$")
_OFFSET_RE = re.compile(r"^([+-])(\d{2})(\d{2})$")
_COUNT_RE = re.compile(r"[0-9]+")


def is_object_hash(value: str) -> bool:
    """Return True for a full SHA-1 or SHA-256 hex object name."""
    return bool(_HASH_RE.match(value))


def parse_offset(value: str) -> timezone:
    """Parse a git ``+HHMM``/``-HHMM`` offset into a fixed timezone.

    Raises:
        FormatError: If the offset is not shaped like ``±HHMM`` or is 24 hours
            or more
    """
    match = _OFFSET_RE.match(value)
    if match is None:
        raise FormatError(f"malformed timezone offset: {value!r}")
    sign, hours, minutes = match.groups()
    delta = timedelta(hours=int(hours), minutes=int(minutes))
    if sign == "-":
        delta = -delta
    try:
        return timezone(delta)
    except ValueError as e:
        raise FormatError(f"timezone offset out of range: {value!r}") from e


def parse_epoch(value: str, offset: timezone = timezone.utc) -> datetime:
    """Convert epoch seconds into a datetime in the given offset's zone.

    Raises:
        FormatError: If the value is not an integer or is outside the range
            the platform can represent
    """
    try:
        seconds = int(value)
    except ValueError as e:
        raise FormatError(f"malformed epoch timestamp: {value!r}") from e
    try:
        return datetime.fromtimestamp(seconds, tz=offset)
    except (OverflowError, OSError, ValueError) as e:
        raise FormatError(f"epoch timestamp out of range: {value!r}") from e


def parse_count(value: str) -> int:
    """Parse a non-negative integer field made of ASCII digits only.

    Raises:
        FormatError: If the value is not a plain decimal number
    """
    if not _COUNT_RE.fullmatch(value):
        raise FormatError(f"malformed numeric field: {value!r}")
    return int(value)
