"""State machine that reassembles ``git log`` output into Commit records.

The assembler works one line at a time with a single line of lookahead: a
commit is only known to be finished when the identity line of the next one
arrives, or when the stream ends. Scheme-specific line recognition lives in
the ``SchemeParser`` strategies so each output format can be tested on its
own.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto

import structlog

from gitstream.base import (
    Commit,
    Event,
    FormatError,
    Stat,
    is_object_hash,
    parse_count,
    parse_epoch,
    parse_offset,
)

from .formats import (
    AUTHOR_DATE_PREFIX,
    AUTHOR_EMAIL_PREFIX,
    AUTHOR_NAME_PREFIX,
    BODY_TERMINATOR,
    COMMIT_BODY_PREFIX,
    COMMIT_HASH_PREFIX,
    COMMITTER_DATE_PREFIX,
    COMMITTER_EMAIL_PREFIX,
    COMMITTER_NAME_PREFIX,
    PARENT_HASHES_PREFIX,
    TREE_HASH_PREFIX,
    Scheme,
    parse_iso_date,
)

logger = structlog.get_logger(__name__)

# Native ("raw") format layout
NATIVE_BODY_INDENT = "    "
NATIVE_CONTINUATION_INDENT = " "
NATIVE_COMMIT = "commit "
NATIVE_TREE = "tree "
NATIVE_PARENT = "parent "
NATIVE_AUTHOR = "author "
NATIVE_COMMITTER = "committer "
NATIVE_SIGNATURE_HEADERS = ("gpgsig ", "gpgsig-sha256 ")


class State(Enum):
    """Position of the assembler within the current record."""

    AWAITING_RECORD = auto()
    IN_HEADER = auto()
    IN_BODY = auto()
    IN_STATS = auto()


@dataclass
class OpenRecord:
    """A commit that is still being assembled.

    Message and signature lines are collected here and only joined into the
    commit when it is frozen, which keeps appends linear for long messages.
    """

    commit: Commit
    body: list[str] = field(default_factory=list)
    signature: list[str] = field(default_factory=list)
    # Set once the message has started; the header can no longer change
    header_closed: bool = False
    in_signature: bool = False


def parse_stat(line: str) -> Stat | None:
    """Parse a ``--numstat`` line of the form ``<added>\\t<deleted>\\t<path>``.

    ``-`` in either count column marks a binary file and becomes ``None``.

    Returns:
        The parsed Stat, or None if the line is not shaped like a stat line

    Raises:
        FormatError: If a count column is neither ``-`` nor an integer
    """
    parts = line.split("\t", 2)
    if len(parts) != 3:
        return None
    added, deleted, path = parts
    return Stat(
        file_path=path,
        additions=None if added == "-" else parse_count(added),
        deletions=None if deleted == "-" else parse_count(deleted),
    )


def parse_person(value: str) -> Event:
    """Parse a raw identity: ``<name> <email> <epoch-seconds> <±HHMM>``.

    The name may contain spaces, so the last three whitespace-separated
    tokens are taken as email, epoch and offset and everything before them is
    the name (outer whitespace trimmed only).

    Raises:
        FormatError: If there are too few tokens or the epoch/offset is malformed
    """
    tokens = value.rsplit(None, 3)
    if len(tokens) < 3:
        raise FormatError(f"malformed identity line: {value!r}")
    if len(tokens) == 3:
        name = ""
        email, epoch, offset = tokens
    else:
        name, email, epoch, offset = tokens
    if email.startswith("<") and email.endswith(">"):
        email = email[1:-1]
    return Event(
        name=name.strip(),
        email=email,
        when=parse_epoch(epoch, parse_offset(offset)),
    )


class SchemeParser(ABC):
    """Line recognition rules for one output scheme."""

    scheme: Scheme

    def __init__(self, stats: bool = False) -> None:
        self.stats = stats

    @abstractmethod
    def is_identity(self, line: str, state: State) -> bool:
        """Return True if ``line`` opens a new record in the given state."""

    @abstractmethod
    def open_record(self, line: str) -> OpenRecord:
        """Create a record from an identity line."""

    @abstractmethod
    def apply(self, line: str, state: State, record: OpenRecord) -> State:
        """Classify ``line``, update ``record`` and return the next state."""

    @abstractmethod
    def is_complete(self, record: OpenRecord) -> bool:
        """Return True if enough of the record was seen to hand it out."""

    @abstractmethod
    def finalize(self, record: OpenRecord) -> Commit:
        """Join the collected lines into the commit and return it."""

    def apply_stat(self, line: str, record: OpenRecord) -> None:
        stat = parse_stat(line)
        if stat is not None:
            record.commit.stats.append(stat)


class TaggedSchemeParser(SchemeParser):
    """Parser for the custom prefix-tagged format from ``build_format``.

    Inside a message body only the NUL terminator and a well-formed identity
    line are recognized, so message lines that happen to start with another
    field's prefix are kept as text. The message is the ``%B`` text exactly:
    the newline added by the template's ``%n`` is the only thing removed.
    """

    scheme = Scheme.TAGGED

    def is_identity(self, line: str, state: State) -> bool:
        if not line.startswith(COMMIT_HASH_PREFIX):
            return False
        if state is State.IN_BODY:
            return is_object_hash(line[len(COMMIT_HASH_PREFIX):])
        return True

    def open_record(self, line: str) -> OpenRecord:
        sha = line[len(COMMIT_HASH_PREFIX):]
        if not is_object_hash(sha):
            raise FormatError(f"malformed commit hash: {sha!r}")
        return OpenRecord(commit=Commit(sha=sha))

    def apply(self, line: str, state: State, record: OpenRecord) -> State:
        commit = record.commit

        if state is State.IN_BODY:
            if line.startswith(BODY_TERMINATOR):
                return State.IN_STATS if self.stats else State.AWAITING_RECORD
            record.body.append(line)
            return state

        if state is State.IN_HEADER:
            if line.startswith(TREE_HASH_PREFIX):
                commit.tree = line[len(TREE_HASH_PREFIX):]
            elif line.startswith(PARENT_HASHES_PREFIX):
                commit.parents.extend(line[len(PARENT_HASHES_PREFIX):].split())
            elif line.startswith(AUTHOR_NAME_PREFIX):
                commit.author.name = line[len(AUTHOR_NAME_PREFIX):]
            elif line.startswith(AUTHOR_EMAIL_PREFIX):
                commit.author.email = line[len(AUTHOR_EMAIL_PREFIX):]
            elif line.startswith(AUTHOR_DATE_PREFIX):
                commit.author.when = parse_iso_date(line[len(AUTHOR_DATE_PREFIX):])
            elif line.startswith(COMMITTER_NAME_PREFIX):
                commit.committer.name = line[len(COMMITTER_NAME_PREFIX):]
            elif line.startswith(COMMITTER_EMAIL_PREFIX):
                commit.committer.email = line[len(COMMITTER_EMAIL_PREFIX):]
            elif line.startswith(COMMITTER_DATE_PREFIX):
                commit.committer.when = parse_iso_date(
                    line[len(COMMITTER_DATE_PREFIX):]
                )
            elif line.startswith(COMMIT_BODY_PREFIX):
                record.body.append(line[len(COMMIT_BODY_PREFIX):])
                record.header_closed = True
                return State.IN_BODY
            return state

        # After the terminator: an optional blank separator, then stats
        if line == "":
            commit.has_trailing_newline = True
        elif state is State.IN_STATS:
            self.apply_stat(line, record)
        return state

    def is_complete(self, record: OpenRecord) -> bool:
        commit = record.commit
        return bool(commit.sha and commit.tree) and record.header_closed

    def finalize(self, record: OpenRecord) -> Commit:
        commit = record.commit
        # Each body line carried a newline; the last one came from %n
        commit.message = "\n".join(record.body)
        return commit


class NativeSchemeParser(SchemeParser):
    """Parser for git's built-in ``raw`` format.

    Headers run until the first blank line. Message lines are recognized
    purely by column: exactly four leading spaces are removed and anything
    unindented closes the body. Leading blank lines and the trailing run of
    blank lines are trimmed from the message, which then ends in a single
    newline unless it is empty.
    """

    scheme = Scheme.NATIVE

    def is_identity(self, line: str, state: State) -> bool:
        return line.startswith(NATIVE_COMMIT)

    def open_record(self, line: str) -> OpenRecord:
        # With -m, git appends " (from <parent>)" to the identity line
        sha = line[len(NATIVE_COMMIT):].split(" ", 1)[0]
        if not is_object_hash(sha):
            raise FormatError(f"malformed commit hash: {sha!r}")
        return OpenRecord(commit=Commit(sha=sha))

    def apply(self, line: str, state: State, record: OpenRecord) -> State:
        if state is State.IN_HEADER:
            return self._apply_header(line, record)

        if state is State.IN_BODY:
            if line.startswith(NATIVE_BODY_INDENT):
                record.body.append(line[len(NATIVE_BODY_INDENT):])
                return state
            if not self.stats:
                return State.AWAITING_RECORD
            state = State.IN_STATS

        if state is State.IN_STATS and line:
            self.apply_stat(line, record)
        return state

    def _apply_header(self, line: str, record: OpenRecord) -> State:
        commit = record.commit

        if record.in_signature:
            if line.startswith(NATIVE_CONTINUATION_INDENT):
                record.signature.append(line[len(NATIVE_CONTINUATION_INDENT):])
                return State.IN_HEADER
            record.in_signature = False

        if line == "":
            record.header_closed = True
            return State.IN_BODY

        if line.startswith(NATIVE_TREE):
            commit.tree = line[len(NATIVE_TREE):]
        elif line.startswith(NATIVE_PARENT):
            commit.parents.append(line[len(NATIVE_PARENT):])
        elif line.startswith(NATIVE_AUTHOR):
            commit.author = parse_person(line[len(NATIVE_AUTHOR):])
        elif line.startswith(NATIVE_COMMITTER):
            commit.committer = parse_person(line[len(NATIVE_COMMITTER):])
        else:
            for header in NATIVE_SIGNATURE_HEADERS:
                if line.startswith(header):
                    record.signature = [line[len(header):]]
                    record.in_signature = True
                    break
        return State.IN_HEADER

    def is_complete(self, record: OpenRecord) -> bool:
        commit = record.commit
        return bool(commit.sha and commit.tree) and record.header_closed

    def finalize(self, record: OpenRecord) -> Commit:
        commit = record.commit
        lines = list(record.body)
        while lines and not lines[0].strip():
            lines.pop(0)
        while lines and not lines[-1].strip():
            lines.pop()
        commit.message = "\n".join(lines) + "\n" if lines else ""
        if record.signature:
            commit.signature = "\n".join(record.signature) + "\n"
        return commit


def scheme_parser(scheme: Scheme, stats: bool = False) -> SchemeParser:
    """Return the parser strategy for ``scheme``."""
    if scheme is Scheme.NATIVE:
        return NativeSchemeParser(stats=stats)
    return TaggedSchemeParser(stats=stats)


class CommitAssembler:
    """Feed lines in, get finished commits out.

    ``feed`` returns the previous commit the moment a new identity line
    arrives; ``finish`` returns the last one at end of stream. A commit is
    never touched again after it has been returned.
    """

    def __init__(self, parser: SchemeParser) -> None:
        self.parser = parser
        self.state = State.AWAITING_RECORD
        self._open: OpenRecord | None = None

    @property
    def has_open_record(self) -> bool:
        return self._open is not None

    def feed(self, line: str) -> Commit | None:
        """Consume one line.

        Returns:
            The completed previous commit if ``line`` opened a new record

        Raises:
            FormatError: If a field in ``line`` is malformed; the open record
                is discarded
        """
        try:
            if self.parser.is_identity(line, self.state):
                opened = self.parser.open_record(line)
                completed = self._freeze()
                self._open = opened
                self.state = State.IN_HEADER
                return completed

            if self._open is None:
                # Output before the first record (e.g. warnings) is ignored
                return None

            self.state = self.parser.apply(line, self.state, self._open)
            return None
        except FormatError:
            self.discard()
            raise

    def finish(self) -> Commit | None:
        """Signal end of stream and return the last commit, if complete."""
        record, self._open = self._open, None
        self.state = State.AWAITING_RECORD
        if record is None:
            return None
        if not self.parser.is_complete(record):
            logger.warning(
                "incomplete_record_discarded",
                sha=record.commit.sha,
                scheme=self.parser.scheme.value,
            )
            return None
        return self.parser.finalize(record)

    def discard(self) -> None:
        """Drop the open record without emitting it."""
        if self._open is not None:
            logger.debug("open_record_discarded", sha=self._open.commit.sha)
        self._open = None
        self.state = State.AWAITING_RECORD

    def _freeze(self) -> Commit | None:
        record, self._open = self._open, None
        if record is None:
            return None
        if not self.parser.is_complete(record):
            raise FormatError(
                f"commit {record.commit.sha} ended before its header was complete"
            )
        return self.parser.finalize(record)
