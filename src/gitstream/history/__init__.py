"""Streaming decoder for ``git log`` history.

Requests a parser-friendly format from git, reads its output line by line
and yields Commit records one at a time.
"""

from .assembler import (
    CommitAssembler,
    NativeSchemeParser,
    SchemeParser,
    State,
    TaggedSchemeParser,
    parse_person,
    parse_stat,
    scheme_parser,
)
from .formats import Scheme, build_format, render_tagged
from .iterator import CommitIterator, exec_log
from .options import CommitOrder, LogOptions

__all__ = [
    # Entry points
    "exec_log",
    "CommitIterator",
    "LogOptions",
    "CommitOrder",
    # Formats
    "Scheme",
    "build_format",
    "render_tagged",
    # Assembly
    "CommitAssembler",
    "SchemeParser",
    "TaggedSchemeParser",
    "NativeSchemeParser",
    "State",
    "scheme_parser",
    "parse_person",
    "parse_stat",
]
