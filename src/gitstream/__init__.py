"""gitstream - streaming access to git history.

Runs the git executable and decodes its output (log, blame, ls-tree,
ls-files) into typed records, one record at a time.
"""

from .base import (
    Blame,
    Commit,
    Event,
    FormatError,
    GitNotFoundError,
    GitStreamError,
    LineTooLongError,
    ProcessError,
    Stat,
    TransportError,
)
from .blame import blame
from .clone import CloneOptions, clone
from .history import (
    CommitIterator,
    CommitOrder,
    LogOptions,
    Scheme,
    build_format,
    exec_log,
    render_tagged,
)
from .lsfiles import ls_files
from .lstree import Mode, TreeObject, ls_tree

__version__ = "0.1.0"

__all__ = [
    # Operations
    "exec_log",
    "blame",
    "ls_tree",
    "ls_files",
    "clone",
    # Options
    "LogOptions",
    "CommitOrder",
    "CloneOptions",
    "Scheme",
    "build_format",
    "render_tagged",
    # Data classes
    "Commit",
    "CommitIterator",
    "Event",
    "Stat",
    "Blame",
    "TreeObject",
    "Mode",
    # Errors
    "GitStreamError",
    "GitNotFoundError",
    "TransportError",
    "LineTooLongError",
    "FormatError",
    "ProcessError",
]
