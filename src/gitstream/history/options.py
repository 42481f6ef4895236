"""Options accepted by ``exec_log`` and their ``git log`` arguments."""

from dataclasses import dataclass
from enum import Enum

from .formats import Scheme, build_format


class CommitOrder(str, Enum):
    """Commit ordering flags understood by ``git log``."""

    DATE = "--date-order"
    AUTHOR_DATE = "--author-date-order"
    TOPO = "--topo-order"
    REVERSE = "--reverse"


@dataclass
class LogOptions:
    """Options for a ``git log`` run.

    Only ``stats`` and ``scheme`` change how output is decoded; everything
    else only shapes the argument list.
    """

    no_merges: bool = False
    first_parent: bool = False
    order: CommitOrder | None = None
    m: bool = False  # Show merge commits once per parent
    stats: bool = False
    file_filter: str | None = None
    revision: str | None = None
    scheme: Scheme = Scheme.TAGGED

    def to_args(self) -> list[str]:
        """Build the argument list for ``git`` (without the executable)."""
        args = [
            "log",
            f"--format={build_format(self.scheme)}",
            "--no-decorate",
            "-w",
        ]

        if self.no_merges:
            args.append("--no-merges")

        if self.first_parent:
            args.append("--first-parent")

        if self.order is not None:
            args.append(self.order.value)

        if self.m:
            args.append("-m")

        if self.stats:
            args.append("--numstat")

        if self.revision:
            args.append(self.revision)

        # Pathspecs must come after the "--" separator
        if self.file_filter:
            args.extend(["--", self.file_filter])

        return args
