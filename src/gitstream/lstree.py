"""Tree listings via ``git ls-tree``."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from gitstream.base import FormatError
from gitstream.lines import LineReader, LineRecordIterator
from gitstream.process import GitProcess


class Mode(str, Enum):
    """File modes that can appear in a tree."""

    NORMAL_FILE = "100644"
    EXECUTABLE_FILE = "100755"
    SYMBOLIC_LINK = "120000"
    TREE = "040000"
    SUBMODULE = "160000"


def mode_from_string(value: str) -> str:
    """Return the canonical mode for ``value``, or "" if it is not recognized."""
    try:
        return Mode(value).value
    except ValueError:
        return ""


@dataclass
class TreeObject:
    """One entry of a tree listing."""

    mode: str
    type: str
    hash: str
    path: str

    def __str__(self) -> str:
        return f"{self.mode} {self.type} {self.hash}\t{self.path}"

    @classmethod
    def from_line(cls, line: str) -> "TreeObject":
        """Parse ``<mode> SP <type> SP <object> TAB <file>``.

        Raises:
            FormatError: If the line does not have that shape
        """
        meta, sep, path = line.partition("\t")
        fields = meta.split(" ")
        if not sep or len(fields) != 3:
            raise FormatError(f"malformed ls-tree line: {line!r}")
        return cls(
            mode=mode_from_string(fields[0]),
            type=fields[1],
            hash=fields[2],
            path=path,
        )


class TreeIterator(LineRecordIterator[TreeObject]):
    """Iterator over the objects listed by a single ``git ls-tree`` run."""

    def parse_line(self, line: str) -> TreeObject:
        return TreeObject.from_line(line)


def ls_tree(
    repo_path: str | Path,
    treeish: str,
    recurse: bool = False,
    git_path: str | None = None,
    max_line_length: int | None = None,
) -> TreeIterator:
    """List the contents of a tree-ish.

    Args:
        repo_path: Path to the repository
        treeish: Commit, tag or tree to list
        recurse: Recurse into subtrees (``-r``)
        git_path: Resolved git executable; defaults to the configured one
        max_line_length: Ceiling on the length of a single output line
    """
    args = ["ls-tree"]
    if recurse:
        args.append("-r")
    args.append(treeish)

    process = GitProcess(args, cwd=repo_path, git_path=git_path)
    return TreeIterator(
        LineReader(process.stdout, max_line_length=max_line_length),
        process=process,
    )
