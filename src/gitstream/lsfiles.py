"""File listings via ``git ls-files``."""

from pathlib import Path

from gitstream.lines import LineReader, LineRecordIterator
from gitstream.process import GitProcess


class FileIterator(LineRecordIterator[str]):
    """Iterator over the paths printed by a single ``git ls-files`` run."""

    def parse_line(self, line: str) -> str:
        return line


def ls_files(
    repo_path: str | Path,
    files: str | None = None,
    no_empty_directory: bool = False,
    git_path: str | None = None,
    max_line_length: int | None = None,
) -> FileIterator:
    """List the files tracked in a repository.

    Args:
        repo_path: Path to the repository
        files: Pattern restricting which files are listed
        no_empty_directory: Pass ``--no-empty-directory``
        git_path: Resolved git executable; defaults to the configured one
        max_line_length: Ceiling on the length of a single output line
    """
    args = ["ls-files"]

    if no_empty_directory:
        args.append("--no-empty-directory")

    # The pattern has to be the last argument
    if files:
        args.append(files)

    process = GitProcess(args, cwd=repo_path, git_path=git_path)
    return FileIterator(
        LineReader(process.stdout, max_line_length=max_line_length),
        process=process,
    )
