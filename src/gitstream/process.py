"""Spawning and supervising git subprocesses."""

import shutil
import subprocess
import tempfile
from pathlib import Path
from types import TracebackType
from typing import IO, BinaryIO

import structlog

from gitstream.base import GitNotFoundError, GitStreamError, ProcessError
from gitstream.config import settings

logger = structlog.get_logger(__name__)


def find_git(binary: str | None = None) -> str:
    """Resolve the git executable to an absolute path.

    Args:
        binary: Name or path of the executable; defaults to the configured one

    Returns:
        Absolute path to the executable

    Raises:
        GitNotFoundError: If the executable cannot be found
    """
    name = binary or settings.git_binary
    path = shutil.which(name)
    if path is None:
        raise GitNotFoundError(f"could not find git executable: {name}")
    return path


class GitProcess:
    """A running ``git`` command whose stdout is read as a stream.

    stderr is redirected to an anonymous temporary file rather than a pipe so
    that git can never stall on a full stderr buffer while the caller is
    still consuming stdout lazily. It is read back once the process exits.

    Use as a context manager, or call ``close()``, to make sure the process
    is reaped and its file handles released.
    """

    def __init__(
        self,
        args: list[str],
        cwd: str | Path | None = None,
        git_path: str | None = None,
    ) -> None:
        self.args = list(args)
        self.cwd = str(cwd) if cwd is not None else None
        self.git_path = git_path or find_git()
        self._stderr: IO[bytes] = tempfile.TemporaryFile()
        try:
            self._proc = subprocess.Popen(
                [self.git_path, *self.args],
                cwd=self.cwd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=self._stderr,
            )
        except OSError as e:
            self._stderr.close()
            raise GitStreamError(f"failed to start {self.git_path}: {e}") from e
        logger.debug(
            "git_process_started",
            pid=self._proc.pid,
            args=self.args,
            cwd=self.cwd,
        )

    @property
    def stdout(self) -> BinaryIO:
        """The binary stdout stream of the process."""
        stdout = self._proc.stdout
        if stdout is None:
            raise GitStreamError("git process was started without a stdout pipe")
        return stdout  # type: ignore[return-value]

    @property
    def pid(self) -> int:
        return self._proc.pid

    @property
    def returncode(self) -> int | None:
        return self._proc.returncode

    def wait(self) -> int:
        """Wait for the process to exit and return its exit status."""
        returncode = self._proc.wait()
        logger.debug(
            "git_process_exited",
            pid=self._proc.pid,
            returncode=returncode,
        )
        return returncode

    def stderr_text(self) -> str:
        """Return everything the process has written to stderr so far."""
        if self._stderr.closed:
            return ""
        self._stderr.seek(0)
        return self._stderr.read().decode(settings.encoding, "replace")

    def check(self) -> None:
        """Wait for the process and raise if it failed.

        Raises:
            ProcessError: If git exited with a non-zero status
        """
        returncode = self.wait()
        if returncode != 0:
            stderr = self.stderr_text()
            logger.warning(
                "git_process_failed",
                args=self.args,
                returncode=returncode,
                stderr=stderr.strip(),
            )
            raise ProcessError(self.args, returncode, stderr)

    def terminate(self) -> None:
        """Ask the process to stop if it is still running."""
        if self._proc.poll() is None:
            logger.debug("git_process_terminated", pid=self._proc.pid)
            self._proc.terminate()

    def close(self) -> None:
        """Terminate the process if needed and release its resources."""
        self.terminate()
        if self._proc.stdout is not None:
            self._proc.stdout.close()
        self._proc.wait()
        self._stderr.close()

    def __enter__(self) -> "GitProcess":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
