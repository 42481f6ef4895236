"""Cloning repositories via ``git clone``."""

from dataclasses import dataclass, field
from pathlib import Path

import structlog

from gitstream.process import GitProcess

logger = structlog.get_logger(__name__)

# Boolean options and the flag each one sets, in the order they are emitted
_BOOLEAN_FLAGS = [
    ("reject_shallow", "--reject-shallow"),
    ("no_reject_shallow", "--no-reject-shallow"),
    ("no_checkout", "--no-checkout"),
    ("bare", "--bare"),
    ("mirror", "--mirror"),
    ("local", "--local"),
    ("no_hard_links", "--no-hardlinks"),
    ("shared", "--shared"),
    ("dissociate", "--dissociate"),
    ("quiet", "--quiet"),
    ("verbose", "--verbose"),
    ("progress", "--progress"),
    ("sparse", "--sparse"),
    ("single_branch", "--single-branch"),
    ("no_single_branch", "--no-single-branch"),
    ("no_tags", "--no-tags"),
    ("shallow_submodules", "--shallow-submodules"),
    ("no_shallow_submodules", "--no-shallow-submodules"),
    ("remote_submodules", "--remote-submodules"),
    ("no_remote_submodules", "--no-remote-submodules"),
]


@dataclass
class CloneOptions:
    """Flags for ``git clone``; unset fields add nothing to the command."""

    reject_shallow: bool = False
    no_reject_shallow: bool = False
    no_checkout: bool = False
    bare: bool = False
    mirror: bool = False
    local: bool = False
    no_hard_links: bool = False
    shared: bool = False
    dissociate: bool = False
    quiet: bool = False
    verbose: bool = False
    progress: bool = False
    sparse: bool = False
    also_filter_submodules: bool = False
    single_branch: bool = False
    no_single_branch: bool = False
    no_tags: bool = False
    shallow_submodules: bool = False
    no_shallow_submodules: bool = False
    remote_submodules: bool = False
    no_remote_submodules: bool = False
    upload_pack: str = ""
    origin: str = ""
    branch: str = ""
    reference: str = ""
    reference_if_able: str = ""
    filter: str = ""
    template: str = ""
    shallow_since: str = ""
    recurse_submodules: str = ""
    separate_git_dir: str = ""
    shallow_exclude: list[str] = field(default_factory=list)
    server_options: list[str] = field(default_factory=list)
    depth: int = 0
    jobs: int = 0
    config: dict[str, str] = field(default_factory=dict)

    def to_args(self) -> list[str]:
        """Return the flags for these options."""
        args = [flag for name, flag in _BOOLEAN_FLAGS if getattr(self, name)]

        if self.filter:
            args.append(f"--filter={self.filter}")

        if self.recurse_submodules:
            args.append(f"--recurse-submodules={self.recurse_submodules}")

        if self.also_filter_submodules:
            args.append("--also-filter-submodules")

        for option in self.server_options:
            args.extend(["--server-option", option])

        for revision in self.shallow_exclude:
            args.append(f"--shallow-exclude={revision}")

        if self.separate_git_dir:
            args.append(f"--separate-git-dir={self.separate_git_dir}")

        if self.shallow_since:
            args.extend(["--shallow-since", self.shallow_since])

        if self.template:
            args.extend(["--template", self.template])

        if self.upload_pack:
            args.extend(["--upload-pack", self.upload_pack])

        if self.origin:
            args.extend(["--origin", self.origin])

        if self.reference:
            args.extend(["--reference", self.reference])

        if self.reference_if_able:
            args.extend(["--reference-if-able", self.reference_if_able])

        if self.branch:
            args.extend(["--branch", self.branch])

        if self.depth > 0:
            args.append(f"--depth={self.depth}")

        if self.jobs > 0:
            args.append(f"--jobs={self.jobs}")

        for key, value in self.config.items():
            args.append(f"--config={key}={value}")

        return args


def clone(
    repo: str,
    directory: str | Path,
    options: CloneOptions | None = None,
    git_path: str | None = None,
) -> None:
    """Clone ``repo`` into ``directory`` and wait for git to finish.

    Raises:
        ProcessError: If the clone fails
    """
    options = options or CloneOptions()
    args = ["clone", *options.to_args(), "--", repo, str(directory)]

    with GitProcess(args, git_path=git_path) as process:
        # clone reports on stderr; stdout is drained so git never blocks
        process.stdout.read()
        process.check()

    logger.info("repository_cloned", repo=repo, directory=str(directory))
