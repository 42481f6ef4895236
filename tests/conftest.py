"""Pytest configuration and fixtures."""

import shutil
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

GIT_AVAILABLE = shutil.which("git") is not None


@pytest.fixture
def git_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Isolate git from the user's configuration and pin identities."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Jane A. Doe")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "jane@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "John Smith")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "john@example.com")


@pytest.fixture
def temp_repo(tmp_path: Path, git_env: None) -> tuple[Path, Any]:
    """Create an empty git repository for testing."""
    git = pytest.importorskip("git")
    if not GIT_AVAILABLE:
        pytest.skip("git executable not available")

    repo_path = tmp_path / "repo"
    repo = git.Repo.init(repo_path)

    # Configure git for commits
    with repo.config_writer() as config:
        config.set_value("user", "name", "Test User")
        config.set_value("user", "email", "test@example.com")
        config.set_value("commit", "gpgsign", "false")

    return repo_path, repo


@pytest.fixture
def commit_file(monkeypatch: pytest.MonkeyPatch) -> Callable[..., str]:
    """Return a helper that writes a file, commits it and returns the SHA."""

    def _commit(
        repo: Any,
        rel_path: str,
        content: str | bytes,
        message: str,
        when: str = "1690000000 -0400",
    ) -> str:
        full_path = Path(repo.working_tree_dir) / rel_path
        full_path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            full_path.write_bytes(content)
        else:
            full_path.write_text(content)

        monkeypatch.setenv("GIT_AUTHOR_DATE", when)
        monkeypatch.setenv("GIT_COMMITTER_DATE", when)
        repo.git.add(rel_path)
        repo.git.commit("-m", message)
        return str(repo.head.commit.hexsha)

    return _commit


@pytest.fixture
def history_repo(
    temp_repo: tuple[Path, Any], commit_file: Callable[..., str]
) -> tuple[Path, dict[str, str]]:
    """Create a repository with a root commit, a binary file and a merge."""
    repo_path, repo = temp_repo
    shas: dict[str, str] = {}

    shas["root"] = commit_file(
        repo, "README.md", "# Title\n", "Initial commit", "1690000000 -0400"
    )
    shas["app"] = commit_file(
        repo,
        "src/app.py",
        "import sys\n\nprint(sys.argv)\n",
        "Add app\n\nWith a longer description.\n\nAnd a second paragraph.",
        "1690000100 -0400",
    )
    shas["logo"] = commit_file(
        repo, "assets/logo.png", b"\x00\x01\x02\x03", "Add logo", "1690000200 +0530"
    )

    main_branch = repo.active_branch.name
    repo.git.checkout("-b", "feature")
    shas["feature"] = commit_file(
        repo, "feature.txt", "feature\n", "Feature work", "1690000300 +0000"
    )
    repo.git.checkout(main_branch)
    shas["main"] = commit_file(
        repo, "main.txt", "main\n", "Main work", "1690000400 +0000"
    )
    repo.git.merge("--no-ff", "-m", "Merge branch 'feature'", "feature")
    shas["merge"] = str(repo.head.commit.hexsha)

    return repo_path, shas
