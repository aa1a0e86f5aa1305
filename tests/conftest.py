"""Shared fixtures: throwaway git repositories built with GitPython."""

import tempfile
from pathlib import Path

import pytest
from git import Repo


def commit_file(repo: Repo, name: str, message: str):
    """Write a file, stage it and commit on the current branch."""
    path = Path(repo.working_tree_dir) / name
    path.write_text(f"{message}\n")
    repo.index.add([name])
    return repo.index.commit(message)


@pytest.fixture
def temp_git_repo():
    """Create an empty git repository with a test identity."""
    with tempfile.TemporaryDirectory() as temp_dir:
        repo_path = Path(temp_dir)
        repo = Repo.init(repo_path)
        with repo.config_writer() as config:
            config.set_value("user", "name", "Test User")
            config.set_value("user", "email", "test@example.com")
        yield repo


@pytest.fixture
def branched_repo(temp_git_repo):
    """main: C1 -> C2 -> C3, feature branched at C1 with C4 -> C5.

    Yields the repo and a dict of commit name -> Commit.
    """
    repo = temp_git_repo
    commits = {"C1": commit_file(repo, "c1.txt", "C1")}
    repo.git.branch("-M", "main")
    commits["C2"] = commit_file(repo, "c2.txt", "C2")
    commits["C3"] = commit_file(repo, "c3.txt", "C3")

    feature = repo.create_head("feature", commits["C1"])
    feature.checkout()
    commits["C4"] = commit_file(repo, "c4.txt", "C4")
    commits["C5"] = commit_file(repo, "c5.txt", "C5")
    repo.heads.main.checkout()

    yield repo, commits
