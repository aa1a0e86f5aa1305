"""Tests for DeltaWalker history traversal."""

from pathlib import Path

import pytest

from shipit.core.delta import DeltaWalker
from shipit.core.errors import HistoryWalkFailed

from conftest import commit_file


def _messages(delta):
    return [c.message for c in delta.commits]


def test_feature_against_main(branched_repo):
    """feature adds C4, C5 on top of C1; main moved on to C3."""
    repo, commits = branched_repo

    delta = DeltaWalker(repo).walk("refs/heads/feature", commits["C3"].hexsha)

    assert _messages(delta) == ["C5", "C4"]
    assert delta.ids == [commits["C5"].hexsha, commits["C4"].hexsha]


def test_main_against_feature(branched_repo):
    """The walk is a set difference, not a symmetric diff."""
    repo, commits = branched_repo

    delta = DeltaWalker(repo).walk("refs/heads/main", commits["C5"].hexsha)

    assert _messages(delta) == ["C3", "C2"]


def test_same_tip_is_empty(branched_repo):
    repo, commits = branched_repo

    delta = DeltaWalker(repo).walk("refs/heads/main", commits["C3"].hexsha)

    assert delta.is_empty
    assert len(delta) == 0


def test_source_behind_target_is_empty(branched_repo):
    """A source whose history is contained in the target ships nothing."""
    repo, commits = branched_repo
    repo.create_head("old", commits["C2"])

    delta = DeltaWalker(repo).walk("refs/heads/old", commits["C3"].hexsha)

    assert delta.is_empty


def test_source_superset_excludes_every_target_ancestor(branched_repo):
    repo, commits = branched_repo
    repo.heads.main.checkout()
    repo.create_head("ahead", commits["C3"]).checkout()
    c6 = commit_file(repo, "c6.txt", "C6")
    c7 = commit_file(repo, "c7.txt", "C7")

    delta = DeltaWalker(repo).walk("refs/heads/ahead", commits["C3"].hexsha)

    assert delta.ids == [c7.hexsha, c6.hexsha]
    target_history = {c.hexsha for c in repo.iter_commits("main")}
    assert not target_history & set(delta.ids)


def test_merge_commits_walk_first_parent_first(branched_repo):
    """Children come before parents; first-parent line before merged side."""
    repo, commits = branched_repo
    repo.heads.feature.checkout()
    repo.create_head("side", commits["C5"]).checkout()
    s1 = commit_file(repo, "s1.txt", "S1")
    repo.heads.feature.checkout()
    c6 = commit_file(repo, "c6.txt", "C6")
    merge = repo.index.commit("Merge side", parent_commits=(c6, s1))

    delta = DeltaWalker(repo).walk("refs/heads/feature", commits["C3"].hexsha)

    assert delta.ids[0] == merge.hexsha
    assert _messages(delta) == ["Merge side", "C6", "S1", "C5", "C4"]


def test_merged_target_history_is_hidden(branched_repo):
    """Commits brought into the source by merging the target are excluded."""
    repo, commits = branched_repo
    repo.heads.feature.checkout()
    merge = repo.index.commit(
        "Merge main", parent_commits=(commits["C5"], commits["C3"])
    )

    delta = DeltaWalker(repo).walk("refs/heads/feature", commits["C3"].hexsha)

    assert delta.ids == [merge.hexsha, commits["C5"].hexsha, commits["C4"].hexsha]


def test_walk_is_deterministic(branched_repo):
    repo, commits = branched_repo
    walker = DeltaWalker(repo)

    first = walker.walk("refs/heads/feature", commits["C3"].hexsha)
    second = walker.walk("refs/heads/feature", commits["C3"].hexsha)

    assert first == second


def test_messages_are_kept_verbatim(temp_git_repo):
    """Messages are used exactly as stored, trailing newlines included."""
    repo = temp_git_repo
    base = commit_file(repo, "a.txt", "base")
    repo.create_head("topic", base).checkout()
    commit_file(repo, "b.txt", "Add b\n\n")

    delta = DeltaWalker(repo).walk("refs/heads/topic", base.hexsha)

    assert _messages(delta) == ["Add b\n\n"]
    assert delta.commits[0].entry() == f"Add b\n\n {delta.ids[0]}"


def test_unknown_target_commit_fails(branched_repo):
    repo, _ = branched_repo

    with pytest.raises(HistoryWalkFailed):
        DeltaWalker(repo).walk("refs/heads/feature", "f" * 40)


def test_missing_parent_object_fails(branched_repo):
    """A corrupt object store aborts the walk."""
    repo, commits = branched_repo
    sha = commits["C4"].hexsha
    loose = Path(repo.git_dir) / "objects" / sha[:2] / sha[2:]
    loose.chmod(0o644)
    loose.unlink()

    with pytest.raises(HistoryWalkFailed):
        DeltaWalker(repo).walk("refs/heads/feature", commits["C3"].hexsha)
