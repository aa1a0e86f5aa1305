"""Find the commits a source branch has that a target branch lacks."""

import logging
from typing import Dict, List, Set

from git import Commit, Repo
from git.exc import BadName, BadObject

from shipit.core.errors import HistoryWalkFailed
from shipit.models.commit import CommitRecord, DeltaSet

logger = logging.getLogger(__name__)

_READ_ERRORS = (ValueError, BadName, BadObject)


class DeltaWalker:
    """Walks commit history with the target tip as a hiding boundary.

    The result is the set difference of the two ancestor closures: every
    commit reachable from the source tip that is not reachable from the
    target tip. Commits are emitted children first, following first parents
    before merged-in parents, so the order is stable for a fixed repository.
    """

    def __init__(self, repo: Repo):
        self.repo = repo

    def walk(self, source_ref: str, target_tip: str) -> DeltaSet:
        """Compute the DeltaSet for ``source_ref`` against ``target_tip``.

        Args:
            source_ref: Full reference path of the source branch,
                e.g. ``refs/heads/feature``.
            target_tip: Commit id the target branch points at.

        Returns:
            Commits unique to the source, most recent first. Empty when the
            source has nothing the target lacks.

        Raises:
            HistoryWalkFailed: If any commit on either side cannot be read.
        """
        source = self._lookup(source_ref)
        hidden = self._ancestor_closure(self._lookup(target_tip))
        logger.debug("Target closure holds %d commits", len(hidden))

        if source.hexsha in hidden:
            logger.debug("Source tip %s is already on the target", source.hexsha)
            return DeltaSet()

        commits, edges = self._collect(source, hidden)
        order = self._topological_order(source.hexsha, edges)
        records = [self._record(commits[sha]) for sha in order]
        logger.debug("Found %d commits unique to %s", len(records), source_ref)
        return DeltaSet(commits=records)

    def _lookup(self, rev: str) -> Commit:
        try:
            return self.repo.commit(rev)
        except _READ_ERRORS as e:
            raise HistoryWalkFailed(f"Could not find commit for '{rev}'") from e

    def _parents(self, commit: Commit) -> List[Commit]:
        try:
            return list(commit.parents)
        except _READ_ERRORS as e:
            raise HistoryWalkFailed(
                f"Could not read parents of commit {commit.hexsha}"
            ) from e

    def _ancestor_closure(self, tip: Commit) -> Set[str]:
        """Every commit reachable from ``tip``, including itself."""
        seen = {tip.hexsha}
        work = [tip]
        while work:
            commit = work.pop()
            for parent in self._parents(commit):
                if parent.hexsha not in seen:
                    seen.add(parent.hexsha)
                    work.append(parent)
        return seen

    def _collect(self, tip: Commit, hidden: Set[str]):
        """Gather the non-hidden part of ``tip``'s closure as a parent graph."""
        commits: Dict[str, Commit] = {}
        edges: Dict[str, List[str]] = {}
        work = [tip]
        seen = {tip.hexsha}
        while work:
            commit = work.pop()
            commits[commit.hexsha] = commit
            parents = [p for p in self._parents(commit) if p.hexsha not in hidden]
            edges[commit.hexsha] = [p.hexsha for p in parents]
            for parent in parents:
                if parent.hexsha not in seen:
                    seen.add(parent.hexsha)
                    work.append(parent)
        return commits, edges

    @staticmethod
    def _topological_order(tip: str, edges: Dict[str, List[str]]) -> List[str]:
        # A commit is ready once every child inside the delta has been emitted.
        waiting = dict.fromkeys(edges, 0)
        for parents in edges.values():
            for parent in parents:
                waiting[parent] += 1

        order = []
        stack = [tip]
        while stack:
            sha = stack.pop()
            order.append(sha)
            for parent in reversed(edges[sha]):
                waiting[parent] -= 1
                if waiting[parent] == 0:
                    stack.append(parent)
        return order

    @staticmethod
    def _record(commit: Commit) -> CommitRecord:
        try:
            message = commit.message
        except _READ_ERRORS as e:
            raise HistoryWalkFailed(f"Could not read commit {commit.hexsha}") from e
        if not isinstance(message, str):
            raise HistoryWalkFailed(
                f"Message of commit {commit.hexsha} is not valid text"
            )
        return CommitRecord(id=commit.hexsha, message=message)
