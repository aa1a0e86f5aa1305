"""Read-only access to the local repository holding both branches."""

import logging
from pathlib import Path
from typing import Optional, Tuple, Union

from git import Head, Repo
from git.exc import BadName, BadObject, InvalidGitRepositoryError, NoSuchPathError

from shipit.core.errors import BranchNotFound, DanglingReference, RepositoryNotFound
from shipit.models.commit import BranchRef

logger = logging.getLogger(__name__)


class BranchRepository:
    """Opens a repository and resolves local branch names.

    Nothing here writes to the repository; the handle is only used to look up
    refs and read commit objects.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path is not None else Path.cwd()
        self._repo: Optional[Repo] = None

    @property
    def repo(self) -> Repo:
        """Get the git repository, opening it on first use."""
        if self._repo is None:
            self._repo = self._open()
        return self._repo

    @property
    def git_dir(self) -> Path:
        return Path(self.repo.git_dir)

    def _open(self) -> Repo:
        try:
            repo = Repo(self.path, search_parent_directories=True)
        except (NoSuchPathError, InvalidGitRepositoryError) as e:
            raise RepositoryNotFound(f"No git repository found at {self.path}") from e
        logger.debug("Opened repository at %s", repo.git_dir)
        return repo

    def _find_head(self, name: str) -> Head:
        for head in self.repo.heads:
            if head.name == name:
                return head
        # An unborn branch has no ref file yet; only HEAD names it.
        current = self.repo.head
        if not current.is_detached and current.reference.path == f"refs/heads/{name}":
            raise DanglingReference(f"Branch '{name}' has no commits yet")
        raise BranchNotFound(f"No local branch named '{name}'")

    def resolve_branch(self, name: str) -> BranchRef:
        """Resolve a local branch name to a BranchRef."""
        head = self._find_head(name)
        try:
            tip = head.commit.hexsha
        except (ValueError, BadName, BadObject) as e:
            raise DanglingReference(
                f"Branch '{name}' does not point at a valid commit"
            ) from e
        logger.debug("Resolved %s to %s", head.path, tip)
        return BranchRef(name=name, tip_commit_id=tip)

    def resolve(self, source: str, target: str) -> Tuple[BranchRef, BranchRef]:
        """Resolve the source and target branches."""
        source_ref = self.resolve_branch(source)
        target_ref = self.resolve_branch(target)
        return source_ref, target_ref
