"""Branch and commit models read from the local repository."""

from typing import List

from pydantic import BaseModel


class BranchRef(BaseModel):
    """A local branch resolved to the commit it points at."""

    name: str
    tip_commit_id: str

    model_config = {"frozen": True}

    @property
    def full_ref(self) -> str:
        """Fully qualified reference path, e.g. ``refs/heads/main``."""
        return f"refs/heads/{self.name}"


class CommitRecord(BaseModel):
    """A commit found on the source branch but not on the target."""

    id: str
    message: str

    model_config = {"frozen": True}

    def entry(self) -> str:
        """Render as a ``"{message} {id}"`` description entry."""
        return f"{self.message} {self.id}"


class DeltaSet(BaseModel):
    """Commits unique to the source branch, most recent first."""

    commits: List[CommitRecord] = []

    model_config = {"frozen": True}

    @property
    def is_empty(self) -> bool:
        return not self.commits

    @property
    def ids(self) -> List[str]:
        return [c.id for c in self.commits]

    def __len__(self) -> int:
        return len(self.commits)
