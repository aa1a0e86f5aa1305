"""Remote platform targets for a pull/merge request."""

from enum import Enum
from typing import Literal, Union

from pydantic import BaseModel, Field


class Platform(str, Enum):
    """Supported code-hosting platforms."""

    GITHUB = "github"
    GITLAB = "gitlab"


class GitHubTarget(BaseModel):
    """A GitHub repository addressed as ``owner/repo``."""

    platform: Literal[Platform.GITHUB] = Platform.GITHUB
    owner: str
    repo: str

    model_config = {"frozen": True}


class GitLabTarget(BaseModel):
    """A GitLab project addressed by its numeric id."""

    platform: Literal[Platform.GITLAB] = Platform.GITLAB
    project_id: int = Field(ge=0)

    model_config = {"frozen": True}


PlatformTarget = Union[GitHubTarget, GitLabTarget]
