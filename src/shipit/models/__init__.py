"""Data models for shipit."""

from .commit import BranchRef, CommitRecord, DeltaSet
from .platform import GitHubTarget, GitLabTarget, Platform, PlatformTarget
from .result import PipelineState, ShipOutcome, ShipResult
from .settings import (
    GithubSettings,
    GitlabSettings,
    OllamaOptions,
    OllamaSettings,
    Settings,
    ShipitSettings,
)

__all__ = [
    "BranchRef",
    "CommitRecord",
    "DeltaSet",
    "GitHubTarget",
    "GitLabTarget",
    "GithubSettings",
    "GitlabSettings",
    "OllamaOptions",
    "OllamaSettings",
    "Platform",
    "PlatformTarget",
    "PipelineState",
    "Settings",
    "ShipOutcome",
    "ShipitSettings",
    "ShipResult",
]
