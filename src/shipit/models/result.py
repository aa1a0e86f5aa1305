"""Outcome of one pipeline run."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel

from .commit import DeltaSet
from .platform import Platform


class PipelineState(str, Enum):
    """States the orchestrator moves through."""

    RESOLVING = "resolving"
    WALKING = "walking"
    COMPOSING = "composing"
    SUMMARIZING = "summarizing"
    DRY_RUN_STOP = "dry_run_stop"
    DISPATCHING = "dispatching"
    DONE = "done"
    FAILED = "failed"


class ShipOutcome(str, Enum):
    """How a successful run ended."""

    SHIPPED = "shipped"
    DRY_RUN = "dry_run"
    NOTHING_TO_DO = "nothing_to_do"


class ShipResult(BaseModel):
    """Terminal value of a successful run."""

    outcome: ShipOutcome
    repository_path: Optional[str] = None
    commits: DeltaSet = DeltaSet()
    description: Optional[str] = None
    url: Optional[str] = None
    platform: Optional[Platform] = None
    summarized: bool = False
    states: List[PipelineState] = []
