"""Sequence the shipping steps for one branch-to-branch run."""

import logging
from pathlib import Path
from typing import List, Optional, Union

from shipit.core.delta import DeltaWalker
from shipit.core.description import add_trailer, compose_description
from shipit.core.platforms import PlatformDispatcher, select_platform
from shipit.core.repository import BranchRepository
from shipit.core.summarizer import OllamaSummarizer
from shipit.models.result import PipelineState, ShipOutcome, ShipResult
from shipit.models.settings import Settings

logger = logging.getLogger(__name__)


class ShipPipeline:
    """Resolve, walk, compose, optionally summarize, then dispatch.

    Steps run strictly one after another. Any error moves the run to
    ``FAILED`` and is re-raised unchanged; nothing is retried and the raw
    description is never used as a fallback for a failed summary. Everything
    before dispatch is read-only, so an interrupted run has opened nothing.
    """

    def __init__(
        self,
        settings: Settings,
        repository: Optional[BranchRepository] = None,
        walker: Optional[DeltaWalker] = None,
        summarizer: Optional[OllamaSummarizer] = None,
        dispatcher: Optional[PlatformDispatcher] = None,
    ):
        """Collaborators left as None are built per run from ``settings``.

        An injected ``repository`` takes precedence over the ``directory``
        passed to :meth:`run`.
        """
        self.settings = settings
        self._repository = repository
        self._walker = walker
        self._summarizer = summarizer
        self._dispatcher = dispatcher
        self.states: List[PipelineState] = []

    @property
    def state(self) -> Optional[PipelineState]:
        return self.states[-1] if self.states else None

    def _enter(self, state: PipelineState) -> None:
        logger.info("Pipeline state: %s", state.value)
        self.states.append(state)

    def run(
        self,
        source: str,
        target: str,
        directory: Optional[Union[str, Path]] = None,
        identifier: Optional[str] = None,
    ) -> ShipResult:
        """Ship the commits on ``source`` that ``target`` lacks."""
        self.states = []
        try:
            return self._run(source, target, directory, identifier)
        except Exception:
            failed_in = self.state
            self._enter(PipelineState.FAILED)
            logger.info("Run failed during %s", failed_in.value if failed_in else "startup")
            raise

    def _run(self, source, target, directory, identifier) -> ShipResult:
        self._enter(PipelineState.RESOLVING)
        repository = self._repository or BranchRepository(directory)
        source_ref, target_ref = repository.resolve(source, target)
        repository_path = str(repository.git_dir)

        self._enter(PipelineState.WALKING)
        walker = self._walker or DeltaWalker(repository.repo)
        delta = walker.walk(
            source_ref.full_ref, target_ref.tip_commit_id
        )

        self._enter(PipelineState.COMPOSING)
        description = compose_description(delta)
        if description is None:
            self._enter(PipelineState.DONE)
            return ShipResult(
                outcome=ShipOutcome.NOTHING_TO_DO,
                repository_path=repository_path,
                states=list(self.states),
            )

        summarized = False
        if self.settings.shipit.ai:
            self._enter(PipelineState.SUMMARIZING)
            description = self._summarize(description)
            summarized = True
        description = add_trailer(description)

        if self.settings.shipit.dryrun:
            self._enter(PipelineState.DRY_RUN_STOP)
            return ShipResult(
                outcome=ShipOutcome.DRY_RUN,
                repository_path=repository_path,
                commits=delta,
                description=description,
                summarized=summarized,
                states=list(self.states),
            )

        self._enter(PipelineState.DISPATCHING)
        url = self._dispatch(source, target, description, identifier)
        self._enter(PipelineState.DONE)
        return ShipResult(
            outcome=ShipOutcome.SHIPPED,
            repository_path=repository_path,
            commits=delta,
            description=description,
            url=url,
            platform=select_platform(self.settings),
            summarized=summarized,
            states=list(self.states),
        )

    def _summarize(self, description: str) -> str:
        if self._summarizer is not None:
            return self._summarizer.summarize(description)
        with OllamaSummarizer(self.settings.ollama) as summarizer:
            return summarizer.summarize(description)

    def _dispatch(self, source, target, description, identifier) -> str:
        dispatcher = self._dispatcher or PlatformDispatcher(self.settings)
        return dispatcher.dispatch(source, target, description, identifier)
