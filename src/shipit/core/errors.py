"""Error hierarchy for shipit.

Every failure the pipeline can surface derives from ShipItError, so callers
can catch one type and print a single descriptive message.
"""

from typing import Optional


class ShipItError(Exception):
    """Base for all shipit errors."""


class ConfigurationError(ShipItError):
    """Settings could not be read, parsed, or validated."""


class RepositoryNotFound(ShipItError):
    """No git repository exists at the requested path."""


class BranchNotFound(ShipItError):
    """A branch name did not resolve to a local branch."""


class DanglingReference(ShipItError):
    """A branch exists but does not point at a readable commit."""


class HistoryWalkFailed(ShipItError):
    """A commit met while walking history could not be read."""


class SummarizationError(ShipItError):
    """Base for failures talking to the summarization service."""


class SummarizationTransportError(SummarizationError):
    """The summarization request never produced an HTTP response."""


class SummarizationParseError(SummarizationError):
    """The summarization response was not the expected JSON shape."""


class DispatchError(ShipItError):
    """Base for failures opening the remote request."""


class InvalidIdentifierFormat(DispatchError):
    """The project identifier does not fit the selected platform."""


class NoPlatformConfigured(DispatchError):
    """Neither a GitHub nor a GitLab token is configured."""


class PlatformAPIError(DispatchError):
    """The platform rejected the request or answered unexpectedly.

    Attributes:
        platform: Name of the platform that failed.
        status_code: HTTP status, or None if no response was received.
    """

    def __init__(
        self, message: str, platform: str, status_code: Optional[int] = None
    ) -> None:
        self.platform = platform
        self.status_code = status_code
        if status_code is not None:
            message = f"{message} (HTTP {status_code})"
        super().__init__(message)
