"""Open pull/merge requests on GitHub or GitLab."""

import logging
import re
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional, Sequence

import httpx

from shipit.core.errors import (
    InvalidIdentifierFormat,
    NoPlatformConfigured,
    PlatformAPIError,
)
from shipit.models.platform import GitHubTarget, GitLabTarget, Platform, PlatformTarget
from shipit.models.settings import PlatformSettings, Settings

logger = logging.getLogger(__name__)

# Checked in order; the first platform with a token wins.
PLATFORM_PRIORITY: Sequence[Platform] = (Platform.GITHUB, Platform.GITLAB)

_PROJECT_ID = re.compile(r"[0-9]+")
_MAX_PROJECT_ID = 2**64 - 1


def platform_settings(settings: Settings, platform: Platform) -> PlatformSettings:
    if platform is Platform.GITHUB:
        return settings.github
    return settings.gitlab


def select_platform(settings: Settings) -> Platform:
    """Pick the platform to open the request on.

    Raises:
        NoPlatformConfigured: If no platform has a token.
    """
    for platform in PLATFORM_PRIORITY:
        if platform_settings(settings, platform).configured:
            return platform
    raise NoPlatformConfigured(
        "No platform token configured. Set github.token or gitlab.token "
        "in your shipit config."
    )


def parse_github_identifier(identifier: str) -> GitHubTarget:
    """Parse ``owner/repo``."""
    owner, sep, repo = identifier.partition("/")
    if not sep or not owner or not repo or "/" in repo:
        raise InvalidIdentifierFormat(
            f"'{identifier}' must be in 'owner/repo' format for GitHub."
        )
    return GitHubTarget(owner=owner, repo=repo)


def parse_gitlab_identifier(identifier: str) -> GitLabTarget:
    """Parse an unsigned numeric project id."""
    if not _PROJECT_ID.fullmatch(identifier) or int(identifier) > _MAX_PROJECT_ID:
        raise InvalidIdentifierFormat(
            f"'{identifier}' must be a numeric project ID for GitLab."
        )
    return GitLabTarget(project_id=int(identifier))


def parse_identifier(platform: Platform, identifier: Optional[str]) -> PlatformTarget:
    if not identifier:
        raise InvalidIdentifierFormat(
            "A project identifier is required to open a request."
        )
    if platform is Platform.GITHUB:
        return parse_github_identifier(identifier)
    return parse_gitlab_identifier(identifier)


def request_title(source: str, target: str) -> str:
    return f"{source} to {target}"


def _host_url(domain: str) -> str:
    domain = domain.rstrip("/")
    return domain if "://" in domain else f"https://{domain}"


class PlatformClient(ABC):
    """Shared plumbing for one authenticated platform API."""

    platform: Platform

    def __init__(
        self, settings: PlatformSettings, client: Optional[httpx.Client] = None
    ) -> None:
        self.settings = settings
        self._client = client or httpx.Client()

    @property
    @abstractmethod
    def api_url(self) -> str:
        """Base URL of the REST API, without a trailing slash."""

    @abstractmethod
    def headers(self) -> Dict[str, str]:
        """Authentication headers for every request."""

    def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.api_url}{path}"
        logger.debug("POST %s", url)
        try:
            response = self._client.post(url, json=payload, headers=self.headers())
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise PlatformAPIError(
                f"Request to {self.platform.value} failed: {e}", self.platform.value
            ) from e

        if response.is_error:
            raise PlatformAPIError(
                f"{self.platform.value} rejected the request: {response.text}",
                self.platform.value,
                status_code=response.status_code,
            )
        try:
            data = response.json()
        except ValueError as e:
            raise PlatformAPIError(
                f"{self.platform.value} answered with invalid JSON",
                self.platform.value,
                status_code=response.status_code,
            ) from e
        if not isinstance(data, dict):
            raise PlatformAPIError(
                f"{self.platform.value} answered with an unexpected body",
                self.platform.value,
                status_code=response.status_code,
            )
        return data

    def _url_field(self, data: Dict[str, Any], field: str) -> str:
        url = data.get(field)
        if not isinstance(url, str) or not url:
            raise PlatformAPIError(
                f"{self.platform.value} response has no '{field}'",
                self.platform.value,
            )
        return url

    def close(self) -> None:
        self._client.close()


class GitHubClient(PlatformClient):
    """Creates pull requests through the GitHub REST API."""

    platform = Platform.GITHUB

    @property
    def api_url(self) -> str:
        domain = self.settings.domain
        if domain == "github.com":
            return "https://api.github.com"
        # GitHub Enterprise Server
        return f"{_host_url(domain)}/api/v3"

    def headers(self) -> Dict[str, str]:
        return {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {self.settings.token}",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    def create_pull_request(
        self, target: GitHubTarget, source_branch: str, target_branch: str, body: str
    ) -> str:
        """Open a pull request and return its web URL."""
        data = self._post(
            f"/repos/{target.owner}/{target.repo}/pulls",
            {
                "title": request_title(source_branch, target_branch),
                "head": source_branch,
                "base": target_branch,
                "body": body,
            },
        )
        return self._url_field(data, "html_url")


class GitLabClient(PlatformClient):
    """Creates merge requests through the GitLab REST API."""

    platform = Platform.GITLAB

    @property
    def api_url(self) -> str:
        return f"{_host_url(self.settings.domain)}/api/v4"

    def headers(self) -> Dict[str, str]:
        return {"PRIVATE-TOKEN": self.settings.token or ""}

    def create_merge_request(
        self, target: GitLabTarget, source_branch: str, target_branch: str, body: str
    ) -> str:
        """Open a merge request and return its web URL."""
        data = self._post(
            f"/projects/{target.project_id}/merge_requests",
            {
                "source_branch": source_branch,
                "target_branch": target_branch,
                "title": request_title(source_branch, target_branch),
                "description": body,
                "remove_source_branch": True,
            },
        )
        return self._url_field(data, "web_url")


class PlatformDispatcher:
    """Selects a platform and opens exactly one request on it.

    Failed creations are raised immediately and never retried, so a run
    cannot open duplicate requests.
    """

    def __init__(self, settings: Settings, client: Optional[httpx.Client] = None):
        self.settings = settings
        self._client = client

    @contextmanager
    def _session(self, client: PlatformClient) -> Iterator[PlatformClient]:
        try:
            yield client
        finally:
            # A client handed in by the caller is theirs to close.
            if self._client is None:
                client.close()

    def dispatch(
        self, source: str, target: str, description: str, identifier: Optional[str]
    ) -> str:
        """Open the request and return its URL."""
        platform = select_platform(self.settings)
        project = parse_identifier(platform, identifier)
        logger.debug("Opening request on %s for %s", platform.value, identifier)

        if isinstance(project, GitHubTarget):
            github = GitHubClient(self.settings.github, self._client)
            with self._session(github):
                return github.create_pull_request(project, source, target, description)

        gitlab = GitLabClient(self.settings.gitlab, self._client)
        with self._session(gitlab):
            return gitlab.create_merge_request(project, source, target, description)
