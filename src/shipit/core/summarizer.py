"""Rewrite a raw commit list into release notes with an Ollama model."""

import logging
from typing import Any, Dict, Optional

import httpx

from shipit.core.errors import SummarizationParseError, SummarizationTransportError
from shipit.models.settings import OllamaSettings

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = (
    "You are a technical writer tasked with creating organized and concise "
    "release notes. Categorize the following comma separated list of commit "
    "titles followed by their commit ids into markdown formatted subheadings. "
    "The heading categories are new features, bug fixes, infrastructure, and "
    "docs. If a category has no content, exclude it from the output. Do not "
    "format or alter the commit messages in any other way. Do not wrap the "
    "body of your result in markdown syntax highlighting ticks.\n\n{commits}"
)


def build_prompt(description: str) -> str:
    return PROMPT_TEMPLATE.format(commits=description)


class OllamaSummarizer:
    """Sync client for Ollama's ``/api/generate`` endpoint.

    One request per call, no retries. The generated text is returned as-is.

    Usage::

        with OllamaSummarizer(settings.ollama) as summarizer:
            notes = summarizer.summarize("Add login abc123,Fix typo def456")
    """

    def __init__(
        self, settings: OllamaSettings, client: Optional[httpx.Client] = None
    ) -> None:
        self.settings = settings
        self._client = client or httpx.Client(timeout=settings.timeout)

    def payload(self, description: str) -> Dict[str, Any]:
        """Build the request body for ``description``."""
        options = self.settings.options
        return {
            "model": self.settings.model,
            "prompt": build_prompt(description),
            "stream": False,
            "options": {
                "temperature": options.temperature,
                "top_p": options.top_p,
                "seed": options.seed,
            },
        }

    def summarize(self, description: str) -> str:
        """Return the model's rewrite of ``description``.

        Raises:
            SummarizationTransportError: If no HTTP response was received.
            SummarizationParseError: If the body is not JSON with a string
                ``response`` field, including error answers from the service.
        """
        url = self.settings.url
        logger.debug("Requesting summary from %s with model %s", url, self.settings.model)
        try:
            response = self._client.post(url, json=self.payload(description))
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise SummarizationTransportError(
                f"Summarization request to {url} failed: {e}"
            ) from e

        try:
            data = response.json()
        except ValueError as e:
            raise SummarizationParseError(
                "Summarization response is not valid JSON"
            ) from e

        summary = data.get("response") if isinstance(data, dict) else None
        if not isinstance(summary, str):
            detail = data.get("error") if isinstance(data, dict) else None
            message = "Summarization response has no 'response' text field"
            if detail:
                message = f"{message}: {detail}"
            raise SummarizationParseError(f"{message} (HTTP {response.status_code})")
        return summary

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "OllamaSummarizer":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
