"""Settings consumed by the shipping pipeline."""

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator


class ShipitSettings(BaseModel):
    """Behaviour switches for a run."""

    agent: Literal["ollama"] = "ollama"
    ai: bool = False
    dryrun: bool = False


class OllamaOptions(BaseModel):
    """Sampling options forwarded to the model."""

    temperature: float = 0.1
    top_p: float = 0.4
    seed: int = Field(default=43, ge=0)


class OllamaSettings(BaseModel):
    """Where and how to reach the summarization endpoint."""

    model: str = "qwen2.5-coder:7b"
    domain: str = "localhost"
    port: int = Field(default=11434, ge=1, le=65535)
    endpoint: str = "/api/generate"
    timeout: Optional[float] = None  # seconds; None waits indefinitely
    options: OllamaOptions = OllamaOptions()

    @field_validator("endpoint")
    @classmethod
    def ensure_leading_slash(cls, value: str) -> str:
        return value if value.startswith("/") else f"/{value}"

    @property
    def url(self) -> str:
        return f"http://{self.domain}:{self.port}{self.endpoint}"


class PlatformSettings(BaseModel):
    """Credential and host for one code-hosting platform."""

    domain: str
    token: Optional[str] = None

    @property
    def configured(self) -> bool:
        """A platform counts as configured only with a non-empty token."""
        return bool(self.token)


class GithubSettings(PlatformSettings):
    domain: str = "github.com"


class GitlabSettings(PlatformSettings):
    domain: str = "gitlab.com"


class Settings(BaseModel):
    """Complete, validated settings for shipit."""

    shipit: ShipitSettings = ShipitSettings()
    ollama: OllamaSettings = OllamaSettings()
    github: GithubSettings = GithubSettings()
    gitlab: GitlabSettings = GitlabSettings()

    def with_overrides(self, ai: bool = False, dryrun: bool = False) -> "Settings":
        """Return a copy with the given flags switched on.

        Flags only ever enable a behaviour; passing False keeps whatever the
        stored settings say.
        """
        shipit = self.shipit.model_copy(
            update={"ai": self.shipit.ai or ai, "dryrun": self.shipit.dryrun or dryrun}
        )
        return self.model_copy(update={"shipit": shipit})
