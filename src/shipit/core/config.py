"""Load and store shipit settings as JSON."""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import click
from pydantic import ValidationError

from shipit.core.errors import ConfigurationError
from shipit.models.settings import Settings

logger = logging.getLogger(__name__)

APP_NAME = "shipit"
CONFIG_ENV_VAR = "SHIPIT_CONFIG"
MASK = "***"


def default_config_path() -> Path:
    """Config file location, honouring ``SHIPIT_CONFIG``."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path(click.get_app_dir(APP_NAME)) / "config.json"


def load_settings(path: Optional[Union[str, Path]] = None) -> Settings:
    """Read settings, falling back to defaults when the file is missing."""
    config_file = Path(path) if path is not None else default_config_path()
    if not config_file.exists():
        logger.debug("No config at %s, using defaults", config_file)
        return Settings()

    try:
        data = json.loads(config_file.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Failed to read config {config_file}: {e}") from e

    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid config {config_file}:\n{e}") from e


def save_settings(
    settings: Settings, path: Optional[Union[str, Path]] = None, overwrite: bool = True
) -> Path:
    """Write settings as JSON and return the file written."""
    config_file = Path(path) if path is not None else default_config_path()
    if config_file.exists() and not overwrite:
        raise ConfigurationError(
            f"Config {config_file} already exists. Use --force to overwrite it."
        )
    try:
        config_file.parent.mkdir(parents=True, exist_ok=True)
        config_file.write_text(
            json.dumps(settings.model_dump(mode="json"), indent=2) + "\n",
            encoding="utf-8",
        )
    except OSError as e:
        raise ConfigurationError(f"Failed to write config {config_file}: {e}") from e
    return config_file


def masked(settings: Settings) -> Dict[str, Any]:
    """Settings as plain data with tokens hidden."""
    data = settings.model_dump(mode="json")
    for section in ("github", "gitlab"):
        if data[section].get("token"):
            data[section]["token"] = MASK
    return data
