"""Template engine settings."""

import logging
from pathlib import Path
from typing import Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)


class EngineSettings(BaseModel):
    """Settings of the Jinja2 template engine.

    Attributes:
        sandbox: Render templates in a sandboxed environment
        strict: Raise on undefined template variables
        trim_blocks: Remove the first newline after a block tag
        lstrip_blocks: Strip whitespace before a block tag on its line
        keep_trailing_newline: Keep the template's trailing newline
        cache_size: Number of compiled templates kept in memory
    """

    model_config = ConfigDict(extra="forbid")

    sandbox: bool = True
    strict: bool = True
    trim_blocks: bool = True
    lstrip_blocks: bool = True
    keep_trailing_newline: bool = True
    cache_size: int = Field(default=128, ge=1)


def load_engine_settings(file_path: Union[str, Path]) -> EngineSettings:
    """Load engine settings from a YAML file.

    An empty file gives the default settings.

    Raises:
        FileNotFoundError: If the file doesn't exist
        yaml.YAMLError: If the YAML is invalid
        ValueError: If the settings don't match the schema
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise yaml.YAMLError(f"Failed to parse YAML file {path}: {e}") from e

    try:
        settings = EngineSettings.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Engine settings validation failed for {path}:\n{e}") from e

    logger.debug(f"Loaded engine settings from {path}: {settings}")
    return settings
