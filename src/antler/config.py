"""Load optional configuration from ``antler.yaml``."""

from __future__ import annotations

import os
from pathlib import Path

import pydantic
import yaml
from loguru import logger

from antler.errors import ConfigurationError
from antler.model.settings import Settings

CONFIG_FILE = "antler.yaml"


def find_config(directory: str | os.PathLike[str]) -> Path | None:
    """Return ``antler.yaml`` in *directory* if it exists."""
    path = Path(directory) / CONFIG_FILE
    return path if path.is_file() else None


def load_settings(path: str | os.PathLike[str] | None = None) -> Settings:
    """Load and validate a configuration file.

    With no *path*, default settings are returned.  An explicitly named
    file that does not exist is an error.

    Raises
    ------
    ConfigurationError
        Unreadable YAML, a top level that is not a mapping, or values the
        ``Settings`` model rejects.
    """
    if path is None:
        return Settings()

    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Cannot read configuration file '{path}': {exc}") from exc

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in '{path}': {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file '{path}' must contain a mapping")

    try:
        settings = Settings.model_validate(data)
    except pydantic.ValidationError as exc:
        details = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
            for err in exc.errors()
        )
        raise ConfigurationError(f"Invalid configuration in '{path}': {details}") from exc

    logger.debug("Loaded configuration from {}", path)
    return settings
