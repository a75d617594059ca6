"""
Configuration loader — reads mvnext.yml into ExtensionOptions.

Options may come from a YAML file, from CLI flags, or both; flags win.
The file is validated against the pydantic model and errors are
reported as ConfigError.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from mvnext.core.models.options import ExtensionOptions

logger = logging.getLogger(__name__)

# Default config filename
OPTIONS_FILE = "mvnext.yml"

# Optional wrapping key in the YAML file
OPTIONS_KEY = "gradleEnterprise"


class ConfigError(Exception):
    """Raised when the options are invalid or missing."""


def find_options_file(start_dir: Path | None = None) -> Path | None:
    """Search for mvnext.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to mvnext.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / OPTIONS_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def read_options_file(path: Path) -> dict[str, Any]:
    """Read the raw option mapping from a YAML file.

    Raises:
        ConfigError: If the file is missing, unreadable or not a mapping.
    """
    if not path.is_file():
        raise ConfigError(f"Options file not found: {path}")

    logger.debug("Loading options from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # The YAML may wrap everything under a "gradleEnterprise" key or be flat
    if OPTIONS_KEY in data:
        wrapped = data[OPTIONS_KEY]
        if not isinstance(wrapped, dict):
            raise ConfigError(f"'{OPTIONS_KEY}' in {path} must be a mapping")
        return dict(wrapped)
    return data


def load_options(
    path: Path | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> ExtensionOptions:
    """Build validated options from a file and/or explicit overrides.

    Args:
        path: Optional mvnext.yml. When None only ``overrides`` are used.
        overrides: Values from the command line, keyed by field name.
            Entries whose value is None are ignored.

    Returns:
        Validated ExtensionOptions.

    Raises:
        ConfigError: If the file is invalid or the merged options are.
    """
    data: dict[str, Any] = read_options_file(path) if path is not None else {}

    for key, value in (overrides or {}).items():
        if value is None:
            continue
        field = ExtensionOptions.model_fields.get(key)
        # a flag replaces whichever spelling the file used
        if field is not None and field.alias:
            data.pop(field.alias, None)
        data[key] = value

    try:
        options = ExtensionOptions.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid extension options: {e}") from e

    logger.info("Options: server=%s version=%s", options.server_url, options.version_selector)
    return options
