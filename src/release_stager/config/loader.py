"""Configuration loading from pyproject.toml and build properties."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from release_stager.config.models import ReleaseProperties, ReleaseStagerConfig
from release_stager.exceptions import ConfigNotFoundError, ConfigValidationError

if TYPE_CHECKING:
    from collections.abc import Iterable

TOOL_NAME = "release-stager"


def find_pyproject_toml(start: Path | None = None) -> Path:
    """Find pyproject.toml by walking up from ``start``.

    Args:
        start: Directory to start searching from (defaults to cwd)

    Returns:
        Path to the nearest pyproject.toml

    Raises:
        ConfigNotFoundError: If no pyproject.toml exists up to the root
    """
    current = (start or Path.cwd()).resolve()

    for directory in (current, *current.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate

    raise ConfigNotFoundError(f"No pyproject.toml found in {current} or any parent directory")


def load_pyproject_toml(path: Path) -> dict[str, Any]:
    """Load and parse a pyproject.toml file.

    Raises:
        ConfigNotFoundError: If the file does not exist
        ConfigValidationError: If the file is not valid TOML
    """
    if not path.is_file():
        raise ConfigNotFoundError(f"File not found: {path}")

    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigValidationError(f"Invalid TOML in {path}: {e}") from e


def extract_release_stager_config(pyproject: dict[str, Any]) -> dict[str, Any]:
    """Return the ``[tool.release-stager]`` table, or an empty dict."""
    return pyproject.get("tool", {}).get(TOOL_NAME, {})


def load_config(path: Path | None = None) -> ReleaseStagerConfig:
    """Load project configuration.

    A project without pyproject.toml, or without a ``[tool.release-stager]``
    table, gets the default configuration.

    Args:
        path: Project directory or pyproject.toml path

    Returns:
        Validated configuration

    Raises:
        ConfigValidationError: If the table contains invalid values
    """
    if path is not None and path.is_file():
        pyproject_path = path
    else:
        try:
            pyproject_path = find_pyproject_toml(path)
        except ConfigNotFoundError:
            return ReleaseStagerConfig()

    data = extract_release_stager_config(load_pyproject_toml(pyproject_path))

    try:
        return ReleaseStagerConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid [tool.{TOOL_NAME}] in {pyproject_path}: {e}") from e


def parse_property_options(options: Iterable[str]) -> dict[str, str]:
    """Split ``key=value`` options into a mapping.

    A bare ``key`` is stored with an empty value, so ``-P release.version``
    is present but empty.

    Raises:
        ConfigValidationError: If an option has no key
    """
    properties: dict[str, str] = {}
    for option in options:
        key, _, value = option.partition("=")
        key = key.strip()
        if not key:
            raise ConfigValidationError(f"Invalid property option: {option!r}")
        properties[key] = value
    return properties


def load_properties(options: Iterable[str] = ()) -> ReleaseProperties:
    """Build :class:`ReleaseProperties` from ``key=value`` options.

    Raises:
        ConfigValidationError: If a recognized property has an invalid value
    """
    try:
        return ReleaseProperties.model_validate(parse_property_options(options))
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid build property: {e}") from e
