"""Configuration management for release-stager."""

from __future__ import annotations

from release_stager.config.loader import load_config, load_properties
from release_stager.config.models import ReleaseProperties, ReleaseStagerConfig

__all__ = [
    "ReleaseProperties",
    "ReleaseStagerConfig",
    "load_config",
    "load_properties",
]
