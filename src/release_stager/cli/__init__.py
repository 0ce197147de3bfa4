"""Command-line interface for release-stager."""

from __future__ import annotations

from release_stager.cli.app import app

__all__ = ["app"]
