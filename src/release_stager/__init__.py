"""release-stager: infer, check and tag semantic releases from git history."""

from __future__ import annotations

__version__ = "0.1.0"
