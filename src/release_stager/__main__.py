"""Allow running as ``python -m release_stager``."""

from __future__ import annotations

from release_stager.cli.app import app

if __name__ == "__main__":
    app()
