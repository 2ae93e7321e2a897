"""Centralized path management for the pricescan project.

All paths hang off one project root so every module agrees on where
configuration, debug dumps and temporary capture files live.
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path


def _get_project_root() -> Path:
    """Project root: $PRICESCAN_HOME if set, else the working directory."""
    env_root = os.environ.get("PRICESCAN_HOME")
    if env_root:
        return Path(env_root).expanduser()
    return Path.cwd()


@dataclass
class ProjectPaths:
    """Container for all project-related paths."""

    root: Path = field(default_factory=_get_project_root)

    def __post_init__(self) -> None:
        self.root = self.root.resolve()

    # --- Configuration paths ---
    @property
    def config(self) -> Path:
        """Configuration directory (config/)."""
        return self.root / "config"

    @property
    def engine_config(self) -> Path:
        """Engine tunables, keyword tables and OCR settings TOML file."""
        return self.config / "pricescan.toml"

    # --- Capture paths ---
    @property
    def captures(self) -> Path:
        """Root directory for capture artifacts."""
        return self.root / "captures"

    @property
    def results(self) -> Path:
        """Saved capture results (JSON)."""
        return self.captures / "results"

    @property
    def jobs(self) -> Path:
        """Per-job temporary section images."""
        return TMPDIR / "jobs"


_paths: ProjectPaths | None = None
_tmpdir = tempfile.TemporaryDirectory(prefix="pricescan-")
TMPDIR = Path(_tmpdir.name)


def get_paths() -> ProjectPaths:
    """Get the singleton ProjectPaths instance."""
    global _paths
    if _paths is None:
        _paths = ProjectPaths()
    return _paths


def set_project_root(root: Path) -> ProjectPaths:
    """Point the singleton at a different project root (CLI --root, tests)."""
    global _paths
    _paths = ProjectPaths(root=root)
    return _paths
