"""Runtime infrastructure for the pricescan project.

This package provides process/runtime services including:
- Logging setup via get_logger()
- Path resolution via get_paths(), ProjectPaths, TMPDIR
- Engine configuration via load_engine_config()

Usage:
    from pricescan.runtime import get_logger, get_paths

    logger = get_logger(__name__)
    paths = get_paths()
    print(paths.root, paths.engine_config)

Adapters with heavier dependencies (``ocr_client``, ``images``,
``section_storage``) are imported from their modules directly.
"""

from pricescan.runtime.config import EngineConfig, build_engine_config, load_engine_config
from pricescan.runtime.logging import (
    DEFAULT_LOG_LEVEL,
    LOG_FORMAT,
    LOG_FORMAT_DEBUG,
    configure_logging,
    get_logger,
    set_log_level,
)
from pricescan.runtime.paths import (
    TMPDIR,
    ProjectPaths,
    get_paths,
    set_project_root,
)

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "set_log_level",
    "DEFAULT_LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FORMAT_DEBUG",
    # Config
    "EngineConfig",
    "build_engine_config",
    "load_engine_config",
    # Paths
    "get_paths",
    "set_project_root",
    "ProjectPaths",
    "TMPDIR",
]
