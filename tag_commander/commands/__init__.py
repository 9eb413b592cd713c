"""Command discovery and registration."""

from __future__ import annotations

import importlib
import pkgutil
from typing import TYPE_CHECKING

import click

from tag_commander.utils.output import error

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from tag_commander.config import Config

# Exit codes shared by the index-backed commands
EXIT_SUCCESS = 0
EXIT_NO_RESULTS = 0
EXIT_PARSE_ERROR = 1
EXIT_INDEX_ERROR = 2
EXIT_NO_ROOT = 3


def discover_commands() -> Iterator[click.Command]:
    """Discover and yield all command objects from this package.

    Commands are discovered by scanning all modules in this package
    and looking for a 'cli' attribute that is a Click command.

    Yields:
        Click Command objects found in submodules.
    """
    import tag_commander.commands as commands_pkg

    for module_info in pkgutil.iter_modules(commands_pkg.__path__):
        if module_info.name.startswith("_"):
            continue  # Skip private modules

        module = importlib.import_module(f"tag_commander.commands.{module_info.name}")

        if hasattr(module, "cli"):
            cmd = getattr(module, "cli")
            if isinstance(cmd, click.Command):
                yield cmd


def require_root(config: Config | None) -> Path:
    """Return the configured root directory or exit with EXIT_NO_ROOT."""
    if config is None:
        error("Configuration not loaded")
        raise SystemExit(EXIT_NO_ROOT)

    root = config.root
    if not root.is_dir():
        error(f"Root directory not found: {root}", hint="Use --root or set paths.root in config")
        raise SystemExit(EXIT_NO_ROOT)
    return root
