"""Configuration management for tag-commander."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli_w

from tag_commander.exceptions import (
    ConfigParseError,
    ConfigValidationError,
)
from tag_commander.query.compiler import PathMatch


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    return Path.home() / ".config" / "tag-commander" / "config.toml"


@dataclass
class Config:
    """Application configuration.

    Attributes:
        root: Directory whose files are indexed and searched.
        colored_output: Whether to use colored terminal output.
        path_match: How ``inpath:`` patterns match stored paths.
        default_limit: Maximum number of search results (None = unlimited).
        config_path: Path where config was loaded from (None if defaults).
    """

    root: Path = field(default_factory=Path.cwd)
    colored_output: bool = True
    path_match: PathMatch = PathMatch.EXACT
    default_limit: int | None = None
    config_path: Path | None = None

    def validate(self) -> list[str]:
        """Validate configuration values.

        Returns:
            List of warning messages for non-fatal issues.
        """
        warnings: list[str] = []

        self.root = self.root.expanduser().resolve()

        # Might be created later, so only warn
        if not self.root.exists():
            warnings.append(f"Root directory not found: {self.root}")
        elif not self.root.is_dir():
            warnings.append(f"Root is not a directory: {self.root}")

        if self.default_limit is not None and self.default_limit <= 0:
            warnings.append(
                f"search.default_limit={self.default_limit} is not positive, ignoring it"
            )
            self.default_limit = None

        return warnings


def load_config(config_path: Path | None = None) -> tuple[Config, list[str]]:
    """Load configuration from file or use defaults.

    Args:
        config_path: Explicit config file path. If None, uses default location.

    Returns:
        Tuple of (Config object, list of warning messages).

    Raises:
        ConfigParseError: If config file exists but has invalid syntax.
        ConfigValidationError: If config values are invalid.
    """
    warnings: list[str] = []

    if config_path is None:
        config_path = get_default_config_path()

    config_path = config_path.expanduser().resolve()

    if not config_path.exists():
        config = Config()
        warnings.append(
            f"No config file found at {config_path}. Using defaults. "
            f"Create config with: tag-commander init-config"
        )
        config_warnings = config.validate()
        return config, warnings + config_warnings

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(config_path, str(e)) from e

    config = _parse_config_dict(data, config_path)
    config_warnings = config.validate()

    return config, warnings + config_warnings


def _parse_config_dict(data: dict[str, Any], config_path: Path) -> Config:
    """Parse configuration dictionary into Config object."""
    config = Config(config_path=config_path)

    # Parse [paths] section
    paths = data.get("paths", {})
    if "root" in paths:
        value = paths["root"]
        if not isinstance(value, str):
            raise ConfigValidationError("paths.root", value, "must be a string path")
        config.root = Path(value)

    # Parse [display] section
    display = data.get("display", {})
    if "colored_output" in display:
        value = display["colored_output"]
        if not isinstance(value, bool):
            raise ConfigValidationError("display.colored_output", value, "must be a boolean")
        config.colored_output = value

    # Parse [search] section
    search = data.get("search", {})
    if "path_match" in search:
        value = search["path_match"]
        choices = ", ".join(m.value for m in PathMatch)
        if not isinstance(value, str):
            raise ConfigValidationError("search.path_match", value, f"must be one of {choices}")
        try:
            config.path_match = PathMatch(value)
        except ValueError:
            raise ConfigValidationError(
                "search.path_match", value, f"must be one of {choices}"
            ) from None

    if "default_limit" in search:
        value = search["default_limit"]
        # bool is an int subclass
        if not isinstance(value, int) or isinstance(value, bool):
            raise ConfigValidationError("search.default_limit", value, "must be an integer")
        config.default_limit = value

    return config


def save_config(config: Config, config_path: Path | None = None) -> None:
    """Save configuration to file.

    Args:
        config: Configuration to save.
        config_path: Path to save to. If None, uses config.config_path or default.
    """
    if config_path is None:
        config_path = config.config_path or get_default_config_path()

    config_path = config_path.expanduser().resolve()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data: dict[str, Any] = {
        "paths": {
            "root": str(config.root),
        },
        "display": {
            "colored_output": config.colored_output,
        },
    }

    # Only non-default search settings
    search_data: dict[str, Any] = {}
    if config.path_match is not PathMatch.EXACT:
        search_data["path_match"] = config.path_match.value
    if config.default_limit is not None:
        search_data["default_limit"] = config.default_limit
    if search_data:
        data["search"] = search_data

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)
