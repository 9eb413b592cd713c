"""Unit tests for configuration."""

from pathlib import Path

import pytest

from tag_commander.config import Config, load_config, save_config
from tag_commander.exceptions import ConfigParseError, ConfigValidationError
from tag_commander.query.compiler import PathMatch


def test_default_config() -> None:
    """Test that default config has sensible values."""
    config = Config()
    assert config.colored_output is True
    assert config.path_match is PathMatch.EXACT
    assert config.default_limit is None


def test_load_missing_config(temp_dir: Path) -> None:
    """Test loading when config file doesn't exist."""
    config_path = temp_dir / "nonexistent.toml"
    config, warnings = load_config(config_path)

    assert config is not None
    assert any("No config file found" in w for w in warnings)


def test_load_valid_config(sample_config: Path, temp_dir: Path) -> None:
    """Test loading a valid config file."""
    config, warnings = load_config(sample_config)

    assert config.root == temp_dir
    assert config.colored_output is False
    assert config.path_match is PathMatch.PREFIX
    assert config.default_limit == 50
    assert config.config_path == sample_config
    assert warnings == []


def test_load_invalid_toml(temp_dir: Path) -> None:
    """Test loading invalid TOML raises error."""
    config_path = temp_dir / "invalid.toml"
    config_path.write_text("this is not valid [ toml")

    with pytest.raises(ConfigParseError):
        load_config(config_path)


@pytest.mark.parametrize(
    ("content", "key"),
    [
        ('[display]\ncolored_output = "not a boolean"\n', "display.colored_output"),
        ("[paths]\nroot = 42\n", "paths.root"),
        ('[search]\npath_match = "fuzzy"\n', "search.path_match"),
        ("[search]\npath_match = 1\n", "search.path_match"),
        ('[search]\ndefault_limit = "10"\n', "search.default_limit"),
        ("[search]\ndefault_limit = true\n", "search.default_limit"),
    ],
)
def test_config_validation_invalid_value(temp_dir: Path, content: str, key: str) -> None:
    """Test that invalid values raise validation error naming the key."""
    config_path = temp_dir / "bad.toml"
    config_path.write_text(content)

    with pytest.raises(ConfigValidationError) as exc_info:
        load_config(config_path)
    assert exc_info.value.key == key


def test_non_positive_limit_ignored(temp_dir: Path) -> None:
    """Test that a non-positive limit warns and falls back to unlimited."""
    config_path = temp_dir / "limit.toml"
    config_path.write_text(f'[paths]\nroot = "{temp_dir.as_posix()}"\n[search]\ndefault_limit = 0\n')

    config, warnings = load_config(config_path)
    assert config.default_limit is None
    assert any("default_limit" in w for w in warnings)


def test_missing_root_warns(temp_dir: Path) -> None:
    """Test that a root which doesn't exist only produces a warning."""
    config_path = temp_dir / "root.toml"
    config_path.write_text(f'[paths]\nroot = "{(temp_dir / "gone").as_posix()}"\n')

    config, warnings = load_config(config_path)
    assert config.root == temp_dir / "gone"
    assert any(w.startswith("Root directory not found") for w in warnings)


def test_root_path_expansion() -> None:
    """Test that the root path is expanded and made absolute."""
    config = Config(root=Path("~/samples"))
    config.validate()

    assert "~" not in str(config.root)
    assert config.root.is_absolute()


def test_save_and_reload(temp_dir: Path) -> None:
    """Test that saved config loads back with the same values."""
    config_path = temp_dir / "sub" / "saved.toml"
    original = Config(
        root=temp_dir,
        colored_output=False,
        path_match=PathMatch.CONTAINS,
        default_limit=7,
    )
    save_config(original, config_path)

    loaded, warnings = load_config(config_path)
    assert loaded.root == temp_dir
    assert loaded.colored_output is False
    assert loaded.path_match is PathMatch.CONTAINS
    assert loaded.default_limit == 7
    assert warnings == []


def test_save_omits_default_search_settings(temp_dir: Path) -> None:
    """Test that default search settings are not written."""
    config_path = temp_dir / "minimal.toml"
    save_config(Config(root=temp_dir), config_path)

    content = config_path.read_text()
    assert "[paths]" in content
    assert "[search]" not in content
