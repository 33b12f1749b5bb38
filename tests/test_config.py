"""Tests for configuration loading."""

import pytest
from pydantic import ValidationError

pytest.importorskip("tree_sitter_language_pack")

from treehugger.config import (  # noqa: E402
    DEFAULT_CONFIG_FILE,
    TreeHuggerConfig,
    get_config_from_spec,
    load_config,
)
from treehugger.utils.serialize import UNSET, recursive_merge  # noqa: E402

# --- recursive_merge ---


def test_recursive_merge_nested():
    """Test recursive_merge merges nested dicts and skips None."""
    merged = recursive_merge({"a": {"b": 1, "c": 2}}, {"a": {"c": 3}}, None)
    assert merged == {"a": {"b": 1, "c": 3}}


def test_recursive_merge_skips_unset():
    """Test UNSET values do not override earlier ones."""
    assert recursive_merge({"a": 1}, {"a": UNSET}) == {"a": 1}


# --- Specs ---


def test_key_value_spec_parses_yaml_scalars():
    """Test key=value specs parse their value as YAML."""
    assert get_config_from_spec("method_spacing=2") == {"method_spacing": 2}
    assert get_config_from_spec("suggest_patterns=false") == {"suggest_patterns": False}
    assert get_config_from_spec("language=tsx") == {"language": "tsx"}


def test_yaml_spec(tmp_path):
    """Test a YAML file path is loaded as a spec."""
    path = tmp_path / "custom.yaml"
    path.write_text("language: typescript\nmethod_spacing: 0\n")
    assert get_config_from_spec(path) == {"language": "typescript", "method_spacing": 0}


def test_builtin_spec_by_name():
    """Test the built-in config can be named without a path."""
    assert get_config_from_spec(DEFAULT_CONFIG_FILE.name)["language"] == "javascript"


def test_missing_spec_raises(tmp_path):
    """Test an unknown spec file raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        get_config_from_spec(tmp_path / "missing.yaml")


# --- load_config ---


def test_load_config_defaults():
    """Test load_config without specs gives the built-in defaults."""
    config = load_config()
    assert config == TreeHuggerConfig()
    assert config.language == "javascript"
    assert config.method_spacing == 1


def test_load_config_later_specs_win(tmp_path):
    """Test later specs override earlier ones."""
    path = tmp_path / "custom.yaml"
    path.write_text("language: typescript\nmethod_spacing: 3\n")
    config = load_config(path, "method_spacing=0")
    assert config.language == "typescript"
    assert config.method_spacing == 0


@pytest.mark.parametrize("spec", ["language=cobol", "method_spacing=-1", "unknown_key=1"])
def test_load_config_rejects_invalid(spec):
    """Test invalid values are reported as ValueError."""
    with pytest.raises(ValueError, match="Invalid treehugger configuration"):
        load_config(spec)


def test_config_is_frozen():
    """Test TreeHuggerConfig instances cannot be changed."""
    config = TreeHuggerConfig()
    with pytest.raises(ValidationError):
        config.language = "tsx"  # type: ignore[misc]


# --- Logging ---


def test_set_level_accepts_names():
    """Test set_level takes lowercase level names and numeric levels."""
    import logging

    from treehugger.utils.log import logger, set_level

    previous = logger.level
    try:
        set_level("debug")
        assert logger.level == logging.DEBUG
        set_level(logging.ERROR)
        assert logger.level == logging.ERROR
    finally:
        logger.setLevel(previous)
