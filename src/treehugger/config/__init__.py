"""Configuration files and loading utilities."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from treehugger.utils.serialize import recursive_merge

builtin_config_dir = Path(__file__).parent
DEFAULT_CONFIG_FILE = builtin_config_dir / "default.yaml"


class TreeHuggerConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    language: str = "javascript"
    """Grammar used when no language is given and none can be inferred from a file name."""
    suggest_patterns: bool = True
    """Log alias suggestions when a selector fails to parse."""
    method_spacing: int = 1
    """Blank lines placed between class methods by ``insert_after``."""
    log_level: str = "WARNING"

    @field_validator("language")
    @classmethod
    def _check_language(cls, value: str) -> str:
        from treehugger.languages import SUPPORTED_LANGUAGES

        if value not in SUPPORTED_LANGUAGES:
            raise ValueError(f"unsupported language {value!r}, expected one of {', '.join(SUPPORTED_LANGUAGES)}")
        return value

    @field_validator("method_spacing")
    @classmethod
    def _check_spacing(cls, value: int) -> int:
        if value < 0:
            raise ValueError("method_spacing must be >= 0")
        return value


def _key_value_spec_to_nested_dict(config_spec: str) -> dict:
    """Interpret key-value specs from the command line.

    Example:

    "language=tsx" -> {"language": "tsx"}
    """
    key, value = config_spec.split("=", 1)
    try:
        value = yaml.safe_load(value)
    except yaml.YAMLError:
        pass
    keys = key.split(".")
    result: dict[str, Any] = {}
    current = result
    for k in keys[:-1]:
        current[k] = {}
        current = current[k]
    current[keys[-1]] = value
    return result


def get_config_from_spec(config_spec: str | Path) -> dict:
    """Get a config dict from a YAML file path or a ``key=value`` spec."""
    if isinstance(config_spec, str) and "=" in config_spec:
        return _key_value_spec_to_nested_dict(config_spec)
    path = Path(config_spec)
    if not path.exists() and (builtin_config_dir / path).exists():
        path = builtin_config_dir / path
    if not path.exists():
        raise FileNotFoundError(f"Could not find config file for spec: {config_spec}")
    return yaml.safe_load(path.read_text()) or {}


def load_config(*config_specs: str | Path) -> TreeHuggerConfig:
    """Merge the built-in defaults with every spec, in order, and validate."""
    merged = recursive_merge(
        get_config_from_spec(DEFAULT_CONFIG_FILE),
        *(get_config_from_spec(spec) for spec in config_specs),
    )
    try:
        return TreeHuggerConfig(**merged)
    except ValidationError as e:
        raise ValueError(f"Invalid treehugger configuration: {e}") from e


__all__ = [
    "DEFAULT_CONFIG_FILE",
    "TreeHuggerConfig",
    "builtin_config_dir",
    "get_config_from_spec",
    "load_config",
]
