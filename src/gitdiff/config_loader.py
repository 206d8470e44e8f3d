"""Configuration file loading and merging."""

import json
from pathlib import Path
from typing import Any, Optional

import yaml

from gitdiff.config import (
    DEFAULT_GIT_EXECUTABLE,
    DEFAULT_MAX_OUTPUT_BYTES,
    Config,
    get_default_config_path,
    get_project_config_path,
)


class ConfigLoadError(Exception):
    """Raised when configuration cannot be loaded."""

    pass


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        path: Path to the YAML file

    Returns:
        Parsed configuration dictionary

    Raises:
        ConfigLoadError: If the file cannot be loaded
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        return {}
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"Failed to parse YAML file {path}: {e}") from e
    except OSError as e:
        raise ConfigLoadError(f"Failed to load config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigLoadError(f"{path}: Root element must be a dictionary")
    return data


def load_json_file(path: Path) -> dict[str, Any]:
    """
    Load a JSON configuration file.

    Args:
        path: Path to the JSON file

    Returns:
        Parsed configuration dictionary

    Raises:
        ConfigLoadError: If the file cannot be loaded
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return {}
    except json.JSONDecodeError as e:
        raise ConfigLoadError(f"Failed to parse JSON file {path}: {e}") from e
    except OSError as e:
        raise ConfigLoadError(f"Failed to load config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigLoadError(f"{path}: Root element must be a dictionary")
    return data


_LOADERS = {
    ".yml": load_yaml_file,
    ".yaml": load_yaml_file,
    ".json": load_json_file,
}

# Keys that select what gets executed; rejected in project config.
GLOBAL_ONLY_KEYS = ("git_executable",)


def load_config_file(path: Path) -> dict[str, Any]:
    """Load a .yml/.yaml/.json config file; a missing file loads as {}."""
    loader = _LOADERS.get(path.suffix.lower())
    if loader is None:
        if not path.exists():
            return {}
        raise ConfigLoadError(
            f"Unsupported config file format: {path.suffix}. Use .yml, .yaml, or .json"
        )
    return loader(path)


def check_project_keys(data: dict[str, Any]) -> list[str]:
    """Return errors for keys that are only accepted in the global config."""
    return [
        f"'{key}' is only allowed in the global config, not in project config"
        for key in GLOBAL_ONLY_KEYS
        if key in data
    ]


def parse_config(data: dict[str, Any]) -> Config:
    """Parse configuration from dictionary."""
    return Config(
        git_executable=data.get("git_executable", DEFAULT_GIT_EXECUTABLE),
        max_output_bytes=data.get("max_output_bytes", DEFAULT_MAX_OUTPUT_BYTES),
        raw=data.get("raw", False),
        default_range=data.get("default_range"),
        metadata=data.get("metadata", {}),
    )


def merge_config_data(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Merge two raw configuration dictionaries, with override taking precedence.

    Only keys present in override replace those in base; metadata is merged.
    """
    merged = {**base, **override}

    base_metadata = base.get("metadata")
    override_metadata = override.get("metadata")
    if isinstance(base_metadata, dict) and isinstance(override_metadata, dict):
        merged["metadata"] = {**base_metadata, **override_metadata}

    return merged


def load_config(
    global_config_path: Optional[Path] = None,
    project_config_path: Optional[Path] = None,
) -> Config:
    """
    Load configuration from global and project config files.

    Project config takes precedence over global config. Keys in
    GLOBAL_ONLY_KEYS are rejected when they appear in the project config.

    Args:
        global_config_path: Path to global config (default: ~/.gitdiff/config.yml)
        project_config_path: Path to project config (default: ./.gitdiff.yml)

    Returns:
        Merged configuration

    Raises:
        ConfigLoadError: If configuration cannot be loaded or parsed
    """
    if global_config_path is None:
        global_config_path = get_default_config_path()
    if project_config_path is None:
        project_config_path = get_project_config_path()

    global_data = load_config_file(global_config_path)
    project_data = load_config_file(project_config_path)

    errors = check_project_keys(project_data)
    if errors:
        raise ConfigLoadError(f"{project_config_path}: {'; '.join(errors)}")

    return parse_config(merge_config_data(global_data, project_data))


def validate_config_file(config_path: Path, project: bool = False) -> tuple[bool, list[str]]:
    """
    Validate a configuration file.

    Args:
        config_path: Path to the config file
        project: Whether the file is a project config (global-only keys are errors)

    Returns:
        Tuple of (is_valid, list of error messages)
    """
    errors = []

    try:
        data = load_config_file(config_path)
    except ConfigLoadError as e:
        errors.append(str(e))
        return False, errors

    if not data:
        errors.append(f"Config file {config_path} not found or empty")
        return False, errors

    if project:
        errors.extend(check_project_keys(data))

    config = parse_config(data)
    errors.extend(config.validate())

    return len(errors) == 0, errors
