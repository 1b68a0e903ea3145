"""Configuration loading with YAML parsing and validation."""

from pathlib import Path
from typing import Any

import pydantic_yaml

from .schema import PipelineConfig


def default_config() -> PipelineConfig:
    """Build the default configuration without reading a file."""
    return PipelineConfig()


def load_config(config_path: Path | str) -> PipelineConfig:
    """
    Load and validate predictor configuration from a YAML file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated PipelineConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        pydantic.ValidationError: If config is invalid
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        yaml_content = f.read()

    # An empty file means all defaults
    if not yaml_content.strip():
        return default_config()

    return pydantic_yaml.parse_yaml_raw_as(PipelineConfig, yaml_content)


def apply_overrides(config: PipelineConfig, overrides: dict[str, Any]) -> PipelineConfig:
    """
    Apply dotted-key overrides to a config and re-validate.

    None values are ignored so unset CLI options keep the file's value.

    Raises:
        KeyError: If a dotted key names an unknown section
        pydantic.ValidationError: If the final config is invalid
    """
    config_dict = config.model_dump()

    for key, value in overrides.items():
        if value is None:
            continue
        if "." in key:
            # Nested keys like "prediction.count"
            parts = key.split(".")
            target = config_dict
            for part in parts[:-1]:
                target = target[part]
            target[parts[-1]] = value
        else:
            config_dict[key] = value

    return PipelineConfig.model_validate(config_dict)


def load_config_with_overrides(
    config_path: Path | str | None,
    overrides: dict[str, Any],
) -> PipelineConfig:
    """
    Load config from YAML (or defaults when no path) and apply overrides.

    Used by the CLI, whose flags override config file values.

    Args:
        config_path: Path to YAML configuration file, or None for defaults
        overrides: Values to override, nested keys as "section.field"

    Returns:
        Validated PipelineConfig with overrides applied

    Raises:
        FileNotFoundError: If config file doesn't exist
        pydantic.ValidationError: If final config is invalid
    """
    if config_path is None:
        config = default_config()
    else:
        config = load_config(config_path)
    return apply_overrides(config, overrides)
