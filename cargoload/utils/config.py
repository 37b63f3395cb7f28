"""
Configuration Management

Load, save, and validate configuration files for packing runs and
benchmarks.
"""

import copy
import logging
from pathlib import Path
from typing import Any, Dict

import yaml

from ..engine.cargo import ContainerSpec, InvalidInputError, get_container

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    "container": {
        "preset": "20GP",
    },
    "cargo": {
        "size_range": [0.1, 0.4],
        "weight_range": [5.0, 500.0],
        "cant_stack_top_ratio": 0.1,
    },
    "benchmark": {
        "n_trials": 10,
        "n_boxes": 50,
        "seed": 42,
    },
    "output": {
        "dir": "outputs",
        "log_file": "logs/pack.log",
    },
}


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Missing keys are filled from DEFAULT_CONFIG.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Configuration dictionary

    Example:
        >>> config = load_config("config/default.yaml")
        >>> print(config["container"]["preset"])
        20GP
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        loaded = yaml.safe_load(f) or {}

    if not isinstance(loaded, dict):
        raise ValueError(f"Config root must be a mapping: {config_path}")

    config = merge_configs(DEFAULT_CONFIG, loaded)
    _validate_config(config)

    return config


def save_config(config: Dict[str, Any], save_path: str):
    """Write ``config`` as YAML, creating parent directories as needed."""
    path = Path(save_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(config, sort_keys=False))

    logger.info("Configuration saved to: %s", path)


def merge_configs(base_config: Dict[str, Any],
                  override_config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep-merge ``override_config`` onto a copy of ``base_config``.

    Sections present in both merge key by key. Any other value, lists
    included, replaces the base value outright. Neither input is modified
    and the result shares no mutable values with them.
    """
    merged = copy.deepcopy(base_config)

    for key, value in override_config.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = merge_configs(current, value)
        else:
            merged[key] = copy.deepcopy(value)

    return merged


def _validate_config(config: Dict[str, Any]):
    """
    Validate configuration structure and values.

    Args:
        config: Configuration dictionary

    Raises:
        ValueError: If configuration is invalid
    """
    required_sections = ["container", "cargo", "benchmark"]

    for section in required_sections:
        if not isinstance(config.get(section), dict):
            raise ValueError(f"Missing required section: {section}")

    # Validate container (preset name or explicit dimensions)
    container_spec_from_config(config)

    cargo_config = config["cargo"]
    size_range = cargo_config["size_range"]
    if len(size_range) != 2 or not 0 < size_range[0] <= size_range[1] <= 1:
        raise ValueError("cargo.size_range must be [min, max] with 0 < min <= max <= 1")

    weight_range = cargo_config["weight_range"]
    if len(weight_range) != 2 or not 0 < weight_range[0] <= weight_range[1]:
        raise ValueError("cargo.weight_range must be [min, max] with 0 < min <= max")

    if not 0 <= cargo_config["cant_stack_top_ratio"] <= 1:
        raise ValueError("cargo.cant_stack_top_ratio must be in [0, 1]")

    bench_config = config["benchmark"]
    if bench_config["n_trials"] < 1:
        raise ValueError("benchmark.n_trials must be at least 1")
    if bench_config["n_boxes"] < 1:
        raise ValueError("benchmark.n_boxes must be at least 1")

    logger.debug("Configuration validated successfully")


def container_spec_from_config(config: Dict[str, Any]) -> ContainerSpec:
    """
    Build the ContainerSpec described by the ``container`` section.

    The section either names a preset (``preset: 40HQ``) or gives
    ``width``, ``height``, ``depth`` and optionally ``max_load``.

    Raises:
        ValueError: If the section is incomplete or invalid
    """
    section = config["container"]
    try:
        if "width" in section:
            spec = ContainerSpec(
                width=float(section["width"]),
                height=float(section["height"]),
                depth=float(section["depth"]),
                max_load=float(section.get("max_load", float("inf"))),
                name=str(section.get("name", "custom")),
            )
            spec.validate()
            return spec
        return get_container(str(section["preset"]))
    except KeyError as e:
        raise ValueError(f"container section is missing {e}") from e
    except InvalidInputError as e:
        raise ValueError(f"Invalid container section: {e}") from e


def get_default_config() -> Dict[str, Any]:
    """
    Get default configuration.

    Returns:
        config/default.yaml if present, otherwise the built-in defaults
    """
    default_path = Path("config/default.yaml")
    if default_path.exists():
        return load_config(str(default_path))
    return copy.deepcopy(DEFAULT_CONFIG)


def update_config_from_args(config: Dict[str, Any],
                            args: Dict[str, Any]) -> Dict[str, Any]:
    """
    Update configuration from command-line arguments.

    Args:
        config: Base configuration
        args: Command-line arguments

    Returns:
        Updated configuration
    """
    updated_config = copy.deepcopy(config)

    # Map common CLI args to config keys
    arg_mapping = {
        "n_trials": ("benchmark", "n_trials"),
        "random": ("benchmark", "n_boxes"),
        "seed": ("benchmark", "seed"),
        "output_dir": ("output", "dir"),
    }

    for arg_key, (section, config_key) in arg_mapping.items():
        if arg_key in args and args[arg_key] is not None:
            if section not in updated_config:
                updated_config[section] = {}
            updated_config[section][config_key] = args[arg_key]

    # A preset on the command line replaces any explicit dimensions
    container_arg = args.get("container")
    if container_arg is not None:
        updated_config["container"] = {"preset": container_arg}

    return updated_config
