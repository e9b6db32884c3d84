"""Configuration file handling for unpivoter."""

from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

from unpivoter.utils import parse_column_list

# Parameters that make sense to save in config
SAVEABLE_PARAMS = [
    "keys",
    "mode",
    "has_headers",
    "inline",
    "var_name",
    "value_name",
    "strict",
]

DEFAULTS = {
    "has_headers": False,
    "inline": False,
    "var_name": "key",
    "value_name": "value",
    "strict": False,
}


def load_config(config_file: Path) -> Dict[str, Any]:
    """Load configuration from YAML file.

    Args:
        config_file: Path to YAML configuration file

    Returns:
        Dictionary of configuration parameters

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is invalid YAML
    """
    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_file}")

    with open(config_file, "r") as f:
        config = yaml.safe_load(f)

    return config or {}


def save_config(config_file: Path, config: Dict[str, Any]) -> None:
    """Save configuration to YAML file.

    Args:
        config_file: Path to save configuration
        config: Dictionary of configuration parameters
    """
    config_file.parent.mkdir(parents=True, exist_ok=True)

    with open(config_file, "w") as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)


def normalize_keys(value: Union[None, str, List[Any]]) -> List[str]:
    """Accept keys from config either as a comma-separated string or a list."""
    if value is None:
        return []
    if isinstance(value, str):
        return parse_column_list(value)
    return [str(item).strip() for item in value if str(item).strip()]


def get_config_params(options: Dict[str, Any]) -> Dict[str, Any]:
    """Extract saveable parameters from options dictionary.

    Args:
        options: Full options dictionary from CLI

    Returns:
        Dictionary of parameters that should be saved to config

    Note:
        Runtime-only options (file, verbose, dry_run) are never saved, and
        values equal to their defaults are skipped to keep config files clean
    """
    config = {}
    for param in SAVEABLE_PARAMS:
        value = options.get(param)
        if value is None:
            continue

        if param in DEFAULTS and value == DEFAULTS[param]:
            continue

        if isinstance(value, (list, tuple)):
            if not value:
                continue
            # Comma-separated strings are easier to edit by hand
            config[param] = ",".join(str(v) for v in value)
        else:
            config[param] = value

    return config


def apply_config(config: Dict[str, Any], cli_options: Dict[str, Any]) -> Dict[str, Any]:
    """Apply configuration to CLI options, with CLI taking precedence.

    Args:
        config: Configuration loaded from file
        cli_options: Options given explicitly on the command line

    Returns:
        Merged options dictionary (CLI options override config)
    """
    merged = config.copy()

    for key, value in cli_options.items():
        if value is not None:
            merged[key] = value

    if "keys" in merged:
        merged["keys"] = normalize_keys(merged["keys"])

    return merged
