"""Configuration module for QueueSim."""

from pathlib import Path
import yaml

CONFIG_DIR = Path(__file__).resolve().parent
DEFAULT_CONFIG_PATH = CONFIG_DIR / "default.yaml"
SCENARIO_DIR = CONFIG_DIR / "scenarios"


def load_config(config_path: str) -> dict:
    """Load configuration from YAML file.

    Args:
        config_path: Path to configuration file

    Returns:
        Configuration dictionary
    """
    with open(config_path, 'r') as f:
        return yaml.safe_load(f) or {}


def merge_configs(base_config: dict, override_config: dict) -> dict:
    """Merge two configuration dictionaries.

    Nested dictionaries are merged recursively; lists such as ``stages``
    are replaced as a whole.

    Args:
        base_config: Base configuration
        override_config: Override configuration

    Returns:
        Merged configuration
    """
    merged = base_config.copy()
    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_scenario(config_path: str) -> dict:
    """Load a scenario file on top of the default configuration.

    Args:
        config_path: Path to a scenario YAML file

    Returns:
        Complete scenario configuration
    """
    return merge_configs(load_config(str(DEFAULT_CONFIG_PATH)), load_config(config_path))
