"""Configuration loading."""

import os
from pathlib import Path
from typing import Optional

import yaml

from .config_models import MomentsConfig

CONFIG_ENV_VAR = "MOMENTS_CONFIG"


def find_config() -> Optional[Path]:
    """Find config file in standard locations."""
    explicit = os.getenv(CONFIG_ENV_VAR)
    if explicit:
        return Path(explicit).expanduser()

    locations = [
        Path.cwd() / "config.yaml",
        Path.home() / ".moments" / "config.yaml",
        Path.home() / "moments" / "config.yaml",
    ]
    for loc in locations:
        if loc.exists():
            return loc
    return None


def load_config_model(config_path: Optional[Path] = None) -> MomentsConfig:
    """Load configuration as Pydantic model with validation.

    Raises:
        ValueError: If the YAML is malformed or fails validation
    """
    base_config = {}

    path = config_path or find_config()
    if path and path.exists():
        try:
            with open(path) as f:
                base_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in config file: {e}")

    if not isinstance(base_config, dict):
        raise ValueError("Config file must contain a mapping at the top level")

    try:
        return MomentsConfig.from_dict(base_config)
    except Exception as e:
        raise ValueError(f"Config validation failed: {e}")
