"""
Settings loading for LEVELER.

Tunables live in a layered OmegaConf config: built-in defaults, then an optional
YAML file (LEVELER_SETTINGS_PATH or an explicit path), then caller overrides.

Examples:
    >>> settings = load_settings()
    >>> settings.save.auto_save_interval_ms
    30000

    >>> settings = load_settings(overrides={"retry": {"max_retries": 5}})
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from omegaconf import DictConfig, OmegaConf

load_dotenv()
SETTINGS_PATH = os.getenv("LEVELER_SETTINGS_PATH")
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

DEFAULT_SETTINGS: Dict[str, Any] = {
    "save": {
        "auto_save_interval_ms": 30000,
    },
    "retry": {
        "max_retries": 3,
        "base_delay_ms": 1000,
        "max_delay_ms": 30000,
    },
    "api": {
        "base_url": os.getenv("LEVELER_API_URL", "http://localhost:3000"),
        "timeout_s": 10.0,
    },
    "storage": {
        "path": os.getenv("LEVELER_STORAGE_PATH", "outs/storage/leveler.json"),
    },
}


def load_settings(
    config_path: Optional[Path] = None, overrides: Optional[Dict[str, Any]] = None
) -> DictConfig:
    """
    Load settings, merging defaults with an optional YAML file and overrides.

    Args:
        config_path: Optional YAML file (defaults to LEVELER_SETTINGS_PATH env variable)
        overrides: Nested dict applied last

    Returns:
        Merged DictConfig

    Raises:
        FileNotFoundError: If an explicit config_path does not exist
    """
    layers = [OmegaConf.create(DEFAULT_SETTINGS)]

    if config_path is None and SETTINGS_PATH:
        config_path = Path(SETTINGS_PATH)

    if config_path is not None:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Settings file not found: {config_path}")
        layers.append(OmegaConf.load(config_path))

    if overrides:
        layers.append(OmegaConf.create(overrides))

    return OmegaConf.merge(*layers)
