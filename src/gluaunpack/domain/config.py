from __future__ import annotations

"""
Configuration Domain Management.

Dict-based runtime configuration for an unpack run. Defaults can be
overridden by an optional JSON file in the user data directory, which in turn
is overridden by command-line flags.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from gluaunpack.infra.fs import get_user_data_dir

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.json"


def get_config_path() -> str:
    """Absolute path of the persistent configuration file."""
    return os.path.join(get_user_data_dir(), CONFIG_FILE_NAME)


def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # IO Paths
        "addon_path": os.getcwd(),
        "output_path": None,

        # Mode
        "no_copy": False,

        # Diagnostics
        "quiet": False,
        "log_file": None,
    }


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from disk merged over the defaults.

    A missing file yields the defaults. A corrupted or non-object file is
    reported and ignored; unknown keys are dropped.

    Args:
        path: Override location of the configuration file.

    Returns:
        Dict[str, Any]: The merged configuration.
    """
    config = get_default_config()
    config_path = path or get_config_path()

    if not os.path.exists(config_path):
        logger.debug("Config file not found. Using defaults.")
        return config

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config '{config_path}': {e}. Using defaults.")
        return config

    if not isinstance(data, dict):
        logger.warning("Corrupted config file. Using defaults.")
        return config

    for key, value in data.items():
        if key in config:
            config[key] = value
        else:
            logger.debug(f"Ignoring unknown config key '{key}'.")
    return config
