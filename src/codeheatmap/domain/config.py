from __future__ import annotations

"""
Configuration Domain Management.

Handles persistent storage of application settings and the last viewing
session (dataset, metric, drill path) as JSON in the user data directory.
Missing keys are filled from defaults and corrupt files fall back to them.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from codeheatmap.domain.metrics import DirectoryColorBasis, MetricKind
from codeheatmap.infra.fs import get_user_data_dir

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Constants & Defaults
# -----------------------------------------------------------------------------
CONFIG_FILE_NAME = "config.json"
CURRENT_CONFIG_VERSION = "1.0.0"


def get_config_path() -> str:
    """Absolute path of the persisted configuration file."""
    return os.path.join(get_user_data_dir(), CONFIG_FILE_NAME)


# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default session configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # Dataset source (file wins over URL when both are set)
        "dataset_path": "",
        "dataset_url": "",
        "request_timeout": 10,
        # Repository picked from a store listing (first when empty)
        "repository": "",

        # View
        "metric": MetricKind.CHANGES.value,
        "color_basis": DirectoryColorBasis.CHILD_MEAN.value,
        "path": "",

        # Output
        "show_tree": False,
        "json_output": False,
    }


def get_default_app_state() -> Dict[str, Any]:
    """
    Generate the complete default application state structure.

    Returns:
        Dict[str, Any]: The full JSON structure for config.json.
    """
    return {
        "version": CURRENT_CONFIG_VERSION,
        "app_settings": {
            "log_level": "WARNING",
            "log_to_file": False,
        },
        "last_session": get_default_config(),
    }


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_app_state(config_file: Optional[str] = None) -> Dict[str, Any]:
    """
    Load application state from disk.

    Args:
        config_file: Override for the config location (tests, portable runs).

    Returns:
        Dict[str, Any]: The loaded state or a default structure on failure.
    """
    path = config_file or get_config_path()
    state = get_default_app_state()

    if not os.path.exists(path):
        logger.debug("Config file not found. Returning defaults.")
        return state

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config: {e}. Using defaults.")
        return state

    if not isinstance(data, dict):
        logger.warning("Corrupted config file. Resetting to defaults.")
        return state

    for section in ("app_settings", "last_session"):
        if isinstance(data.get(section), dict):
            state[section].update(data[section])

    state["version"] = CURRENT_CONFIG_VERSION
    return state


def save_app_state(state: Dict[str, Any], config_file: Optional[str] = None) -> None:
    """
    Persist application state to disk.

    Args:
        state: The state dictionary to save.
        config_file: Override for the config location.
    """
    path = config_file or get_config_path()
    try:
        os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
        state["version"] = CURRENT_CONFIG_VERSION
        with open(path, "w", encoding="utf-8") as f:
            json.dump(state, f, ensure_ascii=False, indent=4)
        logger.debug(f"Configuration saved to {path}")
    except OSError as e:
        logger.error(f"Failed to save configuration: {e}")


# -----------------------------------------------------------------------------
# Facade API
# -----------------------------------------------------------------------------
def load_config(config_file: Optional[str] = None) -> Dict[str, Any]:
    """Retrieve the last session merged over the defaults."""
    state = load_app_state(config_file)
    defaults = get_default_config()
    defaults.update(state.get("last_session", {}))
    return defaults


def save_config(config: Dict[str, Any], config_file: Optional[str] = None) -> None:
    """Save ``config`` as the last session."""
    state = load_app_state(config_file)
    state["last_session"] = config
    save_app_state(state, config_file)
