"""Path resolution for sqlfluent configuration files."""

import os
from pathlib import Path
from typing import Optional, Union


def _get_config_directory() -> Path:
    """
    Get the configuration directory for sqlfluent.

    Priority order:
    1. SQLFLUENT_CONFIG_DIR environment variable (override)
    2. ~/.sqlfluent/ (dotfile directory in user home)

    Returns:
        Path: Configuration directory path
    """
    env_config_dir = os.getenv("SQLFLUENT_CONFIG_DIR")
    if env_config_dir:
        return Path(env_config_dir)

    return Path.home() / ".sqlfluent"


# Configuration directory (dynamically resolved)
CONF_DIR = _get_config_directory()


def get_default_config_path() -> Path:
    """
    Get the path to the servers.toml configuration file.

    Returns:
        Path: The path to servers.toml

    Raises:
        FileNotFoundError: If servers.toml doesn't exist in the config directory
    """
    config_path = _get_config_directory() / "servers.toml"

    if not config_path.exists():
        error_msg = (
            f"Configuration file 'servers.toml' not found at: {config_path}\n\n"
            f"Create it with one [table] per server, for example:\n"
            f"  [master]\n"
            f"  account = \"myaccount\"\n"
            f"  user = \"me\"\n\n"
            f"Configuration directory priority:\n"
            f"  1. SQLFLUENT_CONFIG_DIR environment variable (if set)\n"
            f"  2. ~/.sqlfluent/ (dotfile directory)\n"
        )
        raise FileNotFoundError(error_msg)

    return config_path


def resolve_config_path(path: Optional[Union[str, Path]] = None) -> Path:
    """
    Resolve the configuration file path.

    Args:
        path: Optional explicit path to servers.toml.
              If None, uses default resolution logic.

    Returns:
        Path: Resolved path object
    """
    if path:
        return Path(path)
    return get_default_config_path()
