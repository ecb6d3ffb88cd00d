"""Configuration loading for database server profiles.

Servers come from two places: the ``servers.toml`` file in the config
directory, and an in-process registry filled at runtime through
``register_server`` (used by ``Database.configure``). The registry wins
when both define the same name.
"""

import sys
import threading
from pathlib import Path
from typing import Dict, Union, Optional, Any

# Use tomllib for Python 3.11+, fallback to tomli for older versions
if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        raise ImportError(
            "Python < 3.11 requires 'tomli' package. " +
            "Install it with: pip install tomli"
        )

from .paths import resolve_config_path

_registry: Dict[str, Dict[str, Any]] = {}
_registry_lock = threading.Lock()


def register_server(server: str, config: Dict[str, Any]) -> bool:
    """Register a server profile at runtime.

    Returns False without touching the registry if the name is taken.
    """
    with _registry_lock:
        if server in _registry:
            return False
        _registry[server] = dict(config)
        return True


def unregister_server(server: str) -> None:
    """Remove a runtime server profile if present"""
    with _registry_lock:
        _registry.pop(server, None)


def is_server_registered(server: str) -> bool:
    """Check whether a server was registered at runtime"""
    with _registry_lock:
        return server in _registry


def load_server(
    server: str,
    path: Optional[Union[str, Path]] = None
) -> Dict[str, Any]:
    """
    Load a server profile.

    Args:
        server: Name of the server to load
        path: Optional explicit path to servers.toml file.
              If None, searches in standard locations.

    Returns:
        A copy of the connection parameters for the server

    Raises:
        FileNotFoundError: If the server is not registered and servers.toml is missing
        KeyError: If the server doesn't exist in the file

    Example:
        >>> config = load_server("master")
        >>> config
        {'account': 'myaccount', 'user': 'me', ...}
    """
    with _registry_lock:
        if server in _registry:
            return dict(_registry[server])

    config_file = resolve_config_path(path)

    if not config_file.exists():
        raise FileNotFoundError(
            f"Server configuration file not found at {config_file}. " +
            "Create a servers.toml file or register the server with Database.configure()."
        )

    with open(config_file, "rb") as f:
        all_servers = tomllib.load(f)

    if server not in all_servers:
        available = ", ".join(all_servers.keys())
        raise KeyError(
            f"Server '{server}' not found in {config_file}. " +
            f"Available servers: {available}"
        )

    return dict(all_servers[server])


def list_servers(path: Optional[Union[str, Path]] = None) -> list[str]:
    """
    List all known server names, runtime registrations first.

    Args:
        path: Optional explicit path to servers.toml file

    Example:
        >>> list_servers()
        ['master', 'replica']
    """
    with _registry_lock:
        names = list(_registry.keys())

    try:
        config_file = resolve_config_path(path)
    except FileNotFoundError:
        return names

    if not config_file.exists():
        return names

    with open(config_file, "rb") as f:
        all_servers = tomllib.load(f)

    return names + [name for name in all_servers.keys() if name not in names]
