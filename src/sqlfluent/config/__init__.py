"""Configuration module exports."""

from .config import (
    load_server,
    list_servers,
    register_server,
    unregister_server,
    is_server_registered,
)
from .paths import resolve_config_path, get_default_config_path, CONF_DIR

__all__ = [
    "load_server",
    "list_servers",
    "register_server",
    "unregister_server",
    "is_server_registered",
    "resolve_config_path",
    "get_default_config_path",
    "CONF_DIR",
]
