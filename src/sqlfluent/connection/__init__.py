"""Connection module exports."""

from .connection import SnowflakeConnector
from .base import BaseConnector

__all__ = [
    "SnowflakeConnector",
    "BaseConnector",
]
