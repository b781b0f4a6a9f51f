"""Configuration management.

This module handles configuration loading and validation.
"""

from __future__ import annotations

from ccannounce.config.config import (
    ConfigManager,
    get_announce_config,
    get_config,
    get_network_config,
    get_observability_config,
    init_config,
    reload_config,
    reset_config,
    set_config,
)
from ccannounce.models import Config

__all__ = [
    "Config",
    "ConfigManager",
    "get_announce_config",
    "get_config",
    "get_network_config",
    "get_observability_config",
    "init_config",
    "reload_config",
    "reset_config",
    "set_config",
]
