"""Application configuration helpers."""

from __future__ import annotations

from subhub.common.logging import configure_logging

from .env import env_flag, env_float, optional_env_var, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .hub import HubConfig, get_hub_config
from .objectstore import ObjectStoreConfig, get_objectstore_config

__all__ = [
    "ConfigurationError",
    "HubConfig",
    "MissingConfigurationError",
    "ObjectStoreConfig",
    "configure_logging",
    "env_flag",
    "env_float",
    "get_hub_config",
    "get_objectstore_config",
    "optional_env_var",
    "require_env_var",
    "require_env_vars",
]
