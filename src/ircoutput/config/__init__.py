"""Configuration: adapter map validation, YAML + env overlay for the standalone host."""

from ircoutput.config.loader import _deep_update, env_overrides, load_config, load_config_with_env
from ircoutput.config.schema import Config, cfg
from ircoutput.config.validator import AdapterConfig, config_set, validate_config

__all__ = [
    "AdapterConfig",
    "Config",
    "_deep_update",
    "cfg",
    "config_set",
    "env_overrides",
    "load_config",
    "load_config_with_env",
    "validate_config",
]
