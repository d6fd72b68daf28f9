"""Configuration loading and validation for both DHCP protocol families."""

from .document import DocumentAccessor, YamlDocument
from .errors import ConfigError
from .loader import find_config, initialize_config, load_config
from .schema import Config, ListenAddress, LoadEvent, PluginConfig, ServerConfig, parse_config

__all__ = [
    "Config",
    "ConfigError",
    "DocumentAccessor",
    "ListenAddress",
    "LoadEvent",
    "PluginConfig",
    "ServerConfig",
    "YamlDocument",
    "find_config",
    "initialize_config",
    "load_config",
    "parse_config",
]
