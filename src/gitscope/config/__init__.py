"""Configuration for gitscope."""

from gitscope.config.config_loader import ConfigError, ConfigLoader, ConfigParsingError
from gitscope.config.config_schema import AppConfigSchema

__all__ = ["AppConfigSchema", "ConfigError", "ConfigLoader", "ConfigParsingError"]
