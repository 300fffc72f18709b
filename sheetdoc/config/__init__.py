"""Configuration loading and schemas."""

from .loader import ConfigError, ExportConfig, RangeConfig, load_config

__all__ = [
    "ConfigError",
    "ExportConfig",
    "RangeConfig",
    "load_config",
]
