"""Configuration models and loading."""

from igo.config.loader import find_config_file, load_config
from igo.config.models import IgoConfig, LogConfig, OutputConfig, ReplConfig, ToolchainConfig

__all__ = [
    "IgoConfig",
    "LogConfig",
    "OutputConfig",
    "ReplConfig",
    "ToolchainConfig",
    "find_config_file",
    "load_config",
]
