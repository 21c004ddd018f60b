"""Configuration management for the installer."""

from .parser import (
    InstallerConfig,
    load_config,
    find_config_file,
)

__all__ = [
    "InstallerConfig",
    "load_config",
    "find_config_file",
]
