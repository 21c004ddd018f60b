"""Utility modules (platform detection, process helpers)."""

from .platform import Arch, Platform, detect_arch, detect_platform
from .process import (
    CommandResult,
    is_command_available,
    run_command,
    working_directory,
)

__all__ = [
    "Arch",
    "Platform",
    "detect_arch",
    "detect_platform",
    "CommandResult",
    "is_command_available",
    "run_command",
    "working_directory",
]
