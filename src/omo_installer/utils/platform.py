"""Host platform and architecture detection."""

from __future__ import annotations

import platform as _platform
from enum import Enum
from typing import Optional


class Platform(str, Enum):
    """Host operating system family."""

    LINUX = "linux"
    MACOS = "macos"
    WINDOWS = "windows"
    UNKNOWN = "unknown"


class Arch(str, Enum):
    """Host CPU architecture."""

    X64 = "x64"
    ARM64 = "arm64"
    OTHER = "other"


_WINDOWS_PREFIXES = ("windows", "mingw", "msys", "cygwin")


def detect_platform(system: Optional[str] = None) -> Platform:
    """Map ``platform.system()`` output onto a Platform.

    Args:
        system: System name to classify (defaults to the running host)

    Examples:
        >>> detect_platform("Darwin")
        <Platform.MACOS: 'macos'>
        >>> detect_platform("MINGW64_NT-10.0")
        <Platform.WINDOWS: 'windows'>
    """
    name = (system if system is not None else _platform.system()).lower()

    if name == "darwin":
        return Platform.MACOS
    if name == "linux":
        return Platform.LINUX
    if name.startswith(_WINDOWS_PREFIXES):
        return Platform.WINDOWS
    return Platform.UNKNOWN


def detect_arch(machine: Optional[str] = None) -> Arch:
    """Map ``platform.machine()`` output onto an Arch."""
    name = (machine if machine is not None else _platform.machine()).lower()

    if name in ("x86_64", "amd64"):
        return Arch.X64
    if name in ("arm64", "aarch64"):
        return Arch.ARM64
    return Arch.OTHER
