"""Runtime resolver for the JavaScript tooling the installer depends on."""

from .resolver import RuntimeResolver, decide, describe_remediation, parse_major_version
from .specs import MANAGER_PREFERENCE, MIN_NODE_VERSION
from .types import (
    Arch,
    Decision,
    PackageManager,
    Platform,
    ResolutionFailure,
    RuntimeProbe,
)

__all__ = [
    "RuntimeResolver",
    "decide",
    "describe_remediation",
    "parse_major_version",
    "MANAGER_PREFERENCE",
    "MIN_NODE_VERSION",
    "Arch",
    "Decision",
    "PackageManager",
    "Platform",
    "ResolutionFailure",
    "RuntimeProbe",
]
