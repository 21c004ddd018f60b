"""Data types for runtime resolution."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from ..utils.platform import Arch, Platform


class PackageManager(str, Enum):
    """JavaScript package managers the installer can drive."""

    BUN = "bun"
    NPM = "npm"
    PNPM = "pnpm"
    YARN = "yarn"
    NONE = "none"


class ResolutionFailure(str, Enum):
    """Why no package manager could be selected.

    Listed in the priority order used to pick the reported cause.
    """

    NO_RUNTIME = "no_runtime"
    VERSION_BELOW_MINIMUM = "version_below_minimum"
    NO_MANAGER = "no_manager"


@dataclass(frozen=True)
class RuntimeProbe:
    """Snapshot of the JavaScript tooling found on the host.

    Attributes:
        has_node: Whether a ``node`` executable is on PATH
        node_major_version: Major version of node (0 if absent or unparseable)
        has_bun: Whether a ``bun`` executable is on PATH
        bun_version: Bun version string, empty if absent or unparseable
        available_managers: Managers found, in the platform preference order
        platform: Host platform the probe ran on
        arch: Host architecture
        node_version: Full node version if it is valid semver, else empty
    """

    has_node: bool
    node_major_version: int
    has_bun: bool
    bun_version: str
    available_managers: Tuple[PackageManager, ...]
    platform: Platform
    arch: Arch
    node_version: str = ""

    def has_manager(self, manager: PackageManager) -> bool:
        return manager in self.available_managers

    def __repr__(self) -> str:
        node = f"node v{self.node_major_version}" if self.has_node else "no node"
        bun = f"bun {self.bun_version or '?'}" if self.has_bun else "no bun"
        managers = ",".join(m.value for m in self.available_managers) or "-"
        return (
            f"<RuntimeProbe {self.platform.value}/{self.arch.value} "
            f"{node}, {bun}, managers={managers}>"
        )


@dataclass(frozen=True)
class Decision:
    """Outcome of resolving a package manager from a probe."""

    selected_manager: PackageManager
    meets_minimum_version: bool
    reason: str
    failure: Optional[ResolutionFailure] = None

    @property
    def resolved(self) -> bool:
        return self.selected_manager is not PackageManager.NONE
