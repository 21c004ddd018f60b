"""Declarative runtime specifications.

This is DATA, not code. Preference orders, probed executables and install
hints all live here so the resolver stays a small set of rules.
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Tuple

from .types import PackageManager, Platform

# Oldest Node.js major release the downstream CLI supports
MIN_NODE_VERSION = 18


@dataclass(frozen=True)
class VersionCheck:
    """Configuration for checking a tool's version."""
    args: List[str]


@dataclass(frozen=True)
class ToolSpec:
    """An executable looked up during probing."""
    executable: str
    version_check: VersionCheck = field(default_factory=lambda: VersionCheck(args=[]))


NODE = ToolSpec(executable="node", version_check=VersionCheck(args=["--version"]))
BUN = ToolSpec(executable="bun", version_check=VersionCheck(args=["--version"]))

# Package managers map 1:1 onto executables of the same name
MANAGER_EXECUTABLES: Dict[PackageManager, str] = {
    PackageManager.BUN: "bun",
    PackageManager.NPM: "npm",
    PackageManager.PNPM: "pnpm",
    PackageManager.YARN: "yarn",
}

# Managers that run on top of node and therefore need MIN_NODE_VERSION
NODE_GATED_MANAGERS: FrozenSet[PackageManager] = frozenset(
    {PackageManager.NPM, PackageManager.PNPM, PackageManager.YARN}
)

_POSIX_PREFERENCE: Tuple[PackageManager, ...] = (
    PackageManager.BUN,
    PackageManager.NPM,
    PackageManager.PNPM,
    PackageManager.YARN,
)

# Bun is last on Windows: its global installs are unreliable there
MANAGER_PREFERENCE: Dict[Platform, Tuple[PackageManager, ...]] = {
    Platform.LINUX: _POSIX_PREFERENCE,
    Platform.MACOS: _POSIX_PREFERENCE,
    Platform.UNKNOWN: _POSIX_PREFERENCE,
    Platform.WINDOWS: (
        PackageManager.NPM,
        PackageManager.PNPM,
        PackageManager.YARN,
        PackageManager.BUN,
    ),
}

BUN_WINDOWS_CAUTION = (
    "bun support on Windows is experimental; "
    "install Node.js LTS and re-run if the install misbehaves"
)


@dataclass(frozen=True)
class HintBlock:
    """A titled group of shell commands shown when no runtime is usable."""
    title: str
    commands: List[str]


BUN_INSTALL_POSIX = "curl -fsSL https://bun.sh/install | bash"
BUN_INSTALL_WINDOWS = 'powershell -c "irm bun.sh/install.ps1 | iex"'

_LINUX_HINTS = [
    HintBlock(
        title="Using nvm (recommended):",
        commands=[
            "curl -o- https://raw.githubusercontent.com/nvm-sh/nvm/v0.40.1/install.sh | bash",
            "source ~/.bashrc  # or ~/.zshrc",
            "nvm install --lts",
        ],
    ),
    HintBlock(title="Or install Bun:", commands=[BUN_INSTALL_POSIX]),
    HintBlock(
        title="Or using your package manager:",
        commands=[
            "# Debian/Ubuntu: sudo apt install nodejs npm",
            "# Fedora: sudo dnf install nodejs npm",
            "# Arch: sudo pacman -S nodejs npm",
        ],
    ),
]

REMEDIATION_HINTS: Dict[Platform, List[HintBlock]] = {
    Platform.MACOS: [
        HintBlock(title="Using Homebrew (recommended for macOS):", commands=["brew install node"]),
        HintBlock(title="Or install Bun:", commands=[BUN_INSTALL_POSIX]),
    ],
    Platform.LINUX: _LINUX_HINTS,
    Platform.UNKNOWN: _LINUX_HINTS,
    Platform.WINDOWS: [
        HintBlock(
            title="Using winget (recommended):",
            commands=["winget install OpenJS.NodeJS.LTS"],
        ),
        HintBlock(
            title="Or using Chocolatey / Scoop:",
            commands=["choco install nodejs-lts", "scoop install nodejs-lts"],
        ),
        HintBlock(title="Or install Bun (experimental on Windows):", commands=[BUN_INSTALL_WINDOWS]),
    ],
}


def get_manager_preference(platform: Platform) -> Tuple[PackageManager, ...]:
    """Get the package manager preference order for a platform.

    Args:
        platform: Host platform

    Returns:
        Managers ordered from most to least preferred
    """
    return MANAGER_PREFERENCE.get(platform, _POSIX_PREFERENCE)
