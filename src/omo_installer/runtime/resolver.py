"""Runtime and package manager resolution.

Probing is the only part that touches the host. ``decide`` and
``describe_remediation`` are pure functions of their inputs.
"""

import logging
import shutil
import subprocess
from typing import Callable, List, Optional, Union

import semver

from ..utils.platform import detect_arch, detect_platform
from .specs import (
    BUN,
    BUN_WINDOWS_CAUTION,
    MANAGER_EXECUTABLES,
    MIN_NODE_VERSION,
    NODE,
    NODE_GATED_MANAGERS,
    REMEDIATION_HINTS,
    ToolSpec,
    get_manager_preference,
)
from .types import (
    Arch,
    Decision,
    PackageManager,
    Platform,
    ResolutionFailure,
    RuntimeProbe,
)

logger = logging.getLogger(__name__)

DEFAULT_PROBE_TIMEOUT = 2.0


def parse_major_version(text: Optional[str]) -> int:
    """Extract the major version from ``vX.Y.Z``-shaped output.

    Returns 0 for empty, missing or non-numeric input instead of raising.
    """
    if not text:
        return 0
    head = text.strip().lstrip("vV").split(".", 1)[0]
    if head.isascii() and head.isdigit():
        return int(head)
    return 0


def _normalize_semver(text: Optional[str]) -> str:
    """Return ``text`` without a leading ``v`` if it is valid semver, else ''."""
    if not text:
        return ""
    candidate = text.strip().lstrip("vV")
    if semver.Version.is_valid(candidate):
        return candidate
    return ""


class RuntimeResolver:
    """Inspects the host for JavaScript runtimes and package managers.

    Lookups go through ``which`` (``shutil.which`` by default) so tests can
    substitute a fake PATH.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_PROBE_TIMEOUT,
        which: Callable[[str], Optional[str]] = shutil.which,
    ):
        """Initialize resolver.

        Args:
            timeout: Seconds allowed for each ``--version`` query
            which: Executable lookup function
        """
        self.timeout = timeout
        self._which = which

    def probe(
        self,
        platform: Optional[Platform] = None,
        arch: Optional[Arch] = None,
    ) -> RuntimeProbe:
        """Inspect the host. Read-only, never raises.

        Args:
            platform: Platform override (detected when omitted)
            arch: Architecture override (detected when omitted)

        Returns:
            RuntimeProbe describing what was found
        """
        platform = platform or detect_platform()
        arch = arch or detect_arch()

        node_path = self._which(NODE.executable)
        node_output = self._get_version(node_path, NODE) if node_path else None

        bun_path = self._which(BUN.executable)
        bun_output = self._get_version(bun_path, BUN) if bun_path else None

        available = tuple(
            manager
            for manager in get_manager_preference(platform)
            if self._which(MANAGER_EXECUTABLES[manager])
        )

        probe = RuntimeProbe(
            has_node=node_path is not None,
            node_major_version=parse_major_version(node_output),
            has_bun=bun_path is not None,
            bun_version=_normalize_semver(bun_output),
            available_managers=available,
            platform=platform,
            arch=arch,
            node_version=_normalize_semver(node_output),
        )
        logger.debug("Probe result: %r", probe)
        return probe

    def _get_version(self, executable: str, tool: ToolSpec) -> Optional[str]:
        """Get the first line of a tool's version output."""
        try:
            result = subprocess.run(
                [executable] + tool.version_check.args,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            logger.warning(
                "%s --version did not answer within %ss; treating its version as unknown",
                tool.executable,
                self.timeout,
            )
            return None
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug("Version check for %s failed: %s", tool.executable, e)
            return None

        output = (result.stdout or result.stderr or "").strip()
        if not output:
            return None
        return output.splitlines()[0]


def decide(probe: RuntimeProbe, platform: Union[Platform, str, None] = None) -> Decision:
    """Pick a package manager for ``probe`` using the platform's preference order.

    Bun is never version-gated. npm, pnpm and yarn need node at or above
    MIN_NODE_VERSION. When nothing qualifies the decision names the first
    unmet condition: no runtime, then node too old, then no manager.

    Args:
        probe: Result of ``RuntimeResolver.probe``
        platform: Platform whose preference order applies (defaults to the probe's)

    Returns:
        A fully-formed Decision; this function never raises for host state
    """
    platform = Platform(platform) if platform else probe.platform
    node_ok = probe.has_node and probe.node_major_version >= MIN_NODE_VERSION

    for manager in get_manager_preference(platform):
        if manager not in NODE_GATED_MANAGERS:
            if not probe.has_bun:
                continue
            version = f" {probe.bun_version}" if probe.bun_version else ""
            reason = f"bun{version} found"
            if platform is Platform.WINDOWS:
                reason = f"{reason}; caution: {BUN_WINDOWS_CAUTION}"
            return Decision(
                selected_manager=PackageManager.BUN,
                meets_minimum_version=True,
                reason=reason,
            )

        if node_ok and probe.has_manager(manager):
            return Decision(
                selected_manager=manager,
                meets_minimum_version=True,
                reason=(
                    f"node version {probe.node_major_version} meets minimum "
                    f"{MIN_NODE_VERSION}; using {manager.value}"
                ),
            )

    if not probe.has_node and not probe.has_bun:
        return Decision(
            selected_manager=PackageManager.NONE,
            meets_minimum_version=False,
            reason="no JavaScript runtime found (node or bun)",
            failure=ResolutionFailure.NO_RUNTIME,
        )

    if probe.has_node and not node_ok:
        return Decision(
            selected_manager=PackageManager.NONE,
            meets_minimum_version=False,
            reason=(
                f"node version {probe.node_major_version} below minimum "
                f"{MIN_NODE_VERSION}"
            ),
            failure=ResolutionFailure.VERSION_BELOW_MINIMUM,
        )

    return Decision(
        selected_manager=PackageManager.NONE,
        meets_minimum_version=node_ok,
        reason="no package manager found",
        failure=ResolutionFailure.NO_MANAGER,
    )


def describe_remediation(
    decision: Decision,
    platform: Union[Platform, str],
) -> List[str]:
    """Build install instructions for an unresolved decision.

    Args:
        decision: Decision returned by ``decide``
        platform: Platform the hints should target

    Returns:
        Lines of text, empty when the decision is already resolved
    """
    if decision.resolved:
        return []

    platform = Platform(platform)
    lines = [
        f"Node.js v{MIN_NODE_VERSION}+ or Bun is required but not found.",
        f"Reason: {decision.reason}",
        "",
    ]

    if decision.failure is ResolutionFailure.NO_MANAGER:
        lines.append("Node.js is installed but no package manager was found on PATH.")
        lines.append("npm ships with Node.js; reinstalling Node.js usually restores it.")
        lines.append("")

    lines.append("Install options:")
    lines.append("")
    for block in REMEDIATION_HINTS.get(platform, REMEDIATION_HINTS[Platform.UNKNOWN]):
        lines.append(f"  # {block.title}")
        lines.extend(f"  {command}" for command in block.commands)
        lines.append("")

    lines.append("After installing Node.js or Bun, re-run this installer.")
    return lines
