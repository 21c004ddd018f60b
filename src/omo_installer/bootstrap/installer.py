"""oh-my-opencode installation and verification.

Installs the CLI with the package manager chosen by the runtime resolver,
runs its interactive setup wizard and checks the resulting OpenCode config.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from .. import console
from ..config import InstallerConfig
from ..runtime.types import PackageManager
from ..utils.process import (
    EXIT_NOT_FOUND,
    Runner,
    is_command_available,
    run_command,
    working_directory,
)
from .strategies import InstallStrategy, StrategyOutcome, run_strategies

logger = logging.getLogger(__name__)

OPENCODE_CONFIG_FILE = "opencode.json"

# Download tools; at least one must be present
DOWNLOAD_TOOLS = ["curl", "wget"]


class InstallStatus(Enum):
    """Status of an install or setup step."""

    INSTALLED = "installed"
    ALREADY_INSTALLED = "already_installed"
    SKIPPED = "skipped"
    FAILED = "failed"


class AuthPluginStatus(Enum):
    """Whether the OpenCode config references the auth plugin."""

    CONFIGURED = "configured"
    MISSING = "missing"
    NO_CONFIG = "no_config"


# Global install commands, in fallback order. {package} is substituted.
INSTALL_COMMANDS: Dict[PackageManager, List[List[str]]] = {
    PackageManager.BUN: [
        ["bun", "install", "-g", "{package}"],
        ["bunx", "{package}", "install"],
    ],
    PackageManager.NPM: [
        ["npm", "install", "-g", "{package}"],
        ["npx", "{package}", "install"],
    ],
    PackageManager.PNPM: [
        ["pnpm", "add", "-g", "{package}"],
    ],
    PackageManager.YARN: [
        ["yarn", "global", "add", "{package}"],
    ],
}

# Commands that launch the setup wizard without a global install
WIZARD_COMMANDS: Dict[PackageManager, List[str]] = {
    PackageManager.BUN: ["bunx", "{package}", "install"],
    PackageManager.NPM: ["npx", "{package}", "install"],
    PackageManager.PNPM: ["pnpm", "dlx", "{package}", "install"],
    PackageManager.YARN: ["yarn", "dlx", "{package}", "install"],
}


def _render(template: List[str], package: str) -> Tuple[str, ...]:
    return tuple(part.replace("{package}", package) for part in template)


def install_strategies(manager: PackageManager, package: str) -> List[InstallStrategy]:
    """Build the install fallback chain for a package manager.

    Raises:
        ValueError: If ``manager`` has no install commands (e.g. NONE)
    """
    if manager not in INSTALL_COMMANDS:
        raise ValueError(f"Unknown package manager: {manager.value}")

    return [
        InstallStrategy(name=f"{manager.value}:{index}", command=_render(template, package))
        for index, template in enumerate(INSTALL_COMMANDS[manager])
    ]


def setup_wizard_strategies(manager: PackageManager, package: str) -> List[InstallStrategy]:
    """Build the setup wizard chain: manager runner first, then the global binary."""
    strategies = []
    if manager in WIZARD_COMMANDS:
        strategies.append(
            InstallStrategy(
                name=f"{manager.value}:wizard",
                command=_render(WIZARD_COMMANDS[manager], package),
            )
        )
    strategies.append(InstallStrategy(name="global:wizard", command=(package, "install")))
    return strategies


def check_prerequisites(
    available: Optional[Callable[[str], bool]] = None,
) -> Dict[str, bool]:
    """Check which download tools are available.

    Returns:
        Dict mapping tool name to availability
    """
    available = available or is_command_available
    return {tool: available(tool) for tool in DOWNLOAD_TOOLS}


def prerequisites_met(prerequisites: Dict[str, bool]) -> bool:
    return any(prerequisites.values())


def install_package(
    manager: PackageManager,
    config: InstallerConfig,
    runner: Runner = run_command,
    available: Optional[Callable[[str], bool]] = None,
) -> InstallStatus:
    """Install the CLI globally unless it is already on PATH.

    Commands run from the home directory so local-scope fallbacks never
    touch the caller's project.

    Args:
        manager: Package manager selected by the resolver
        config: Installer configuration
        runner: Command runner
        available: Executable presence check

    Returns:
        InstallStatus for the step
    """
    package = config.install.package
    available = available or is_command_available

    if available(package):
        console.success(f"{package} is already installed")
        return InstallStatus.ALREADY_INSTALLED

    if not config.install.auto_install:
        console.warn(f"Skipping install of {package} (auto_install is disabled)")
        return InstallStatus.SKIPPED

    strategies = install_strategies(manager, package)
    console.info(f"Installing {package} using {manager.value}...")

    with working_directory(Path.home()):
        outcome = run_strategies(strategies, runner, dry_run=config.install.dry_run)

    _report(outcome, package, "install")
    return InstallStatus.INSTALLED if outcome.ok else InstallStatus.FAILED


def run_setup_wizard(
    manager: PackageManager,
    config: InstallerConfig,
    runner: Runner = run_command,
) -> InstallStatus:
    """Run the interactive oh-my-opencode setup wizard.

    The global binary is only tried when the manager's runner is missing;
    a wizard that ran and exited non-zero is not repeated.
    """
    package = config.install.package

    if not config.install.run_wizard:
        console.warn("Skipping setup wizard (run_wizard is disabled)")
        return InstallStatus.SKIPPED

    console.info(f"Running {package} setup wizard...")
    outcome = run_strategies(
        setup_wizard_strategies(manager, package),
        runner,
        dry_run=config.install.dry_run,
        fallthrough_codes={EXIT_NOT_FOUND},
    )

    _report(outcome, package, "setup wizard")
    return InstallStatus.INSTALLED if outcome.ok else InstallStatus.FAILED


def _report(outcome: StrategyOutcome, package: str, step: str) -> None:
    if outcome.dry_run:
        console.info(f"[dry-run] would run: {outcome.succeeded}")
        return

    for strategy, result in outcome.attempts:
        if not result.ok:
            console.warn(f"`{strategy}` failed (exit code {result.returncode})")

    if outcome.ok:
        console.success(f"{package} {step} finished via `{outcome.succeeded}`")
    else:
        console.error(f"{package} {step} failed")


def check_auth_plugin(config_dir: Path, plugin: str) -> AuthPluginStatus:
    """Check whether OpenCode's config mentions the auth plugin.

    Read-only: the file is scanned, never modified.

    Args:
        config_dir: OpenCode configuration directory
        plugin: Plugin package name to look for

    Returns:
        AuthPluginStatus describing what was found
    """
    config_file = Path(config_dir) / OPENCODE_CONFIG_FILE
    if not config_file.is_file():
        return AuthPluginStatus.NO_CONFIG

    try:
        content = config_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read %s: %s", config_file, e)
        return AuthPluginStatus.MISSING

    if plugin in content:
        return AuthPluginStatus.CONFIGURED
    return AuthPluginStatus.MISSING


def report_auth_plugin(config: InstallerConfig) -> AuthPluginStatus:
    """Check the auth plugin and print guidance for the result."""
    console.info("Checking auth plugins configuration...")
    plugin = config.opencode.auth_plugin
    status = check_auth_plugin(config.config_dir, plugin)

    if status is AuthPluginStatus.CONFIGURED:
        console.success(f"{plugin} is already configured")
    elif status is AuthPluginStatus.MISSING:
        console.warn(f"{plugin} not found in {OPENCODE_CONFIG_FILE}")
        console.info("You may need to add it manually or run 'opencode auth login'")
    else:
        console.warn(f"OpenCode config not found at {config.config_dir / OPENCODE_CONFIG_FILE}")
        console.info("The setup wizard will create it for you")

    return status
