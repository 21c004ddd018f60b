"""Command-line entry point for the oh-my-opencode installer.

Flow: prerequisites -> probe -> decide -> install -> setup wizard ->
auth plugin check -> next steps. An unresolved runtime decision prints
install hints and exits with status 1.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__, console
from .bootstrap import (
    InstallStatus,
    check_prerequisites,
    install_package,
    prerequisites_met,
    report_auth_plugin,
    run_setup_wizard,
)
from .config import InstallerConfig, load_config
from .runtime import (
    Decision,
    RuntimeResolver,
    decide,
    describe_remediation,
)
from .utils.platform import detect_arch, detect_platform
from .utils.process import Runner, run_command

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130

PROJECT_URL = "https://github.com/code-yeongyu/oh-my-opencode"


class InstallerError(Exception):
    """Raised when an installer step cannot continue."""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="omo-installer",
        description="Install oh-my-opencode and set up OpenCode.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show which commands would run without running them",
    )
    parser.add_argument(
        "--skip-install",
        action="store_true",
        help="Do not install the CLI, only run the setup wizard",
    )
    parser.add_argument(
        "--skip-wizard",
        action="store_true",
        help="Do not run the interactive setup wizard",
    )
    parser.add_argument(
        "--config-dir",
        type=Path,
        help="OpenCode configuration directory (default: ~/.config/opencode)",
    )
    parser.add_argument("--package", help="npm package to install (default: oh-my-opencode)")
    parser.add_argument(
        "--probe-timeout",
        type=float,
        help="Seconds allowed for each runtime version check",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def apply_arguments(config: InstallerConfig, args: argparse.Namespace) -> InstallerConfig:
    """Overlay command-line flags on a loaded configuration."""
    if args.dry_run:
        config.install.dry_run = True
    if args.skip_install:
        config.install.auto_install = False
    if args.skip_wizard:
        config.install.run_wizard = False
    if args.config_dir is not None:
        config.opencode.config_dir = str(args.config_dir)
    if args.package:
        config.install.package = args.package
    if args.probe_timeout is not None:
        config.probe.timeout_s = args.probe_timeout
    return config


def ensure_prerequisites() -> None:
    console.info("Checking prerequisites...")
    prerequisites = check_prerequisites()
    if not prerequisites_met(prerequisites):
        raise InstallerError("curl or wget is required. Please install one of them.")
    console.success("Prerequisites check passed")


def resolve_runtime(config: InstallerConfig, resolver: Optional[RuntimeResolver] = None) -> Decision:
    """Probe the host and pick a package manager.

    Raises:
        InstallerError: If no usable runtime/manager combination exists
    """
    platform = detect_platform()
    console.info(f"Platform: {platform.value} ({detect_arch().value})")
    console.info("Checking Node.js runtime...")

    resolver = resolver or RuntimeResolver(timeout=config.probe.timeout_s)
    probe = resolver.probe(platform=platform)
    decision = decide(probe, platform)
    logger.debug("Decision: %s", decision)

    if not decision.resolved:
        console.lines([""] + describe_remediation(decision, platform), indent="  ")
        raise InstallerError(decision.reason)

    console.success(f"Using {decision.selected_manager.value} ({decision.reason})")
    return decision


def print_success_message(config: InstallerConfig) -> None:
    console.lines(
        [
            "",
            "=============================================",
            "   Oh-My-OpenCode installed successfully!",
            "=============================================",
            "",
            "Next steps:",
            "",
            "  1. Authenticate with Antigravity:",
            "     opencode auth login",
            "",
            "  2. Start OpenCode:",
            "     opencode",
            "",
            "  3. Check quota status:",
            "     /antigravity-quota",
            "",
            "Documentation:",
            f"  - Setup guide: {config.config_dir / 'setup-opencode.md'}",
            f"  - GitHub: {PROJECT_URL}",
            "",
        ]
    )


def run_install(
    config: InstallerConfig,
    resolver: Optional[RuntimeResolver] = None,
    runner: Runner = run_command,
) -> int:
    """Run every installer step in order.

    Returns:
        Process exit status
    """
    console.banner("Oh-My-OpenCode Universal Installer")

    ensure_prerequisites()
    decision = resolve_runtime(config, resolver)
    manager = decision.selected_manager

    if install_package(manager, config, runner) is InstallStatus.FAILED:
        raise InstallerError(f"Could not install {config.install.package} with {manager.value}")

    if run_setup_wizard(manager, config, runner) is InstallStatus.FAILED:
        raise InstallerError("Could not run setup wizard")

    report_auth_plugin(config)
    print_success_message(config)
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Run the installer."""
    args = build_parser().parse_args(argv)
    console.configure_logging(args.verbose)
    config = apply_arguments(load_config(), args)

    try:
        return run_install(config)
    except InstallerError as e:
        console.error(str(e))
        return EXIT_FAILURE
    except KeyboardInterrupt:
        console.error("Installation interrupted")
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
