"""Bootstrap steps that install and set up oh-my-opencode."""

from .installer import (
    AuthPluginStatus,
    InstallStatus,
    check_auth_plugin,
    check_prerequisites,
    install_package,
    install_strategies,
    prerequisites_met,
    report_auth_plugin,
    run_setup_wizard,
    setup_wizard_strategies,
)
from .strategies import InstallStrategy, StrategyOutcome, run_strategies

__all__ = [
    # Installer steps
    "AuthPluginStatus",
    "InstallStatus",
    "check_auth_plugin",
    "check_prerequisites",
    "install_package",
    "install_strategies",
    "prerequisites_met",
    "report_auth_plugin",
    "run_setup_wizard",
    "setup_wizard_strategies",
    # Strategy runner
    "InstallStrategy",
    "StrategyOutcome",
    "run_strategies",
]
