"""Configuration file parser for the installer."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib  # Fallback for Python 3.10

logger = logging.getLogger(__name__)

# Load environment variables from .env file if present
load_dotenv()

CONFIG_FILE_NAME = ".omo-installer.toml"

DEFAULT_PACKAGE_NAME = "oh-my-opencode"
DEFAULT_CONFIG_DIR = "~/.config/opencode"
DEFAULT_AUTH_PLUGIN = "opencode-antigravity-auth"
DEFAULT_PROBE_TIMEOUT = 2.0


@dataclass
class InstallSettings:
    """What to install and which steps to run."""

    package: str = DEFAULT_PACKAGE_NAME
    auto_install: bool = True
    run_wizard: bool = True
    dry_run: bool = False


@dataclass
class ProbeSettings:
    """Runtime probing configuration."""

    timeout_s: float = DEFAULT_PROBE_TIMEOUT


@dataclass
class OpenCodeSettings:
    """Where OpenCode keeps its configuration."""

    config_dir: str = DEFAULT_CONFIG_DIR
    auth_plugin: str = DEFAULT_AUTH_PLUGIN


@dataclass
class InstallerConfig:
    """Complete installer configuration."""

    install: InstallSettings = field(default_factory=InstallSettings)
    probe: ProbeSettings = field(default_factory=ProbeSettings)
    opencode: OpenCodeSettings = field(default_factory=OpenCodeSettings)

    # Directory the config file was looked up in
    project_root: Path = field(default_factory=Path.cwd)

    @property
    def config_dir(self) -> Path:
        return Path(self.resolve_path(self.opencode.config_dir))

    def resolve_path(self, path_template: str) -> str:
        """Resolve template variables in paths.

        Supports:
            ~ and ${HOME} - the user's home directory
            ${PROJECT_ROOT} - directory the config was loaded from
        """
        result = path_template.replace("${HOME}", str(Path.home()))
        result = result.replace("${PROJECT_ROOT}", str(self.project_root))
        return os.path.expanduser(result)


def find_config_file(project_path: Path) -> Optional[Path]:
    """Find .omo-installer.toml in a directory.

    Args:
        project_path: Directory to look in

    Returns:
        Path to the config file if found, None otherwise
    """
    config_file = project_path / CONFIG_FILE_NAME
    if config_file.exists():
        return config_file
    return None


def _section(data: Dict[str, Any], name: str) -> Optional[Dict[str, Any]]:
    if name not in data:
        return None
    section = data[name]
    if not isinstance(section, dict):
        logger.warning("Ignoring [%s] in %s: expected a table", name, CONFIG_FILE_NAME)
        return None
    return section


def _apply_file(config: InstallerConfig, data: Dict[str, Any]) -> None:
    install_data = _section(data, "install")
    if install_data is not None:
        config.install.package = install_data.get("package", DEFAULT_PACKAGE_NAME)
        config.install.auto_install = install_data.get("auto_install", True)
        config.install.run_wizard = install_data.get("run_wizard", True)
        config.install.dry_run = install_data.get("dry_run", False)

    probe_data = _section(data, "probe")
    if probe_data is not None:
        timeout = probe_data.get("timeout_s", DEFAULT_PROBE_TIMEOUT)
        try:
            config.probe.timeout_s = float(timeout)
        except (TypeError, ValueError):
            logger.warning("Ignoring non-numeric [probe] timeout_s=%r", timeout)

    opencode_data = _section(data, "opencode")
    if opencode_data is not None:
        config.opencode.config_dir = opencode_data.get("config_dir", DEFAULT_CONFIG_DIR)
        config.opencode.auth_plugin = opencode_data.get("auth_plugin", DEFAULT_AUTH_PLUGIN)


def _apply_environment(config: InstallerConfig, environ: Dict[str, str]) -> None:
    package = environ.get("OMO_PACKAGE_NAME")
    if package:
        config.install.package = package

    config_dir = environ.get("OPENCODE_CONFIG_DIR")
    if config_dir:
        config.opencode.config_dir = config_dir

    timeout = environ.get("OMO_PROBE_TIMEOUT")
    if timeout:
        try:
            config.probe.timeout_s = float(timeout)
        except ValueError:
            logger.warning("Ignoring non-numeric OMO_PROBE_TIMEOUT=%r", timeout)


def load_config(
    project_path: Optional[Path] = None,
    environ: Optional[Dict[str, str]] = None,
) -> InstallerConfig:
    """Load configuration from .omo-installer.toml and the environment.

    Precedence (highest first): environment variables, config file, defaults.

    Args:
        project_path: Directory holding the config file (defaults to cwd)
        environ: Environment mapping (defaults to os.environ)

    Returns:
        InstallerConfig with loaded or default configuration
    """
    project_path = Path(project_path) if project_path is not None else Path.cwd()
    environ = dict(os.environ) if environ is None else environ

    config = InstallerConfig(project_root=project_path)

    config_file = find_config_file(project_path)
    if config_file:
        try:
            with open(config_file, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError):
            # If TOML parsing fails, keep defaults
            data = {}
        _apply_file(config, data)

    _apply_environment(config, environ)
    return config
