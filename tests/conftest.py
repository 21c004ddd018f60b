"""Pytest configuration and shared fixtures."""

import tempfile
from pathlib import Path
from typing import Callable, Generator, Iterable, Optional

import pytest

from omo_installer.runtime import Arch, PackageManager, Platform, RuntimeProbe
from omo_installer.runtime.specs import get_manager_preference


@pytest.fixture
def make_which() -> Callable[..., Callable[[str], Optional[str]]]:
    """Build a fake ``shutil.which`` that only knows the given executables.

    Example:
        which = make_which("node", "npm")
        which("npm")   # "/usr/bin/npm"
        which("bun")   # None
    """

    def factory(*executables: str) -> Callable[[str], Optional[str]]:
        known = set(executables)
        return lambda name: f"/usr/bin/{name}" if name in known else None

    return factory


@pytest.fixture
def make_probe() -> Callable[..., RuntimeProbe]:
    """Build a RuntimeProbe with sensible defaults.

    ``managers`` is reordered by the platform preference order, matching
    what ``RuntimeResolver.probe`` produces.
    """

    def factory(
        has_node: bool = True,
        node_major_version: int = 20,
        has_bun: bool = False,
        bun_version: str = "",
        managers: Iterable[PackageManager] = (PackageManager.NPM,),
        platform: Platform = Platform.LINUX,
        arch: Arch = Arch.X64,
    ) -> RuntimeProbe:
        present = set(managers)
        if has_bun:
            present.add(PackageManager.BUN)
        ordered = tuple(m for m in get_manager_preference(platform) if m in present)
        return RuntimeProbe(
            has_node=has_node,
            node_major_version=node_major_version if has_node else 0,
            has_bun=has_bun,
            bun_version=bun_version,
            available_managers=ordered,
            platform=platform,
            arch=arch,
        )

    return factory


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create an empty temporary directory."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)
