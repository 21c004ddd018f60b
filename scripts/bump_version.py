#!/usr/bin/env python3

import argparse
import re
import sys
from pathlib import Path

import semver

PYPROJECT = Path("pyproject.toml")
PACKAGE_INIT = Path("src/omo_installer/__init__.py")


def get_version_from_pyproject(pyproject_path: Path) -> str:
    content = pyproject_path.read_text()
    match = re.search(r'\[project\].*?version\s*=\s*"([^"]+)"', content, re.DOTALL)
    if not match:
        raise ValueError(f"Could not find version in {pyproject_path}")
    return match.group(1)


def update_version_in_pyproject(pyproject_path: Path, new_version: str) -> None:
    content = pyproject_path.read_text()
    new_content = re.sub(
        r'(\[project\].*?)version\s*=\s*"[^"]+"', f'\\1version = "{new_version}"', content, flags=re.DOTALL
    )
    pyproject_path.write_text(new_content)


def update_version_in_package(init_path: Path, new_version: str) -> None:
    content = init_path.read_text()
    new_content = re.sub(r'__version__\s*=\s*"[^"]+"', f'__version__ = "{new_version}"', content)
    init_path.write_text(new_content)


def main() -> None:
    parser = argparse.ArgumentParser(description="Bump the omo-installer version")
    parser.add_argument(
        "bump_type", choices=["patch", "minor", "major", "prerelease"], help="Type of version bump to perform"
    )
    args = parser.parse_args()

    if not PYPROJECT.exists() or not PACKAGE_INIT.exists():
        print("Error: run this from the repository root")
        sys.exit(1)

    current_version = get_version_from_pyproject(PYPROJECT)
    new_version = semver.Version.parse(current_version).next_version(args.bump_type)
    print(f"Bumping version from {current_version} to {new_version}")

    # pyproject.toml and __version__ must stay in sync
    update_version_in_pyproject(PYPROJECT, str(new_version))
    update_version_in_package(PACKAGE_INIT, str(new_version))
    print(f"Updated pyproject.toml and {PACKAGE_INIT} to {new_version}")


if __name__ == "__main__":
    main()
