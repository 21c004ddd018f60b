"""Subprocess and working-directory helpers."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Sequence, Union

logger = logging.getLogger(__name__)

# Shell conventions for "command not found" and "timed out"
EXIT_NOT_FOUND = 127
EXIT_TIMEOUT = 124


@dataclass(frozen=True)
class CommandResult:
    """Outcome of running an external command."""

    args: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


Runner = Callable[[Sequence[str]], CommandResult]


def is_command_available(command: str) -> bool:
    """Check if a command is available in PATH."""
    return shutil.which(command) is not None


@contextmanager
def working_directory(path: Union[str, Path]) -> Iterator[Path]:
    """Temporarily change the working directory.

    The original directory is restored on every exit path, including
    exceptions raised inside the block.
    """
    original = Path.cwd()
    target = Path(path)
    os.chdir(target)
    try:
        yield target
    finally:
        os.chdir(original)


def run_command(
    args: Sequence[str],
    timeout: Optional[float] = None,
    capture: bool = False,
) -> CommandResult:
    """Run a command and report its exit status.

    The executable is resolved through PATH first so Windows ``.cmd`` shims
    (npm.cmd, yarn.cmd) are found. A missing executable or a timeout is
    reported through ``returncode`` rather than raised.

    Args:
        args: Command and arguments
        timeout: Seconds before the child is killed
        capture: Capture stdout/stderr instead of inheriting the terminal

    Returns:
        CommandResult for the invocation
    """
    args = list(args)
    executable = shutil.which(args[0]) if args else None
    if executable is None:
        logger.debug("Executable not found: %s", args[0] if args else "<empty>")
        return CommandResult(args=args, returncode=EXIT_NOT_FOUND)

    logger.debug("Running: %s", " ".join(args))
    try:
        result = subprocess.run(
            [executable] + args[1:],
            capture_output=capture,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        logger.debug("Command timed out after %ss: %s", timeout, args[0])
        return CommandResult(args=args, returncode=EXIT_TIMEOUT)
    except OSError as e:
        logger.debug("Could not start %s: %s", args[0], e)
        return CommandResult(args=args, returncode=EXIT_NOT_FOUND, stderr=str(e))

    return CommandResult(
        args=args,
        returncode=result.returncode,
        stdout=result.stdout or "",
        stderr=result.stderr or "",
    )
