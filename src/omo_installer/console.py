"""Status output for the installer.

Human-facing progress goes to stderr so stdout stays free for the
interactive setup wizard. Diagnostics go through ``logging``.
"""

import logging
import sys
from typing import Iterable, Optional, TextIO

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool = False) -> None:
    """Route ``omo_installer`` loggers to stderr.

    WARNING and above are always shown; ``verbose`` lowers the level to DEBUG.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def _emit(message: str, stream: Optional[TextIO] = None) -> None:
    print(message, file=stream or sys.stderr)


def info(message: str) -> None:
    _emit(f"ℹ️  {message}")


def success(message: str) -> None:
    _emit(f"✅ {message}")


def warn(message: str) -> None:
    _emit(f"⚠️  {message}")


def error(message: str) -> None:
    _emit(f"❌ {message}")


def lines(text_lines: Iterable[str], indent: str = "") -> None:
    """Print pre-formatted lines verbatim."""
    for line in text_lines:
        _emit(f"{indent}{line}" if line else "")


def banner(title: str) -> None:
    rule = "=" * 44
    _emit("")
    _emit(rule)
    _emit(f"  {title}")
    _emit(rule)
    _emit("")
