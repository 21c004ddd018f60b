"""Ordered fallback strategies.

Install and setup steps are expressed as a list of commands tried in order
until one succeeds, e.g. ``npm install -g`` then ``npx ... install``.
"""

import logging
from dataclasses import dataclass, field
from typing import Container, List, Optional, Sequence, Tuple

from ..utils.process import CommandResult, Runner, run_command

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InstallStrategy:
    """A single fallible way of performing a step."""

    name: str
    command: Tuple[str, ...]

    def __str__(self) -> str:
        return " ".join(self.command)


@dataclass
class StrategyOutcome:
    """Result of running a strategy list."""

    succeeded: Optional[InstallStrategy] = None
    attempts: List[Tuple[InstallStrategy, CommandResult]] = field(default_factory=list)
    dry_run: bool = False

    @property
    def ok(self) -> bool:
        return self.succeeded is not None


def run_strategies(
    strategies: Sequence[InstallStrategy],
    runner: Runner = run_command,
    dry_run: bool = False,
    fallthrough_codes: Optional[Container[int]] = None,
) -> StrategyOutcome:
    """Try each strategy in order, stopping at the first success.

    Args:
        strategies: Strategies in preference order
        runner: Callable that executes a command and returns a CommandResult
        dry_run: Report the first strategy as chosen without running anything
        fallthrough_codes: If given, only these exit codes move on to the
            next strategy; any other failure stops the run

    Returns:
        StrategyOutcome naming the successful strategy, if any
    """
    outcome = StrategyOutcome(dry_run=dry_run)
    if not strategies:
        return outcome

    if dry_run:
        outcome.succeeded = strategies[0]
        return outcome

    for strategy in strategies:
        result = runner(strategy.command)
        outcome.attempts.append((strategy, result))
        if result.ok:
            logger.debug("Strategy %s succeeded", strategy.name)
            outcome.succeeded = strategy
            break
        logger.debug(
            "Strategy %s failed with exit code %d", strategy.name, result.returncode
        )
        if fallthrough_codes is not None and result.returncode not in fallthrough_codes:
            break

    return outcome
