"""First-acceptable-result racing over concurrent awaitables."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RaceOutcome[T]:
    """Result of a first_match() race.

    Attributes:
        label: Label of the winning contender, None if nothing was accepted.
        value: The accepted value, None if nothing was accepted.
        pending: Labels still running when the winner was accepted (these
            were cancelled). Always empty when nothing was accepted.
        errors: Exceptions raised by contenders that settled, by label.
    """

    label: str | None = None
    value: T | None = None
    pending: tuple[str, ...] = ()
    errors: dict[str, BaseException] = field(default_factory=dict)

    @property
    def matched(self) -> bool:
        return self.label is not None


async def first_match[T](
    contenders: Mapping[str, Awaitable[T]],
    accept: Callable[[T], bool],
) -> RaceOutcome[T]:
    """Run all contenders concurrently and return the first accepted result.

    Each time one or more contenders settle, their results are checked
    against ``accept`` in launch order. The first accepted result wins and
    every contender still running is cancelled. A contender that raises
    only removes itself from the race; its exception is kept in
    ``RaceOutcome.errors``. If the set is exhausted without an accepted
    result, the outcome is unmatched.

    Args:
        contenders: Awaitables keyed by a label, launched together.
        accept: Predicate a result must satisfy to win.

    Returns:
        The race outcome.
    """
    tasks: dict[asyncio.Future[T], str] = {
        asyncio.ensure_future(aw): label for label, aw in contenders.items()
    }
    pending: set[asyncio.Future[T]] = set(tasks)
    errors: dict[str, BaseException] = {}

    try:
        while pending:
            done, pending = await asyncio.wait(
                pending, return_when=asyncio.FIRST_COMPLETED
            )
            winner: asyncio.Future[T] | None = None
            # Iterate in launch order; every settled task is inspected so no
            # exception is left unretrieved.
            for task in (t for t in tasks if t in done):
                label = tasks[task]
                if task.cancelled():
                    continue
                if (exc := task.exception()) is not None:
                    logger.debug("Race contender '%s' failed: %s", label, exc)
                    errors[label] = exc
                    continue
                if winner is None and accept(task.result()):
                    winner = task

            if winner is not None:
                still_running = tuple(tasks[t] for t in tasks if t in pending)
                return RaceOutcome(
                    label=tasks[winner],
                    value=winner.result(),
                    pending=still_running,
                    errors=errors,
                )

        return RaceOutcome(errors=errors)
    finally:
        for task in pending:
            task.cancel()
