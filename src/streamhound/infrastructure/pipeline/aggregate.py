"""Fan-out/fan-in for the sub-fetches of one adapter call.

Every job is started at once and the caller waits until all of them
have settled.  A job that raises contributes nothing; it never cancels
or hides its siblings.  Results are merged in dispatch order because
each job writes only to its own slot.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Iterable
from typing import TypeVar

import structlog

T = TypeVar("T")

log = structlog.get_logger(__name__)


async def gather_settled(
    jobs: Iterable[Awaitable[list[T]]],
    *,
    label: str = "subfetch",
    max_concurrent: int | None = None,
) -> list[T]:
    """Run *jobs* concurrently and merge their results.

    Args:
        jobs: Coroutines each producing a list of partial results.
        label: Event prefix used in log lines.
        max_concurrent: Optional bound on jobs in flight.

    Returns:
        Concatenated results of the jobs that succeeded.
    """
    pending = list(jobs)
    if not pending:
        return []

    sem = asyncio.Semaphore(max_concurrent) if max_concurrent else None

    async def _run(job: Awaitable[list[T]]) -> list[T]:
        if sem is None:
            return await job
        async with sem:
            return await job

    settled = await asyncio.gather(
        *(_run(job) for job in pending), return_exceptions=True
    )

    merged: list[T] = []
    failed = 0
    for index, outcome in enumerate(settled):
        if isinstance(outcome, BaseException):
            if isinstance(outcome, asyncio.CancelledError):
                raise outcome
            failed += 1
            log.warning(
                f"{label}_failed",
                index=index,
                error_type=type(outcome).__name__,
                error=str(outcome),
            )
            continue
        merged.extend(outcome)

    log.debug(
        f"{label}_settled",
        total=len(pending),
        failed=failed,
        results=len(merged),
    )
    return merged
