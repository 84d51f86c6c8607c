"""Timer trigger for load cycles.

Retrying is the caller's job; this helper is that caller for long-running
processes: it reloads on an interval and stops once a cycle is terminal.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Callable

from core.domain.models import LoadResult, LoadTrigger
from core.services.confirmation_sync import ConfirmationSync

logger = logging.getLogger(__name__)


async def poll_confirmations(
    sync: ConfirmationSync,
    *,
    interval: float,
    on_result: Callable[[LoadResult], Any],
    stop: asyncio.Event | None = None,
    max_cycles: int | None = None,
) -> LoadResult | None:
    """Run `sync.load(TIMER)` every `interval` seconds.

    Returns the last result, or None if `stop` was already set.
    """

    stop = stop or asyncio.Event()
    last: LoadResult | None = None
    cycles = 0

    while not stop.is_set():
        last = await sync.load(LoadTrigger.TIMER)
        cycles += 1

        outcome = on_result(last)
        if inspect.isawaitable(outcome):
            await outcome

        if last.is_terminal:
            reason = last.reason.value if last.reason else "aborted"
            logger.warning("Polling for %s stopped: %s", sync.account.account_name, reason)
            break
        if max_cycles is not None and cycles >= max_cycles:
            break

        try:
            await asyncio.wait_for(stop.wait(), interval)
        except asyncio.TimeoutError:
            continue

    return last
