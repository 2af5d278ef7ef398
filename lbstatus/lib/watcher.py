"""Watch mode: poll on an interval and only report what changed."""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, List, Optional

from .status_checker import ProbeResult, ProbeSuccess

logger = logging.getLogger(__name__)


def change_key(result: ProbeResult) -> Optional[str]:
    """The value watch mode compares between cycles: the hash, or None for errors."""
    if isinstance(result, ProbeSuccess):
        return result.git_hash
    return None


class WatchDiffer:
    """Remembers the last seen change key per service."""

    def __init__(self):
        self.state: Dict[str, Optional[str]] = {}

    def diff(self, results: List[ProbeResult]) -> List[ProbeResult]:
        """Return the results whose key moved since the previous call, and remember them.

        A service seen for the first time always counts as changed. An error
        resets the service to None, so the next success is reported even when
        it carries the hash from before the error.
        """
        changed = []
        for result in results:
            key = change_key(result)
            if result.service not in self.state or self.state[result.service] != key:
                logger.debug(f"[{result.service}] {self.state.get(result.service)} -> {key}")
                self.state[result.service] = key
                changed.append(result)
        return changed


async def watch_loop(
        poll: Callable[[], Awaitable[List[ProbeResult]]],
        emit: Callable[[List[ProbeResult], bool], None],
        interval: float = 2.0,
        cycles: Optional[int] = None,
        differ: Optional[WatchDiffer] = None,
) -> WatchDiffer:
    """Poll, emit changed results, sleep, repeat.

    Args:
        poll: runs one full cycle of checks
        emit: receives each non-empty batch of changes and whether it is the first batch
        interval: seconds to sleep between cycles
        cycles: stop after this many cycles; None runs until cancelled
        differ: state to continue from, a fresh one by default

    Returns:
        The differ, once ``cycles`` cycles have run
    """
    differ = differ or WatchDiffer()
    first = True
    cycle = 0

    while cycles is None or cycle < cycles:
        results = await poll()
        changed = differ.diff(results)
        cycle += 1

        if changed:
            emit(changed, first)
            first = False
        else:
            logger.debug(f"No changes in cycle {cycle}")

        if cycles is not None and cycle >= cycles:
            break
        await asyncio.sleep(interval)

    return differ
