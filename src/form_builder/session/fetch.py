"""Per-resource fetching where the newest request wins.

Each resource key (e.g. ``"schema"``, ``"submissions"``) has at most one
request in flight. Starting a new fetch for a key cancels the previous one,
and only the newest request's outcome is written to that key's state.
Different keys never affect each other.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class FetchState:
    """Last applied outcome for one resource."""

    data: Any = None
    loading: bool = False
    error: Optional[Exception] = None
    generation: int = 0


class SupersedingFetcher:
    """Runs loaders per key; a newer fetch supersedes an older one."""

    def __init__(self):
        self._states: Dict[str, FetchState] = {}
        self._tasks: Dict[str, asyncio.Task] = {}
        self._generations: Dict[str, int] = {}

    def state(self, key: str) -> FetchState:
        if key not in self._states:
            self._states[key] = FetchState()
        return self._states[key]

    def in_flight(self, key: str) -> bool:
        task = self._tasks.get(key)
        return task is not None and not task.done()

    def _is_current(self, key: str, generation: int) -> bool:
        return self._generations.get(key) == generation

    async def fetch(self, key: str, loader: Callable[[], Awaitable[Any]]) -> Optional[FetchState]:
        """Run ``loader`` for ``key``.

        Returns:
            The key's state after applying this request's outcome, or None if
            a newer request superseded this one. Loader errors are stored on
            the state (previous data is kept), not raised.
        """
        generation = self._generations.get(key, 0) + 1
        self._generations[key] = generation

        previous = self._tasks.get(key)
        if previous is not None and not previous.done():
            logger.debug(f"Fetch '{key}' #{generation} supersedes an in-flight request")
            previous.cancel()

        state = self.state(key)
        state.loading = True
        task = asyncio.ensure_future(loader())
        self._tasks[key] = task

        try:
            data = await task
        except asyncio.CancelledError:
            if not self._is_current(key, generation):
                return None
            # the caller itself was cancelled
            state.loading = False
            raise
        except Exception as e:
            if not self._is_current(key, generation):
                return None
            logger.warning(f"Fetch '{key}' failed: {e}")
            state.error = e
            state.loading = False
            state.generation = generation
            return state

        if not self._is_current(key, generation):
            logger.debug(f"Dropping stale result for '{key}' #{generation}")
            return None

        state.data = data
        state.error = None
        state.loading = False
        state.generation = generation
        return state

    def cancel_all(self) -> None:
        for task in self._tasks.values():
            if not task.done():
                task.cancel()
        self._tasks.clear()
