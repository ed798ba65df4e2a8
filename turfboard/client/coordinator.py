"""Debounced saving of counter edits.

Each edit recomputes the row's stats immediately and (re)arms a per-login
timer. When the timer fires the save starts and can no longer be cancelled;
a later edit only replaces a timer that has not fired yet. A failed save is
reported through ``on_error`` and the local values are kept as typed.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Set

from turfboard.services.stats_service import Number, TurfStats, coerce_count, compute_stats

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.6

SaveFn = Callable[[str, Number, Number], Awaitable[Any]]
ErrorFn = Callable[[str, BaseException], None]
SavedFn = Callable[[str, Any], None]


class EditCoordinator:
    """
    Must be used from inside a running event loop: ``edit`` schedules tasks
    on the current loop.
    """

    def __init__(
        self,
        save: SaveFn,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        on_error: Optional[ErrorFn] = None,
        on_saved: Optional[SavedFn] = None,
    ) -> None:
        self._save = save
        self.debounce_seconds = debounce_seconds
        self._on_error = on_error
        self._on_saved = on_saved
        self._pending: Dict[str, asyncio.Task] = {}
        self._in_flight: Dict[str, Set[asyncio.Task]] = {}

    @classmethod
    def for_client(cls, client, **kwargs) -> "EditCoordinator":
        """Coordinator that saves through a TurfApiClient"""
        return cls(client.update_login, **kwargs)

    def edit(self, key: str, on_turf: Any, off_turf: Any) -> TurfStats:
        """Record an edit: return fresh stats now, save after the debounce window"""
        on_value = coerce_count(on_turf)
        off_value = coerce_count(off_turf)
        stats = compute_stats(on_value, off_value)

        previous = self._pending.pop(key, None)
        if previous is not None:
            previous.cancel()

        self._pending[key] = asyncio.get_running_loop().create_task(self._run(key, on_value, off_value))
        return stats

    def pending(self, key: str) -> bool:
        """True while a save for ``key`` is waiting for its timer"""
        return key in self._pending

    def in_flight(self, key: str) -> bool:
        """True while a save for ``key`` has been sent and not yet settled"""
        return bool(self._in_flight.get(key))

    async def _run(self, key: str, on_turf: Number, off_turf: Number) -> Any:
        await asyncio.sleep(self.debounce_seconds)

        task = asyncio.current_task()
        if self._pending.get(key) is task:
            del self._pending[key]
        self._in_flight.setdefault(key, set()).add(task)

        try:
            result = await self._save(key, on_turf, off_turf)
        except Exception as exc:
            logger.warning("Saving %s failed: %s", key, exc)
            if self._on_error is not None:
                self._on_error(key, exc)
            return None
        finally:
            flights = self._in_flight.get(key)
            if flights is not None:
                flights.discard(task)
                if not flights:
                    del self._in_flight[key]

        logger.debug("Saved %s (on=%s, off=%s)", key, on_turf, off_turf)
        if self._on_saved is not None:
            self._on_saved(key, result)
        return result

    def _tasks(self):
        tasks = set(self._pending.values())
        for flights in self._in_flight.values():
            tasks.update(flights)
        return tasks

    async def flush(self) -> None:
        """Wait for every scheduled and in-flight save to settle"""
        tasks = self._tasks()
        while tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            tasks = self._tasks()

    async def aclose(self, discard_pending: bool = False) -> None:
        """
        Settle outstanding work before shutdown. With ``discard_pending`` the
        not-yet-fired timers are dropped; in-flight saves are always awaited.
        """
        if discard_pending:
            for task in self._pending.values():
                task.cancel()
            self._pending.clear()
        await self.flush()
