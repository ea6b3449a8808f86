from __future__ import annotations

"""
Rebuild Coalescing State Machine.

Collapses bursts of change notifications into a single rebuild. A trigger
arms a warm-up timer that is re-armed by every further trigger; when it
fires the rebuild runs once with the number of triggers seen, then a
cooldown passes before the machine accepts a new burst.

    IDLE --trigger--> WARMING --timer--> RUNNING --done--> COOLDOWN --timer--> IDLE
"""

import asyncio
import enum
import logging
from typing import Any, Awaitable, Callable, Coroutine, Optional

from zettelbuilder.domain.config import DEFAULT_COOLDOWN_MS, DEFAULT_WARMUP_MS
from zettelbuilder.domain.errors import ZettelbuilderError

logger = logging.getLogger(__name__)

RebuildFn = Callable[[int], Awaitable[None]]
CallLater = Callable[[float, Callable[[], None]], Any]
Spawn = Callable[[Coroutine[Any, Any, None]], Any]


class CoalescerState(enum.Enum):
    IDLE = "idle"
    WARMING = "warming"
    RUNNING = "running"
    COOLDOWN = "cooldown"


class RebuildCoalescer:
    """
    Debounces triggers into rebuilds, with at most one rebuild in flight.

    Triggers received while RUNNING or COOLDOWN are counted but never
    replayed. A failing rebuild is logged and the machine still goes
    through COOLDOWN back to IDLE.

    Args:
        rebuild: Coroutine function receiving the buffered trigger count.
        warmup: Seconds to wait after the latest trigger.
        cooldown: Seconds to wait after a rebuild before going idle.
        call_later: Scheduler returning a handle with cancel(); defaults
                    to the running loop's call_later.
        spawn: Runs a coroutine in the background; defaults to
               asyncio.ensure_future.
    """

    def __init__(
            self,
            rebuild: RebuildFn,
            *,
            warmup: float = DEFAULT_WARMUP_MS / 1000,
            cooldown: float = DEFAULT_COOLDOWN_MS / 1000,
            call_later: Optional[CallLater] = None,
            spawn: Optional[Spawn] = None,
    ) -> None:
        self._rebuild = rebuild
        self.warmup = warmup
        self.cooldown = cooldown
        self._call_later = call_later or _loop_call_later
        self._spawn = spawn or asyncio.ensure_future

        self.state = CoalescerState.IDLE
        self.buffered = 0
        self.runs = 0
        self._timer: Any = None
        self._task: Any = None

    def trigger(self) -> None:
        """Record a change notification."""
        self.buffered += 1

        if self.state is CoalescerState.IDLE:
            self.state = CoalescerState.WARMING
            self._timer = self._call_later(self.warmup, self._start)
        elif self.state is CoalescerState.WARMING:
            self._timer.cancel()
            self._timer = self._call_later(self.warmup, self._start)

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def _start(self) -> None:
        self._timer = None
        self.state = CoalescerState.RUNNING
        self._task = self._spawn(self._run(self.buffered))

    async def _run(self, buffered: int) -> None:
        try:
            await self._rebuild(buffered)
        except Exception as e:
            logger.error(f"Rebuild failed: {e}", exc_info=not _is_expected(e))
        finally:
            self.runs += 1
            self.state = CoalescerState.COOLDOWN
            self._timer = self._call_later(self.cooldown, self._settle)

    def _settle(self) -> None:
        self._timer = None
        self.buffered = 0
        self.state = CoalescerState.IDLE

    def cancel(self) -> None:
        """Drop a pending warm-up or cooldown timer and return to IDLE."""
        if self._timer is not None:
            self._timer.cancel()
            self._settle()


def _loop_call_later(delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
    return asyncio.get_running_loop().call_later(delay, callback)


def _is_expected(error: Exception) -> bool:
    return isinstance(error, ZettelbuilderError)
