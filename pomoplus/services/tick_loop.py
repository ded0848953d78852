import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable

from pomoplus.clock import Clock
from pomoplus.config import settings
from pomoplus.services.timer_controller import SessionTimer

logger = logging.getLogger(__name__)


class TickLoop:
    """Feeds whole-second ticks from the monotonic clock into the timer."""

    def __init__(
        self,
        timer: SessionTimer,
        clock: Clock,
        interval: float | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.timer = timer
        self.clock = clock
        self.interval = settings.TICK_INTERVAL_SECONDS if interval is None else interval
        self._sleep = sleep
        self._last: float | None = None
        self._carry = 0.0
        self._task: asyncio.Task | None = None
        timer.add_run_state_hook(self._on_run_state)

    def poll(self) -> int:
        """Apply the time passed since the previous poll. Returns seconds ticked.

        Time only counts while the timer is running. The fraction of a second
        left over when it pauses is kept for the next running stretch.
        """
        now = self.clock.monotonic()
        if self._last is None or not self.timer.is_running:
            self._last = now
            return 0
        delta = now - self._last + self._carry
        self._last = now
        whole = int(delta)
        self._carry = delta - whole
        if whole:
            self.timer.tick(whole)
        return whole

    def _on_run_state(self, event: str) -> None:
        # Close the current window at the transition so idle or paused time
        # between two polls is never charged.
        self.poll()
        if event == "reset":
            self._carry = 0.0

    async def run(self) -> None:
        self.poll()
        while True:
            await self._sleep(self.interval)
            try:
                self.poll()
            except Exception:
                logger.exception("Timer tick failed")

    def start(self) -> None:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run(), name="pomoplus-tick-loop")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
