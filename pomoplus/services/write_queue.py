import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable

import sentry_sdk

from pomoplus.config import settings
from pomoplus.errors import StoreError

logger = logging.getLogger(__name__)

Job = Callable[[], Awaitable[None]]


class WriteQueue:
    """Runs persistence jobs in order on a background task.

    ``submit`` never blocks, so the timer and the request handlers stay
    responsive while the database works. Transient store errors are retried
    with backoff. Anything that still fails is kept in ``failed`` and flips
    the queue into degraded mode until ``retry_failed`` succeeds.
    """

    def __init__(
        self,
        retry_delays: list[float] | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._queue: asyncio.Queue[tuple[str, Job]] = asyncio.Queue()
        self._delays = list(settings.WRITE_RETRY_DELAYS if retry_delays is None else retry_delays)
        self._sleep = sleep
        self._worker: asyncio.Task | None = None
        self._inflight: asyncio.Future | None = None
        self.failed: list[tuple[str, Job]] = []
        self.last_error: Exception | None = None

    @property
    def degraded(self) -> bool:
        return bool(self.failed)

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def start(self) -> None:
        if self._worker is None or self._worker.done():
            self._worker = asyncio.create_task(self._run(), name="pomoplus-write-queue")

    def submit(self, description: str, job: Job) -> None:
        self._queue.put_nowait((description, job))

    def retry_failed(self) -> int:
        jobs, self.failed = self.failed, []
        for description, job in jobs:
            self.submit(description, job)
        return len(jobs)

    async def drain(self) -> None:
        await self._queue.join()

    async def close(self, timeout: float | None = 10.0) -> None:
        """Stop the worker after writing what is queued.

        A write that is already running always finishes, even when the
        drain times out.
        """
        if self._worker is None:
            return
        try:
            await asyncio.wait_for(self._queue.join(), timeout)
        except asyncio.TimeoutError:
            logger.warning("Shutting down with %d unwritten jobs", self._queue.qsize())
        self._worker.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._worker
        if self._inflight is not None and not self._inflight.done():
            await self._inflight
        self._worker = None

    async def _run(self) -> None:
        while True:
            description, job = await self._queue.get()
            self._inflight = asyncio.ensure_future(self._execute(description, job))
            try:
                # Cancelling the worker must not abort a write halfway
                await asyncio.shield(self._inflight)
            finally:
                self._queue.task_done()

    async def _execute(self, description: str, job: Job) -> bool:
        attempts = len(self._delays) + 1
        for attempt in range(attempts):
            try:
                await job()
                return True
            except StoreError as exc:
                self.last_error = exc
                if not exc.retryable or attempt == attempts - 1:
                    break
                logger.warning(
                    "Write %r attempt %d failed: %s", description, attempt + 1, exc
                )
                await self._sleep(self._delays[attempt])
            except Exception as exc:
                self.last_error = exc
                logger.exception("Write %r failed unexpectedly", description)
                break

        self.failed.append((description, job))
        sentry_sdk.capture_exception(self.last_error)
        logger.warning(
            "Write %r failed, running in degraded mode with %d unsaved writes: %s",
            description,
            len(self.failed),
            self.last_error,
        )
        return False
