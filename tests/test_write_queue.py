import asyncio

import pytest

from pomoplus.errors import PermanentStoreError, TransientStoreError
from pomoplus.services.write_queue import WriteQueue


async def _no_sleep(seconds: float) -> None:
    return None


class FlakyJob:
    def __init__(self, failures: int, error=TransientStoreError):
        self.failures = failures
        self.error = error
        self.calls = 0
        self.done = False

    async def __call__(self) -> None:
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error("disk busy")
        self.done = True


@pytest.mark.asyncio
async def test_jobs_run_in_order():
    order = []
    queue = WriteQueue(retry_delays=[], sleep=_no_sleep)
    queue.start()

    for i in range(5):
        async def job(i=i):
            order.append(i)

        queue.submit(f"job {i}", job)
    await queue.drain()
    await queue.close()
    assert order == [0, 1, 2, 3, 4]


@pytest.mark.asyncio
async def test_transient_errors_are_retried_with_backoff():
    delays = []

    async def record_sleep(seconds: float) -> None:
        delays.append(seconds)

    queue = WriteQueue(retry_delays=[1.0, 2.0, 4.0], sleep=record_sleep)
    queue.start()
    job = FlakyJob(failures=2)
    queue.submit("flaky", job)
    await queue.drain()

    assert job.done
    assert job.calls == 3
    assert delays == [1.0, 2.0]
    assert not queue.degraded
    await queue.close()


@pytest.mark.asyncio
async def test_exhausted_retries_enter_degraded_mode_and_can_be_retried():
    queue = WriteQueue(retry_delays=[0.0], sleep=_no_sleep)
    queue.start()
    job = FlakyJob(failures=3)
    queue.submit("flaky", job)
    await queue.drain()

    assert job.calls == 2
    assert queue.degraded
    assert isinstance(queue.last_error, TransientStoreError)

    assert queue.retry_failed() == 1
    await queue.drain()
    assert job.done
    assert not queue.degraded
    await queue.close()


@pytest.mark.asyncio
async def test_permanent_errors_are_not_retried():
    queue = WriteQueue(retry_delays=[0.0, 0.0], sleep=_no_sleep)
    queue.start()
    job = FlakyJob(failures=1, error=PermanentStoreError)
    queue.submit("broken", job)
    await queue.drain()

    assert job.calls == 1
    assert queue.degraded
    assert [d for d, _ in queue.failed] == ["broken"]
    await queue.close()


@pytest.mark.asyncio
async def test_unexpected_errors_do_not_kill_the_worker():
    ran = []

    async def broken():
        raise RuntimeError("bug")

    async def fine():
        ran.append(True)

    queue = WriteQueue(retry_delays=[], sleep=_no_sleep)
    queue.start()
    queue.submit("broken", broken)
    queue.submit("fine", fine)
    await queue.drain()

    assert ran == [True]
    assert len(queue.failed) == 1
    await queue.close()


@pytest.mark.asyncio
async def test_close_lets_in_flight_write_finish():
    started = asyncio.Event()
    release = asyncio.Event()
    finished = []

    async def slow():
        started.set()
        await release.wait()
        finished.append(True)

    queue = WriteQueue(retry_delays=[], sleep=_no_sleep)
    queue.start()
    queue.submit("slow", slow)
    await started.wait()

    closing = asyncio.create_task(queue.close(timeout=0.01))
    await asyncio.sleep(0.05)
    assert not closing.done()
    release.set()
    await closing
    assert finished == [True]


@pytest.mark.asyncio
async def test_submit_before_start_is_kept():
    ran = []

    async def job():
        ran.append(True)

    queue = WriteQueue(retry_delays=[], sleep=_no_sleep)
    queue.submit("early", job)
    assert queue.pending == 1
    queue.start()
    await queue.drain()
    assert ran == [True]
    await queue.close()
