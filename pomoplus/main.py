import logging
from contextlib import asynccontextmanager

import sentry_sdk
from fastapi import FastAPI

from pomoplus import __version__
from pomoplus.clock import SystemClock
from pomoplus.config import settings
from pomoplus.database import async_session, create_tables, engine
from pomoplus.services.persistence_service import Persistence
from pomoplus.services.preference_service import SqlPreferenceStore
from pomoplus.services.session_service import SqlSessionStore
from pomoplus.services.tick_loop import TickLoop
from pomoplus.services.timer_controller import load_timer
from pomoplus.services.write_queue import WriteQueue

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize Sentry
if settings.SENTRY_DSN:
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENVIRONMENT,
        traces_sample_rate=0.2 if settings.ENVIRONMENT == "production" else 1.0,
        send_default_pii=False,
    )


def _log_phase_change(finished, record) -> None:
    # Desktop notification and sound hook in here
    if record is not None:
        logger.info("Work session complete! Time for a break.")
    else:
        logger.info("Break is over! Back to work.")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: schema, stores, background writer, timer and tick loop
    await create_tables()

    clock = SystemClock()
    session_store = SqlSessionStore(async_session)
    preferences = SqlPreferenceStore(async_session)
    write_queue = WriteQueue()
    write_queue.start()

    timer = await load_timer(
        preferences, clock, persistence=Persistence(write_queue, session_store, preferences)
    )
    timer.add_listener(_log_phase_change)
    tick_loop = TickLoop(timer, clock)
    tick_loop.start()

    app.state.clock = clock
    app.state.session_store = session_store
    app.state.write_queue = write_queue
    app.state.timer = timer
    logger.info("Timer ready with tags %s", timer.registry.list())

    yield

    # Shutdown: stop ticking first so no new records appear, then flush writes
    await tick_loop.stop()
    await write_queue.close()
    await engine.dispose()


app = FastAPI(
    title="Pomoplus",
    version=__version__,
    lifespan=lifespan,
)

from pomoplus.middleware.error_handler import register_error_handlers  # noqa: E402

register_error_handlers(app)

# Routers
from pomoplus.routers.sessions import router as sessions_router  # noqa: E402
from pomoplus.routers.stats import router as stats_router  # noqa: E402
from pomoplus.routers.tags import router as tags_router  # noqa: E402
from pomoplus.routers.timer import router as timer_router  # noqa: E402

app.include_router(timer_router)
app.include_router(tags_router)
app.include_router(sessions_router)
app.include_router(stats_router)


@app.get("/health")
async def health():
    queue = app.state.write_queue
    return {
        "status": "degraded" if queue.degraded else "ok",
        "pending_writes": queue.pending,
        "failed_writes": len(queue.failed),
    }


@app.post("/health/retry")
async def retry_failed_writes():
    """Re-queue writes that failed permanently or ran out of retries."""
    requeued = app.state.write_queue.retry_failed()
    return {"requeued": requeued}
