import logging
from collections.abc import Callable

from pomoplus.clock import Clock
from pomoplus.config import settings
from pomoplus.schemas.session import SessionRecord
from pomoplus.schemas.timer import Phase, RunState, TimerResponse, TimerState
from pomoplus.services import timer_service
from pomoplus.services.persistence_service import Persistence
from pomoplus.services.preference_service import (
    BREAK_DURATION_KEY,
    SELECTED_TAG_KEY,
    WORK_DURATION_KEY,
    SqlPreferenceStore,
)
from pomoplus.services.tag_service import TagRegistry

logger = logging.getLogger(__name__)

# (finished phase, record or None for breaks)
PhaseListener = Callable[[Phase, SessionRecord | None], None]
# Called with "start", "pause" or "reset" just before the run state changes
RunStateHook = Callable[[str], None]


class SessionTimer:
    """Owns the timer state and the tag registry for the interactive loop.

    Commands are synchronous and never wait on storage; writes are handed to
    ``Persistence`` which queues them.
    """

    def __init__(
        self,
        registry: TagRegistry,
        clock: Clock,
        state: TimerState | None = None,
        persistence: Persistence | None = None,
    ):
        self.registry = registry
        self.clock = clock
        self.persistence = persistence
        self.last_record: SessionRecord | None = None
        self._listeners: list[PhaseListener] = []
        self._run_state_hooks: list[RunStateHook] = []
        if state is None:
            state = timer_service.initial_state(
                settings.DEFAULT_WORK_SECONDS, settings.DEFAULT_BREAK_SECONDS
            )
        self._state = timer_service.select_tag(state, registry.selected)

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state.run_state is RunState.RUNNING

    def add_listener(self, listener: PhaseListener) -> None:
        self._listeners.append(listener)

    def add_run_state_hook(self, hook: RunStateHook) -> None:
        self._run_state_hooks.append(hook)

    def start(self) -> TimerState:
        if not self.is_running:
            self._notify_run_state("start")
        self._state = timer_service.start(self._state, self.clock.now())
        return self._state

    def pause(self) -> TimerState:
        if self.is_running:
            self._notify_run_state("pause")
        self._state = timer_service.pause(self._state)
        return self._state

    def toggle(self) -> TimerState:
        return self.pause() if self.is_running else self.start()

    def reset(self) -> TimerState:
        self._notify_run_state("reset")
        self._state = timer_service.reset(self._state)
        return self._state

    def tick(self, elapsed: int) -> SessionRecord | None:
        finished = self._state.phase
        self._state, record = timer_service.tick(self._state, elapsed, self.clock.now())
        if self._state.phase is finished:
            return None

        if record is not None:
            self.last_record = record
            logger.info(
                "Work interval complete: %ds tagged %r", record.duration_seconds, record.tag
            )
            if self.persistence is not None:
                # The phase has already flipped; a failed write never rolls it back
                self.persistence.save_record(record)
        else:
            logger.info("Break complete, back to work")
        for listener in self._listeners:
            try:
                listener(finished, record)
            except Exception:
                logger.exception("Phase listener %r failed", listener)
        return record

    def adjust_duration(self, phase: Phase, delta_minutes: int) -> TimerState:
        max_minutes = settings.MAX_WORK_MINUTES if phase is Phase.WORK else settings.MAX_BREAK_MINUTES
        self._state = timer_service.adjust_duration(
            self._state,
            phase,
            delta_minutes,
            min_minutes=settings.MIN_DURATION_MINUTES,
            max_minutes=max_minutes,
        )
        if self.persistence is not None:
            self.persistence.save_durations(self._state.work_seconds, self._state.break_seconds)
        return self._state

    def select_tag(self, name: str) -> TimerState:
        self.registry.select(name)
        return self._sync_selection()

    def select_next_tag(self) -> TimerState:
        self.registry.select_next()
        return self._sync_selection()

    def select_previous_tag(self) -> TimerState:
        self.registry.select_previous()
        return self._sync_selection()

    def add_tag(self, name: str) -> str:
        name = self.registry.add(name)
        if self.persistence is not None:
            self.persistence.save_tags(self.registry.list())
        self._sync_selection()
        return name

    def remove_tag(self, name: str) -> None:
        self.registry.remove(
            name, work_in_progress=timer_service.is_work_in_progress(self._state)
        )
        if self.persistence is not None:
            self.persistence.save_tags(self.registry.list())
        self._sync_selection()

    def snapshot(self, degraded: bool = False) -> TimerResponse:
        state = self._state
        return TimerResponse(
            phase=state.phase,
            run_state=state.run_state,
            remaining_seconds=state.remaining_seconds,
            display=state.display,
            work_seconds=state.work_seconds,
            break_seconds=state.break_seconds,
            tag=state.tag,
            tags=self.registry.list(),
            degraded=degraded,
        )

    def _notify_run_state(self, event: str) -> None:
        for hook in self._run_state_hooks:
            hook(event)

    def _sync_selection(self) -> TimerState:
        selected = self.registry.selected
        if selected != self._state.tag:
            self._state = timer_service.select_tag(self._state, selected)
            if self.persistence is not None:
                self.persistence.save_selected_tag(selected)
        return self._state


async def load_timer(
    preferences: SqlPreferenceStore,
    clock: Clock,
    persistence: Persistence | None = None,
) -> SessionTimer:
    """Rebuild the timer from saved configuration, seeding defaults on first run."""
    names = await preferences.load_tags()
    if names is None:
        names = list(settings.DEFAULT_TAGS)
        await preferences.save_tags(names)
        logger.info("Seeded default tags %s", names)

    selected = await preferences.get(SELECTED_TAG_KEY)
    registry = TagRegistry(names, selected=selected or None)

    work_seconds = _parse_seconds(await preferences.get(WORK_DURATION_KEY), settings.DEFAULT_WORK_SECONDS)
    break_seconds = _parse_seconds(await preferences.get(BREAK_DURATION_KEY), settings.DEFAULT_BREAK_SECONDS)
    state = timer_service.initial_state(work_seconds, break_seconds, registry.selected)
    return SessionTimer(registry, clock, state=state, persistence=persistence)


def _parse_seconds(value: str | None, default: int) -> int:
    try:
        seconds = int(value) if value is not None else default
    except ValueError:
        logger.warning("Ignoring invalid saved duration %r", value)
        return default
    return seconds if seconds > 0 else default
