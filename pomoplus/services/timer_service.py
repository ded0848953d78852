"""Interval state machine.

Every transition is a plain function of (state, event) -> state. Nothing here
reads the clock or touches storage: callers pass ``now`` in and persist the
``SessionRecord`` that ``tick`` hands back.
"""
from datetime import datetime

from pomoplus.errors import InvalidTag
from pomoplus.schemas.session import SessionRecord
from pomoplus.schemas.timer import Phase, RunState, TimerState

SECONDS_PER_MINUTE = 60


def initial_state(work_seconds: int, break_seconds: int, tag: str | None = None) -> TimerState:
    return TimerState(
        phase=Phase.WORK,
        run_state=RunState.IDLE,
        remaining_seconds=work_seconds,
        work_seconds=work_seconds,
        break_seconds=break_seconds,
        tag=tag,
    )


def other_phase(phase: Phase) -> Phase:
    return Phase.BREAK if phase is Phase.WORK else Phase.WORK


def is_work_in_progress(state: TimerState) -> bool:
    return state.phase is Phase.WORK and state.run_state is not RunState.IDLE


def start(state: TimerState, now: datetime) -> TimerState:
    if state.run_state is RunState.RUNNING:
        return state
    if state.phase is Phase.WORK and state.tag is None:
        raise InvalidTag("Select or create a tag before starting a work interval")
    return state.model_copy(
        update={
            "run_state": RunState.RUNNING,
            "phase_started_at": state.phase_started_at or now,
        }
    )


def pause(state: TimerState) -> TimerState:
    if state.run_state is not RunState.RUNNING:
        return state
    return state.model_copy(update={"run_state": RunState.PAUSED})


def reset(state: TimerState) -> TimerState:
    return state.model_copy(
        update={
            "run_state": RunState.IDLE,
            "remaining_seconds": state.configured_seconds(),
            "phase_started_at": None,
            "elapsed_seconds": 0,
        }
    )


def tick(
    state: TimerState, elapsed: int, now: datetime
) -> tuple[TimerState, SessionRecord | None]:
    """Count down by ``elapsed`` whole seconds.

    Returns the new state and, when a work interval just finished, the record
    describing it. Overshoot past zero is dropped rather than carried into the
    next phase.
    """
    if elapsed < 0:
        raise ValueError("elapsed must not be negative")
    if state.run_state is not RunState.RUNNING or elapsed == 0:
        return state, None

    step = min(elapsed, state.remaining_seconds)
    remaining = state.remaining_seconds - step
    applied = state.elapsed_seconds + step
    if remaining > 0:
        return state.model_copy(
            update={"remaining_seconds": remaining, "elapsed_seconds": applied}
        ), None

    record = None
    if state.phase is Phase.WORK:
        record = SessionRecord(
            start_time=state.phase_started_at or now,
            end_time=now,
            duration_seconds=applied,
            tag=state.tag,
            phase=Phase.WORK,
        )

    next_phase = other_phase(state.phase)
    # A work phase cannot run without a tag; the registry may have been emptied during the break
    can_run = next_phase is Phase.BREAK or state.tag is not None
    return state.model_copy(
        update={
            "phase": next_phase,
            "run_state": RunState.RUNNING if can_run else RunState.IDLE,
            "remaining_seconds": state.configured_seconds(next_phase),
            "phase_started_at": now if can_run else None,
            "elapsed_seconds": 0,
        }
    ), record


def adjust_duration(
    state: TimerState,
    phase: Phase,
    delta_minutes: int,
    *,
    min_minutes: int = 1,
    max_minutes: int | None = None,
) -> TimerState:
    """Change the configured length of ``phase``.

    An idle timer in that phase picks the new length up immediately. A running
    or paused countdown keeps its remaining time, only shortened if it would
    otherwise exceed the new length.
    """
    seconds = state.configured_seconds(phase) + delta_minutes * SECONDS_PER_MINUTE
    seconds = max(seconds, min_minutes * SECONDS_PER_MINUTE)
    if max_minutes is not None:
        seconds = min(seconds, max_minutes * SECONDS_PER_MINUTE)

    update: dict = {"work_seconds" if phase is Phase.WORK else "break_seconds": seconds}
    if phase is state.phase:
        if state.run_state is RunState.IDLE:
            update["remaining_seconds"] = seconds
        elif state.remaining_seconds > seconds:
            update["remaining_seconds"] = seconds
    return state.model_copy(update=update)


def select_tag(state: TimerState, tag: str | None) -> TimerState:
    if tag == state.tag:
        return state
    return state.model_copy(update={"tag": tag})
