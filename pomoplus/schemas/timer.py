from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class Phase(str, Enum):
    WORK = "work"
    BREAK = "break"


class RunState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


class TimerState(BaseModel):
    """Immutable snapshot of the interval state machine.

    Transitions in ``pomoplus.services.timer_service`` never mutate a state,
    they return a new one.
    """

    phase: Phase = Phase.WORK
    run_state: RunState = RunState.IDLE
    remaining_seconds: int = Field(ge=0)
    work_seconds: int = Field(gt=0)
    break_seconds: int = Field(gt=0)
    tag: str | None = None
    # Set when the current phase first starts running, cleared on reset
    phase_started_at: datetime | None = None
    # Seconds of countdown actually applied in the current phase
    elapsed_seconds: int = Field(default=0, ge=0)

    model_config = {"frozen": True}

    def configured_seconds(self, phase: Phase | None = None) -> int:
        phase = phase or self.phase
        return self.work_seconds if phase is Phase.WORK else self.break_seconds

    @property
    def display(self) -> str:
        minutes, seconds = divmod(self.remaining_seconds, 60)
        return f"{minutes:02d}:{seconds:02d}"


class TimerResponse(BaseModel):
    phase: Phase
    run_state: RunState
    remaining_seconds: int
    display: str
    work_seconds: int
    break_seconds: int
    tag: str | None
    tags: list[str]
    degraded: bool = False


class DurationAdjust(BaseModel):
    phase: Phase
    delta_minutes: int = Field(ge=-240, le=240)


class TagSelect(BaseModel):
    name: str = Field(min_length=1, max_length=255)
