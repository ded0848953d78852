from functools import partial

from pomoplus.schemas.session import SessionRecord
from pomoplus.services.preference_service import (
    BREAK_DURATION_KEY,
    SELECTED_TAG_KEY,
    WORK_DURATION_KEY,
    SqlPreferenceStore,
)
from pomoplus.services.session_service import SessionStore
from pomoplus.services.write_queue import WriteQueue


class Persistence:
    """Fire-and-forget writes issued by the timer, routed through the write queue."""

    def __init__(
        self,
        queue: WriteQueue,
        sessions: SessionStore,
        preferences: SqlPreferenceStore | None = None,
    ):
        self.queue = queue
        self.sessions = sessions
        self.preferences = preferences

    def save_record(self, record: SessionRecord) -> None:
        self.queue.submit(
            f"{record.phase.value} session {record.start_time.isoformat()}",
            partial(self.sessions.append, record),
        )

    def save_durations(self, work_seconds: int, break_seconds: int) -> None:
        if self.preferences is None:
            return
        self.queue.submit(WORK_DURATION_KEY, partial(self.preferences.set, WORK_DURATION_KEY, str(work_seconds)))
        self.queue.submit(BREAK_DURATION_KEY, partial(self.preferences.set, BREAK_DURATION_KEY, str(break_seconds)))

    def save_selected_tag(self, tag: str | None) -> None:
        if self.preferences is None:
            return
        self.queue.submit(SELECTED_TAG_KEY, partial(self.preferences.set, SELECTED_TAG_KEY, tag or ""))

    def save_tags(self, names: list[str]) -> None:
        if self.preferences is None:
            return
        self.queue.submit("tags", partial(self.preferences.save_tags, list(names)))
