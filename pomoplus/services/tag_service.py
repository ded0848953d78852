import logging
from collections.abc import Iterable, Iterator

from pomoplus.errors import DuplicateTag, EmptyTagName, ProtectedTag, UnknownTag

logger = logging.getLogger(__name__)


class TagRegistry:
    """Insertion-ordered set of tag names with one selected entry.

    The selection is either None (empty registry) or the index of an existing
    name; removals always leave it pointing at a live tag.
    """

    def __init__(self, names: Iterable[str] = (), selected: str | None = None):
        self._names: list[str] = []
        self._selected: int | None = None
        for name in names:
            self.add(name)
        if selected is not None and selected in self._names:
            self._selected = self._names.index(selected)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._names))

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def list(self) -> list[str]:
        return list(self._names)

    @property
    def selected(self) -> str | None:
        if self._selected is None:
            return None
        return self._names[self._selected]

    def add(self, name: str) -> str:
        name = name.strip()
        if not name:
            raise EmptyTagName()
        if name in self._names:
            raise DuplicateTag(name)
        self._names.append(name)
        if self._selected is None:
            self._selected = len(self._names) - 1
        logger.info("Added tag %r", name)
        return name

    def remove(self, name: str, *, work_in_progress: bool = False) -> None:
        """Delete ``name`` and keep the selection valid.

        Removing the last tag while it is driving a work interval is refused.
        When the selected tag goes away the next tag in order takes over, or
        the previous one if it was the last entry.
        """
        name = name.strip()
        if name not in self._names:
            raise UnknownTag(name)
        index = self._names.index(name)
        if work_in_progress and index == self._selected and len(self._names) == 1:
            raise ProtectedTag(name)

        del self._names[index]
        if not self._names:
            self._selected = None
        elif self._selected is not None:
            if index < self._selected:
                self._selected -= 1
            elif index == self._selected and index >= len(self._names):
                self._selected = len(self._names) - 1
        logger.info("Removed tag %r, selection is now %r", name, self.selected)

    def select(self, name: str) -> str:
        name = name.strip()
        if name not in self._names:
            raise UnknownTag(name)
        self._selected = self._names.index(name)
        return name

    def select_next(self) -> str | None:
        if not self._names:
            return None
        self._selected = (self._selected + 1) % len(self._names)
        return self.selected

    def select_previous(self) -> str | None:
        if not self._names:
            return None
        self._selected = (self._selected - 1) % len(self._names)
        return self.selected
