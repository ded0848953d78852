class PomoplusError(Exception):
    """Base class for every error raised by the timer core."""


class TimerError(PomoplusError):
    pass


class InvalidTag(TimerError):
    """A Work phase cannot start because no tag is selected."""


class TagError(PomoplusError):
    def __init__(self, name: str, message: str | None = None):
        self.name = name
        super().__init__(message or name)


class UnknownTag(TagError):
    def __init__(self, name: str):
        super().__init__(name, f"Unknown tag: {name!r}")


class DuplicateTag(TagError):
    def __init__(self, name: str):
        super().__init__(name, f"Tag already exists: {name!r}")


class ProtectedTag(TagError):
    def __init__(self, name: str):
        super().__init__(name, f"Tag {name!r} is in use by the running work interval")


class EmptyTagName(TagError):
    def __init__(self):
        super().__init__("", "Tag name must not be empty")


class StoreError(PomoplusError):
    """Persistence failure. Subclasses tell the writer whether to retry."""

    retryable = False


class TransientStoreError(StoreError):
    retryable = True


class PermanentStoreError(StoreError):
    retryable = False
