"""Activity event data models."""

from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum

Tag = tuple[str, str]


class ActivityPhase(str, Enum):
    """Lifecycle phase of a traced operation."""

    START = "start"
    STOP = "stop"
    EXCEPTION = "exception"


@dataclass(frozen=True)
class ActivityEvent:
    """A single traced operation as reported by a diagnostic source.

    Tags keep the order they were attached in; the same key may occur more
    than once and lookups take the first occurrence.
    """

    operation_name: str
    phase: ActivityPhase
    tags: tuple[Tag, ...] = ()
    duration: timedelta = field(default_factory=timedelta)
    exception: str | None = None  # "<type>: <message>" on the failure path

    def __post_init__(self) -> None:
        if self.duration < timedelta(0):
            raise ValueError(
                f"Activity duration must be non-negative, got {self.duration}"
            )
        # Accept any iterable of pairs but store an immutable tuple
        if not isinstance(self.tags, tuple):
            object.__setattr__(self, "tags", tuple(self.tags))

    @property
    def duration_seconds(self) -> float:
        return self.duration.total_seconds()

    def tag(self, key: str) -> str | None:
        """Return the value of the first tag named ``key``, or None."""
        for item in self.tags:
            try:
                tag_key, value = item
            except (TypeError, ValueError):
                continue
            if tag_key == key:
                return value if value is None or isinstance(value, str) else str(value)
        return None
