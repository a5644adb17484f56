"""Named diagnostic channels that traced operations write activity events to."""

import threading
import time
from contextlib import contextmanager
from datetime import timedelta
from typing import Any, Callable, Iterable, Iterator, Protocol

from ..logging_config import get_logger
from ..models import ActivityEvent, ActivityPhase, Tag

logger = get_logger(__name__)


DiagnosticObserver = Callable[[str, Any], None]
SourceCallback = Callable[["DiagnosticSource"], None]

START_SUFFIX = ".Start"
STOP_SUFFIX = ".Stop"
EXCEPTION_SUFFIX = ".Exception"


class IDiagnosticSource(Protocol):
    """A named channel delivering diagnostic events to its observers."""

    name: str

    def subscribe(self, observer: DiagnosticObserver) -> "Subscription":
        """Register an observer; dispose the returned subscription to detach."""
        ...

    def write(self, event_name: str, payload: Any) -> None:
        """Deliver an event synchronously to every observer."""
        ...


class Subscription:
    """Detaches an observer when disposed. Disposing twice is harmless."""

    def __init__(self, unsubscribe: Callable[[], None]):
        self._unsubscribe = unsubscribe
        self._disposed = False

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        self._unsubscribe()


class DiagnosticSource:
    """In-process diagnostic channel.

    Observers are called on the writer's thread in subscription order. An
    observer that raises is logged and skipped; the writer and the remaining
    observers are unaffected.
    """

    def __init__(self, name: str):
        self.name = name
        self._observers: list[DiagnosticObserver] = []
        self._lock = threading.Lock()

    def subscribe(self, observer: DiagnosticObserver) -> Subscription:
        with self._lock:
            self._observers.append(observer)

        def unsubscribe() -> None:
            with self._lock:
                if observer in self._observers:
                    self._observers.remove(observer)

        return Subscription(unsubscribe)

    def is_enabled(self) -> bool:
        return bool(self._observers)

    def write(self, event_name: str, payload: Any) -> None:
        with self._lock:
            observers = list(self._observers)

        for observer in observers:
            try:
                observer(event_name, payload)
            except Exception:
                logger.exception(
                    "Error in diagnostic observer for %s on %s", event_name, self.name
                )

    def write_activity(self, event: ActivityEvent) -> None:
        """Write an activity event under its phase-specific event name."""
        suffix = {
            ActivityPhase.START: START_SUFFIX,
            ActivityPhase.STOP: STOP_SUFFIX,
            ActivityPhase.EXCEPTION: EXCEPTION_SUFFIX,
        }[event.phase]
        self.write(event.operation_name + suffix, event)

    @contextmanager
    def start_activity(
        self, operation_name: str, tags: Iterable[Tag] = ()
    ) -> Iterator[list[Tag]]:
        """Trace the enclosed block as one activity.

        Yields the (mutable) tag list so the block can add tags discovered
        while it runs; they are included in the Stop/Exception event.
        """
        tag_list = list(tags)
        self.write_activity(
            ActivityEvent(operation_name, ActivityPhase.START, tuple(tag_list))
        )
        started = time.perf_counter()
        try:
            yield tag_list
        except Exception as e:
            self.write_activity(
                ActivityEvent(
                    operation_name,
                    ActivityPhase.EXCEPTION,
                    tuple(tag_list),
                    timedelta(seconds=time.perf_counter() - started),
                    exception=f"{type(e).__name__}: {e}",
                )
            )
            raise
        self.write_activity(
            ActivityEvent(
                operation_name,
                ActivityPhase.STOP,
                tuple(tag_list),
                timedelta(seconds=time.perf_counter() - started),
            )
        )


class DiagnosticHub:
    """Process-wide set of diagnostic sources, keyed by name."""

    def __init__(self):
        self._sources: dict[str, DiagnosticSource] = {}
        self._callbacks: list[SourceCallback] = []
        self._lock = threading.Lock()

    def get_source(self, name: str) -> DiagnosticSource:
        """Get the source called ``name``, creating it on first use."""
        with self._lock:
            source = self._sources.get(name)
            if source is not None:
                return source
            source = DiagnosticSource(name)
            self._sources[name] = source
            callbacks = list(self._callbacks)

        logger.info("Diagnostic source created: %s", name)
        for callback in callbacks:
            self._notify(callback, source)
        return source

    def find_source(self, name: str) -> DiagnosticSource | None:
        """Get the source called ``name`` if it already exists."""
        with self._lock:
            return self._sources.get(name)

    def sources(self) -> list[DiagnosticSource]:
        with self._lock:
            return list(self._sources.values())

    def subscribe(self, callback: SourceCallback) -> Subscription:
        """Call ``callback`` for every existing and future source."""
        with self._lock:
            self._callbacks.append(callback)
            existing = list(self._sources.values())

        for source in existing:
            self._notify(callback, source)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._callbacks:
                    self._callbacks.remove(callback)

        return Subscription(unsubscribe)

    def _notify(self, callback: SourceCallback, source: DiagnosticSource) -> None:
        try:
            callback(source)
        except Exception:
            logger.exception("Error in source callback for %s", source.name)
