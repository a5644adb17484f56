"""Wires listener handlers to the diagnostic sources they are named after."""

from typing import Any, Iterable

from ..logging_config import get_logger
from ..models import ActivityEvent, ActivityPhase
from .handler import DiagnosticListenerHandler
from .source import (
    EXCEPTION_SUFFIX,
    START_SUFFIX,
    STOP_SUFFIX,
    DiagnosticHub,
    DiagnosticSource,
    Subscription,
)

logger = get_logger(__name__)


class DiagnosticSubscriber:
    """Attaches each handler to the source whose name matches its ``source_name``.

    A handler is attached at most once per source, whether the source existed
    before ``subscribe()`` or appears later.
    """

    def __init__(self, handlers: Iterable[DiagnosticListenerHandler]):
        self._handlers = list(handlers)
        self._hub_subscription: Subscription | None = None
        self._subscriptions: list[Subscription] = []
        self._attached: set[tuple[str, int]] = set()

    def subscribe(self, hub: DiagnosticHub) -> None:
        """Start listening to ``hub`` (existing and future sources)."""
        if self._hub_subscription is not None:
            return
        self._hub_subscription = hub.subscribe(self._on_source)

    def _on_source(self, source: DiagnosticSource) -> None:
        for handler in self._handlers:
            key = (source.name, id(handler))
            if handler.source_name != source.name or key in self._attached:
                continue
            self._attached.add(key)
            self._subscriptions.append(source.subscribe(_HandlerObserver(handler)))
            logger.info(
                "Subscribed %s to diagnostic source %s",
                type(handler).__name__,
                source.name,
            )

    def dispose(self) -> None:
        """Detach every handler from every source."""
        if self._hub_subscription is not None:
            self._hub_subscription.dispose()
            self._hub_subscription = None
        for subscription in self._subscriptions:
            subscription.dispose()
        self._subscriptions.clear()
        self._attached.clear()


class _HandlerObserver:
    """Routes raw source events to a handler by activity phase.

    An activity whose event-name suffix disagrees with its phase is dropped.
    """

    def __init__(self, handler: DiagnosticListenerHandler):
        self._handler = handler
        self._callbacks = {
            ActivityPhase.START: (START_SUFFIX, handler.on_start_activity),
            ActivityPhase.STOP: (STOP_SUFFIX, handler.on_stop_activity),
            ActivityPhase.EXCEPTION: (EXCEPTION_SUFFIX, handler.on_exception),
        }

    def __call__(self, event_name: str, payload: Any) -> None:
        if not isinstance(payload, ActivityEvent):
            self._handler.on_custom(event_name, payload)
            return

        suffix, callback = self._callbacks[payload.phase]
        if not event_name.endswith(suffix):
            logger.debug(
                "Dropping %s: payload phase is %s", event_name, payload.phase
            )
            return
        callback(payload)
