"""Base class for components that react to one diagnostic source."""

from typing import Any

from ..models import ActivityEvent


class DiagnosticListenerHandler:
    """Receives the activity callbacks of the source named ``source_name``.

    Every callback is a no-op by default; subclasses override what they need.
    """

    def __init__(self, source_name: str):
        self.source_name = source_name

    def on_start_activity(self, event: ActivityEvent) -> None:
        pass

    def on_stop_activity(self, event: ActivityEvent) -> None:
        pass

    def on_exception(self, event: ActivityEvent) -> None:
        pass

    def on_custom(self, event_name: str, payload: Any) -> None:
        pass
