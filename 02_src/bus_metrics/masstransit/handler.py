"""Translates MassTransit activities into Prometheus metric updates."""

from typing import Mapping

from ..diagnostics import DiagnosticListenerHandler
from ..logging_config import get_logger
from ..models import ActivityEvent, ActivityPhase, MetricRule, ValueSource
from ..registry import MetricRegistry
from .rules import EXCEPTION_RULES, STOP_RULES

logger = get_logger(__name__)

ABSENT_LABEL = ""


def extract_labels(event: ActivityEvent, tag_keys: tuple[str, ...]) -> tuple[str, ...]:
    """Return the first matching tag value per key, ABSENT_LABEL where missing."""
    values = []
    for key in tag_keys:
        value = event.tag(key)
        values.append(ABSENT_LABEL if value is None else value)
    return tuple(values)


class MassTransitListenerHandler(DiagnosticListenerHandler):
    """Updates one metric per finished activity according to the rule tables.

    Holds no mutable state of its own, so a single instance can be driven from
    any number of threads. Registry failures are logged and dropped: metrics
    collection must never break the message flow it observes.
    """

    def __init__(
        self,
        source_name: str,
        registry: MetricRegistry,
        stop_rules: Mapping[str, MetricRule] = STOP_RULES,
        exception_rules: Mapping[str, MetricRule] = EXCEPTION_RULES,
    ):
        super().__init__(source_name)
        self._registry = registry
        self._rules = {
            ActivityPhase.STOP: stop_rules,
            ActivityPhase.EXCEPTION: exception_rules,
        }

    def classify(self, event: ActivityEvent) -> MetricRule | None:
        """Rule for this event's phase and operation name, if any."""
        table = self._rules.get(event.phase)
        if table is None:
            return None
        return table.get(event.operation_name)

    def on_start_activity(self, event: ActivityEvent) -> None:
        pass

    def on_stop_activity(self, event: ActivityEvent) -> None:
        self._handle(event)

    def on_exception(self, event: ActivityEvent) -> None:
        self._handle(event)

    def _handle(self, event: ActivityEvent) -> None:
        rule = self.classify(event)
        if rule is None:
            return
        try:
            self.apply(rule, event)
        except Exception:
            logger.warning(
                "Failed to record %s for %s",
                rule.metric_name,
                event.operation_name,
                exc_info=True,
                extra={"context": {"source": self.source_name, "phase": event.phase}},
            )

    def apply(self, rule: MetricRule, event: ActivityEvent) -> None:
        """Perform the single registry mutation ``rule`` prescribes."""
        labels = extract_labels(event, rule.tag_keys)
        metric = rule.metric

        if rule.value_source is ValueSource.EVENT_DURATION:
            histogram = self._registry.get_or_create_histogram(
                metric.name, metric.documentation, metric.label_names
            )
            histogram.with_labels(*labels).observe(event.duration_seconds)
        else:
            counter = self._registry.get_or_create_counter(
                metric.name, metric.documentation, metric.label_names
            )
            counter.with_labels(*labels).increment()
