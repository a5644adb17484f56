"""Metric rule data models."""

from dataclasses import dataclass
from enum import Enum


class MetricKind(str, Enum):
    """Kind of Prometheus metric a rule updates."""

    COUNTER = "counter"
    HISTOGRAM = "histogram"


class ValueSource(str, Enum):
    """Where the recorded value comes from."""

    EVENT_DURATION = "event_duration"  # seconds, observed on a histogram
    CONSTANT_ONE = "constant_one"  # counter increment


@dataclass(frozen=True)
class MetricDefinition:
    """Name, help text, kind and label dimensions of a registry metric."""

    name: str
    documentation: str
    kind: MetricKind
    label_names: tuple[str, ...] = ()


@dataclass(frozen=True)
class MetricRule:
    """How one operation name updates one metric.

    ``tag_keys[i]`` is the activity tag whose value fills
    ``metric.label_names[i]``.
    """

    operation_name: str
    metric: MetricDefinition
    value_source: ValueSource
    tag_keys: tuple[str, ...] = ()

    @property
    def metric_name(self) -> str:
        return self.metric.name

    @property
    def metric_kind(self) -> MetricKind:
        return self.metric.kind
