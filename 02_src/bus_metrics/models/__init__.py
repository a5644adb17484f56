"""Core data models for bus-metrics."""

from .activity import ActivityEvent, ActivityPhase, Tag
from .rules import MetricDefinition, MetricKind, MetricRule, ValueSource

__all__ = [
    # Activities
    "ActivityEvent",
    "ActivityPhase",
    "Tag",
    # Rules
    "MetricDefinition",
    "MetricKind",
    "MetricRule",
    "ValueSource",
]
