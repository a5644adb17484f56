"""Prometheus metrics for MassTransit diagnostic activities."""

from .app import Application, IApplication
from .config import Settings
from .diagnostics import (
    DiagnosticHub,
    DiagnosticListenerHandler,
    DiagnosticSource,
    DiagnosticSubscriber,
)
from .masstransit import (
    EXCEPTION_RULES,
    STOP_RULES,
    DiagnosticHeaders,
    MassTransitListenerHandler,
    OperationName,
)
from .models import (
    ActivityEvent,
    ActivityPhase,
    MetricDefinition,
    MetricKind,
    MetricRule,
    ValueSource,
)
from .registry import CounterHandle, HistogramHandle, MetricRegistry

__all__ = [
    # Application
    "Application",
    "IApplication",
    "Settings",
    # Models
    "ActivityEvent",
    "ActivityPhase",
    "MetricDefinition",
    "MetricKind",
    "MetricRule",
    "ValueSource",
    # Components
    "MetricRegistry",
    "CounterHandle",
    "HistogramHandle",
    "DiagnosticHub",
    "DiagnosticSource",
    "DiagnosticListenerHandler",
    "DiagnosticSubscriber",
    "MassTransitListenerHandler",
    # MassTransit names and rules
    "OperationName",
    "DiagnosticHeaders",
    "STOP_RULES",
    "EXCEPTION_RULES",
]
