"""Diagnostics module."""

from .handler import DiagnosticListenerHandler
from .source import (
    DiagnosticHub,
    DiagnosticObserver,
    DiagnosticSource,
    IDiagnosticSource,
    Subscription,
)
from .subscriber import DiagnosticSubscriber

__all__ = [
    "DiagnosticHub",
    "DiagnosticListenerHandler",
    "DiagnosticObserver",
    "DiagnosticSource",
    "DiagnosticSubscriber",
    "IDiagnosticSource",
    "Subscription",
]
