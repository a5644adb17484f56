"""MassTransit metrics module."""

from .handler import ABSENT_LABEL, MassTransitListenerHandler, extract_labels
from .names import DiagnosticHeaders, OperationName
from .rules import EXCEPTION_RULES, RESERVED_OPERATIONS, STOP_RULES, build_rule_table

__all__ = [
    "ABSENT_LABEL",
    "DiagnosticHeaders",
    "EXCEPTION_RULES",
    "MassTransitListenerHandler",
    "OperationName",
    "RESERVED_OPERATIONS",
    "STOP_RULES",
    "build_rule_table",
    "extract_labels",
]
