"""Static rule tables mapping MassTransit operations to Prometheus metrics.

``STOP_RULES`` applies when an activity finishes successfully,
``EXCEPTION_RULES`` when it fails. Operations in neither table are ignored.
"""

from types import MappingProxyType
from typing import Iterable, Mapping

from ..models import MetricDefinition, MetricKind, MetricRule, ValueSource
from .names import DiagnosticHeaders, OperationName

SENT_MESSAGES = MetricDefinition(
    "masstransit_messages_sent_total",
    "The time to send a message, in seconds.",
    MetricKind.HISTOGRAM,
)
SENT_MESSAGE_ERRORS = MetricDefinition(
    "masstransit_messages_sent_errors_total",
    "The number of message send failures.",
    MetricKind.COUNTER,
)
RECEIVED_MESSAGES = MetricDefinition(
    "masstransit_messages_received_total",
    "The time to receive a message, in seconds.",
    MetricKind.HISTOGRAM,
    ("message",),
)
RECEIVED_MESSAGE_ERRORS = MetricDefinition(
    "masstransit_messages_received_errors_total",
    "The number of message receive failures.",
    MetricKind.COUNTER,
)
CONSUMED_MESSAGES = MetricDefinition(
    "masstransit_messages_consumed_total",
    "The time to consume a message, in seconds.",
    MetricKind.HISTOGRAM,
    ("consumer",),
)
CONSUMED_MESSAGE_ERRORS = MetricDefinition(
    "masstransit_messages_consumed_errors_total",
    "The number of message processing failures.",
    MetricKind.COUNTER,
)
SAGA_RAISED_EVENTS = MetricDefinition(
    "masstransit_saga_raised_events_total",
    "The number of events raised on sagas, by state transition.",
    MetricKind.COUNTER,
    ("saga", "from", "to"),
)
SAGA_SENT_EVENTS = MetricDefinition(
    "masstransit_saga_sent_events_total",
    "The number of events sent to sagas.",
    MetricKind.COUNTER,
    ("saga",),
)
SAGA_SENT_QUERIES = MetricDefinition(
    "masstransit_saga_sent_queries_total",
    "The number of queries sent to saga repositories.",
    MetricKind.COUNTER,
)

# Recognized operations with no metric attached yet
RESERVED_OPERATIONS = frozenset(
    {
        OperationName.Saga.INITIATE,
        OperationName.Saga.ORCHESTRATE,
        OperationName.Saga.OBSERVE,
        OperationName.Courier.EXECUTE,
        OperationName.Courier.COMPENSATE,
    }
)


def build_rule_table(rules: Iterable[MetricRule]) -> Mapping[str, MetricRule]:
    """Index rules by operation name, rejecting inconsistent tables.

    Raises:
        ValueError: on a duplicate operation name, a metric name reused with a
            different definition, a value source that does not fit the metric
            kind, or tag keys that do not line up with the label names.
    """
    table: dict[str, MetricRule] = {}
    definitions: dict[str, MetricDefinition] = {}

    for rule in rules:
        if rule.operation_name in table:
            raise ValueError(f"Duplicate rule for operation {rule.operation_name}")

        known = definitions.setdefault(rule.metric_name, rule.metric)
        if known != rule.metric:
            raise ValueError(f"Conflicting definitions for metric {rule.metric_name}")

        expected_kind = {
            ValueSource.EVENT_DURATION: MetricKind.HISTOGRAM,
            ValueSource.CONSTANT_ONE: MetricKind.COUNTER,
        }[rule.value_source]
        if rule.metric_kind != expected_kind:
            raise ValueError(
                f"{rule.operation_name}: {rule.value_source.value} needs a "
                f"{expected_kind.value}, got {rule.metric_kind.value}"
            )

        if len(rule.tag_keys) != len(rule.metric.label_names):
            raise ValueError(
                f"{rule.operation_name}: tag keys {rule.tag_keys} do not match "
                f"labels {rule.metric.label_names}"
            )

        table[rule.operation_name] = rule

    return MappingProxyType(table)


def build_error_table(rules: Iterable[MetricRule]) -> Mapping[str, MetricRule]:
    """Like build_rule_table, but only unlabeled +1 counters are allowed."""
    rules = list(rules)
    for rule in rules:
        if (
            rule.value_source is not ValueSource.CONSTANT_ONE
            or rule.metric.label_names
            or rule.tag_keys
        ):
            raise ValueError(
                f"{rule.operation_name}: error rules must be unlabeled counters"
            )
    return build_rule_table(rules)


def error_rule(operation_name: str, metric: MetricDefinition) -> MetricRule:
    return MetricRule(operation_name, metric, ValueSource.CONSTANT_ONE)


STOP_RULES = build_rule_table(
    [
        MetricRule(
            OperationName.Transport.SEND,
            SENT_MESSAGES,
            ValueSource.EVENT_DURATION,
        ),
        MetricRule(
            OperationName.Transport.RECEIVE,
            RECEIVED_MESSAGES,
            ValueSource.EVENT_DURATION,
            (DiagnosticHeaders.MESSAGE_TYPES,),
        ),
        MetricRule(
            OperationName.Consumer.CONSUME,
            CONSUMED_MESSAGES,
            ValueSource.EVENT_DURATION,
            (DiagnosticHeaders.CONSUMER_TYPE,),
        ),
        # Handler activities usually carry no consumer type and land in consumer=""
        MetricRule(
            OperationName.Consumer.HANDLE,
            CONSUMED_MESSAGES,
            ValueSource.EVENT_DURATION,
            (DiagnosticHeaders.CONSUMER_TYPE,),
        ),
        MetricRule(
            OperationName.Saga.SEND,
            SAGA_SENT_EVENTS,
            ValueSource.CONSTANT_ONE,
            (DiagnosticHeaders.SAGA_TYPE,),
        ),
        MetricRule(
            OperationName.Saga.SEND_QUERY,
            SAGA_SENT_QUERIES,
            ValueSource.CONSTANT_ONE,
        ),
        MetricRule(
            OperationName.Saga.RAISE_EVENT,
            SAGA_RAISED_EVENTS,
            ValueSource.CONSTANT_ONE,
            (
                DiagnosticHeaders.SAGA_TYPE,
                DiagnosticHeaders.BEGIN_STATE,
                DiagnosticHeaders.END_STATE,
            ),
        ),
    ]
)

EXCEPTION_RULES = build_error_table(
    [
        error_rule(OperationName.Transport.SEND, SENT_MESSAGE_ERRORS),
        error_rule(OperationName.Transport.RECEIVE, RECEIVED_MESSAGE_ERRORS),
        error_rule(OperationName.Consumer.CONSUME, CONSUMED_MESSAGE_ERRORS),
    ]
)
