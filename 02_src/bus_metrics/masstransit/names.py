"""MassTransit diagnostic operation names and activity tag keys."""


class OperationName:
    """Operation names MassTransit gives its traced activities."""

    class Transport:
        SEND = "Transport.Send"
        RECEIVE = "Transport.Receive"

    class Consumer:
        CONSUME = "Consumer.Consume"
        HANDLE = "Consumer.Handle"

    class Saga:
        SEND = "Saga.Send"
        SEND_QUERY = "Saga.SendQuery"
        INITIATE = "Saga.Initiate"
        ORCHESTRATE = "Saga.Orchestrate"
        OBSERVE = "Saga.Observe"
        RAISE_EVENT = "Saga.RaiseEvent"

    class Courier:
        EXECUTE = "Courier.Execute"
        COMPENSATE = "Courier.Compensate"


class DiagnosticHeaders:
    """Tag keys MassTransit attaches to its activities."""

    MESSAGE_ID = "message-id"
    CONVERSATION_ID = "conversation-id"
    CORRELATION_ID = "correlation-id"
    MESSAGE_TYPES = "message-types"
    CONSUMER_TYPE = "consumer-type"
    SAGA_TYPE = "saga-type"
    BEGIN_STATE = "begin-state"
    END_STATE = "end-state"
