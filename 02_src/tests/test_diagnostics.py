"""Tests for diagnostic sources, hub and subscriber."""

import logging

import pytest

from bus_metrics.diagnostics import (
    DiagnosticListenerHandler,
    DiagnosticSource,
    DiagnosticSubscriber,
)
from bus_metrics.models import ActivityEvent, ActivityPhase


class RecordingHandler(DiagnosticListenerHandler):
    """Handler that records every callback."""

    def __init__(self, source_name: str):
        super().__init__(source_name)
        self.calls = []

    def on_start_activity(self, event):
        self.calls.append(("start", event))

    def on_stop_activity(self, event):
        self.calls.append(("stop", event))

    def on_exception(self, event):
        self.calls.append(("exception", event))

    def on_custom(self, event_name, payload):
        self.calls.append(("custom", event_name))


class TestDiagnosticSource:
    """Tests for DiagnosticSource."""

    def test_write_delivers_in_order(self):
        """Test that observers receive events in subscription order."""
        source = DiagnosticSource("MassTransit")
        calls = []

        source.subscribe(lambda name, payload: calls.append(("o1", name)))
        source.subscribe(lambda name, payload: calls.append(("o2", name)))
        source.write("Custom.Event", {})

        assert calls == [("o1", "Custom.Event"), ("o2", "Custom.Event")]

    def test_observer_error_isolated(self, caplog):
        """Test that one failing observer doesn't affect others."""
        caplog.set_level(logging.ERROR)
        source = DiagnosticSource("MassTransit")
        calls = []

        def failing(name, payload):
            calls.append("failing")
            raise RuntimeError("Test error")

        source.subscribe(failing)
        source.subscribe(lambda name, payload: calls.append("normal"))

        # Should not raise error
        source.write("Custom.Event", None)

        assert calls == ["failing", "normal"]
        assert "Error in diagnostic observer" in caplog.text

    def test_dispose_detaches(self):
        """Test that disposed observers stop receiving events."""
        source = DiagnosticSource("MassTransit")
        calls = []

        subscription = source.subscribe(lambda name, payload: calls.append(name))
        assert source.is_enabled()

        subscription.dispose()
        subscription.dispose()
        source.write("Custom.Event", None)

        assert calls == []
        assert not source.is_enabled()

    @pytest.mark.parametrize(
        "phase, event_name",
        [
            (ActivityPhase.START, "Transport.Send.Start"),
            (ActivityPhase.STOP, "Transport.Send.Stop"),
            (ActivityPhase.EXCEPTION, "Transport.Send.Exception"),
        ],
    )
    def test_write_activity_names(self, phase, event_name):
        """Test that activity events are named after their phase."""
        source = DiagnosticSource("MassTransit")
        calls = []
        source.subscribe(lambda name, payload: calls.append((name, payload)))
        event = ActivityEvent("Transport.Send", phase)

        source.write_activity(event)

        assert calls == [(event_name, event)]


class TestStartActivity:
    """Tests for the activity context manager."""

    def test_success_writes_start_and_stop(self):
        """Test that a completed block writes Start then Stop."""
        source = DiagnosticSource("MassTransit")
        calls = []
        source.subscribe(lambda name, payload: calls.append((name, payload)))

        with source.start_activity("Transport.Send", [("message-id", "1")]) as tags:
            tags.append(("message-types", "OrderPlaced"))

        assert [name for name, _ in calls] == [
            "Transport.Send.Start",
            "Transport.Send.Stop",
        ]
        stop = calls[1][1]
        assert stop.phase == ActivityPhase.STOP
        assert stop.duration_seconds >= 0
        assert stop.tag("message-types") == "OrderPlaced"
        assert stop.exception is None

    def test_failure_writes_exception_and_reraises(self):
        """Test that a failing block writes Exception and propagates the error."""
        source = DiagnosticSource("MassTransit")
        calls = []
        source.subscribe(lambda name, payload: calls.append((name, payload)))

        with pytest.raises(ConnectionError):
            with source.start_activity("Transport.Send"):
                raise ConnectionError("broker down")

        assert [name for name, _ in calls] == [
            "Transport.Send.Start",
            "Transport.Send.Exception",
        ]
        failed = calls[1][1]
        assert failed.phase == ActivityPhase.EXCEPTION
        assert failed.exception == "ConnectionError: broker down"


class TestDiagnosticHub:
    """Tests for DiagnosticHub."""

    def test_get_source_reuses_instance(self, hub):
        """Test that a name maps to one source."""
        assert hub.get_source("MassTransit") is hub.get_source("MassTransit")
        assert hub.get_source("Other") is not hub.get_source("MassTransit")
        assert len(hub.sources()) == 2

    def test_subscribe_sees_existing_and_future(self, hub):
        """Test that callbacks see sources created before and after subscribing."""
        seen = []
        hub.get_source("Before")

        hub.subscribe(lambda source: seen.append(source.name))
        hub.get_source("After")
        hub.get_source("After")

        assert seen == ["Before", "After"]

    def test_find_source_does_not_create(self, hub):
        """Test that find_source only returns existing sources."""
        assert hub.find_source("MassTransit") is None
        assert hub.sources() == []

        source = hub.get_source("MassTransit")

        assert hub.find_source("MassTransit") is source

    def test_unsubscribe(self, hub):
        """Test that disposed callbacks stop seeing new sources."""
        seen = []

        subscription = hub.subscribe(lambda source: seen.append(source.name))
        subscription.dispose()
        hub.get_source("After")

        assert seen == []


class TestDiagnosticSubscriber:
    """Tests for DiagnosticSubscriber."""

    def test_attaches_to_matching_source_only(self, hub):
        """Test that handlers only see their own source."""
        handler = RecordingHandler("MassTransit")
        DiagnosticSubscriber([handler]).subscribe(hub)

        hub.get_source("Other").write_activity(
            ActivityEvent("Transport.Send", ActivityPhase.STOP)
        )
        hub.get_source("MassTransit").write_activity(
            ActivityEvent("Transport.Send", ActivityPhase.STOP)
        )

        assert [kind for kind, _ in handler.calls] == ["stop"]

    def test_dispatch_by_suffix(self, hub):
        """Test that event names route to the matching callback."""
        handler = RecordingHandler("MassTransit")
        DiagnosticSubscriber([handler]).subscribe(hub)
        source = hub.get_source("MassTransit")

        with pytest.raises(RuntimeError):
            with source.start_activity("Consumer.Consume"):
                raise RuntimeError("boom")
        with source.start_activity("Consumer.Consume"):
            pass
        source.write("MassTransit.Custom", {"x": 1})
        source.write("Looks.Like.Stop", {"not": "an activity"})

        assert [kind for kind, _ in handler.calls] == [
            "start",
            "exception",
            "start",
            "stop",
            "custom",
            "custom",
        ]

    def test_phase_mismatch_dropped(self, hub):
        """Test that an activity whose name disagrees with its phase is ignored."""
        handler = RecordingHandler("MassTransit")
        DiagnosticSubscriber([handler]).subscribe(hub)
        source = hub.get_source("MassTransit")

        source.write(
            "Transport.Send.Stop",
            ActivityEvent("Transport.Send", ActivityPhase.EXCEPTION),
        )
        source.write(
            "Transport.Send.Start",
            ActivityEvent("Transport.Send", ActivityPhase.STOP),
        )
        source.write("Transport.Send", ActivityEvent("Transport.Send", ActivityPhase.STOP))

        assert handler.calls == []

    def test_mismatch_records_no_metric(self, hub, handler, collector_registry):
        """Test that a mislabelled failure does not update the success metric."""
        DiagnosticSubscriber([handler]).subscribe(hub)

        hub.get_source("MassTransit").write(
            "Transport.Send.Stop",
            ActivityEvent("Transport.Send", ActivityPhase.EXCEPTION),
        )

        assert list(collector_registry.collect()) == []

    def test_existing_source_attached(self, hub):
        """Test attaching to a source created before subscribe()."""
        source = hub.get_source("MassTransit")
        handler = RecordingHandler("MassTransit")
        DiagnosticSubscriber([handler]).subscribe(hub)

        source.write_activity(ActivityEvent("Saga.Send", ActivityPhase.STOP))

        assert len(handler.calls) == 1

    def test_attached_once(self, hub):
        """Test that subscribing twice does not double-deliver."""
        handler = RecordingHandler("MassTransit")
        subscriber = DiagnosticSubscriber([handler])
        subscriber.subscribe(hub)
        subscriber.subscribe(hub)

        hub.get_source("MassTransit").write_activity(
            ActivityEvent("Saga.Send", ActivityPhase.STOP)
        )

        assert len(handler.calls) == 1

    def test_dispose(self, hub):
        """Test that dispose() detaches handlers."""
        handler = RecordingHandler("MassTransit")
        subscriber = DiagnosticSubscriber([handler])
        subscriber.subscribe(hub)
        source = hub.get_source("MassTransit")

        subscriber.dispose()
        source.write_activity(ActivityEvent("Saga.Send", ActivityPhase.STOP))

        assert handler.calls == []
        assert not source.is_enabled()

    def test_handler_error_does_not_reach_writer(self, hub, caplog):
        """Test that a failing handler is isolated from the traced code."""
        caplog.set_level(logging.ERROR)

        class FailingHandler(DiagnosticListenerHandler):
            def on_stop_activity(self, event):
                raise RuntimeError("Test error")

        DiagnosticSubscriber([FailingHandler("MassTransit")]).subscribe(hub)

        with hub.get_source("MassTransit").start_activity("Transport.Send"):
            pass

        assert "Error in diagnostic observer" in caplog.text
