"""Pytest configuration and fixtures."""

import sys
from datetime import timedelta
from pathlib import Path

import pytest
import pytest_asyncio
from prometheus_client import CollectorRegistry

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest.fixture
def collector_registry():
    """Fresh prometheus_client registry, isolated from the global one."""
    return CollectorRegistry()


@pytest.fixture
def metric_registry(collector_registry):
    """Create MetricRegistry on the isolated collector registry."""
    from bus_metrics.registry import MetricRegistry

    registry = MetricRegistry(collector_registry)
    yield registry
    registry.close()


@pytest.fixture
def handler(metric_registry):
    """Create MassTransit handler bound to the default source name."""
    from bus_metrics.masstransit import MassTransitListenerHandler

    return MassTransitListenerHandler("MassTransit", metric_registry)


@pytest.fixture
def hub():
    """Create DiagnosticHub."""
    from bus_metrics.diagnostics import DiagnosticHub

    return DiagnosticHub()


@pytest.fixture
def settings(tmp_path):
    """Settings that log into a temporary directory."""
    from bus_metrics.config import Settings

    return Settings(log_file=str(tmp_path / "app.log"))


@pytest_asyncio.fixture
async def application(settings, collector_registry):
    """Started Application on an isolated registry."""
    from bus_metrics.app import Application

    app = Application(settings=settings, collector_registry=collector_registry)
    await app.start()
    yield app
    await app.stop()


@pytest.fixture
def make_event():
    """Build ActivityEvents with short keyword arguments."""
    from bus_metrics.models import ActivityEvent, ActivityPhase

    def _make(operation_name, phase=ActivityPhase.STOP, tags=(), seconds=0.0, exception=None):
        return ActivityEvent(
            operation_name=operation_name,
            phase=phase,
            tags=tuple(tags),
            duration=timedelta(seconds=seconds),
            exception=exception,
        )

    return _make


@pytest.fixture
def count_updates(collector_registry):
    """Sum of every counter increment and histogram observation count."""

    def _count() -> float:
        total = 0.0
        for family in collector_registry.collect():
            for sample in family.samples:
                if family.type == "counter" and sample.name.endswith("_total"):
                    total += sample.value
                elif family.type == "histogram" and sample.name.endswith("_count"):
                    total += sample.value
        return total

    return _count
