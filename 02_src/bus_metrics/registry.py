"""Metric registry wrapping a prometheus_client CollectorRegistry."""

import threading
from typing import Sequence

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

from .logging_config import get_logger

logger = get_logger(__name__)


class CounterSeries:
    """One label-specific series of a counter."""

    def __init__(self, child: Counter):
        self._child = child

    def increment(self, amount: float = 1) -> None:
        self._child.inc(amount)


class HistogramSeries:
    """One label-specific series of a histogram."""

    def __init__(self, child: Histogram):
        self._child = child

    def observe(self, seconds: float) -> None:
        self._child.observe(seconds)


class _MetricHandle:
    series_cls: type

    def __init__(self, metric, name: str, label_names: tuple[str, ...]):
        self._metric = metric
        self.name = name
        self.label_names = label_names

    def with_labels(self, *values: str):
        """Select (lazily creating) the series for the given label values."""
        if not self.label_names and not values:
            return self.series_cls(self._metric)
        return self.series_cls(self._metric.labels(*values))


class CounterHandle(_MetricHandle):
    """Handle to a registered counter."""

    series_cls = CounterSeries


class HistogramHandle(_MetricHandle):
    """Handle to a registered histogram."""

    series_cls = HistogramSeries


class MetricRegistry:
    """Process-wide owner of the counters and histograms bus-metrics updates.

    Metrics are created on first request and reused afterwards. Asking for an
    existing name with a different kind or label set raises ValueError.
    ``close()`` unregisters everything this registry created.
    """

    def __init__(self, collector_registry: CollectorRegistry | None = None):
        self._registry = collector_registry or CollectorRegistry()
        self._handles: dict[str, _MetricHandle] = {}
        self._lock = threading.Lock()

    @property
    def collector_registry(self) -> CollectorRegistry:
        return self._registry

    def get_or_create_counter(
        self, name: str, documentation: str, label_names: Sequence[str] = ()
    ) -> CounterHandle:
        return self._get_or_create(CounterHandle, Counter, name, documentation, label_names)

    def get_or_create_histogram(
        self, name: str, documentation: str, label_names: Sequence[str] = ()
    ) -> HistogramHandle:
        return self._get_or_create(
            HistogramHandle, Histogram, name, documentation, label_names
        )

    def _get_or_create(self, handle_cls, metric_cls, name, documentation, label_names):
        label_names = tuple(label_names)
        with self._lock:
            handle = self._handles.get(name)
            if handle is None:
                metric = metric_cls(
                    name, documentation, labelnames=label_names, registry=self._registry
                )
                handle = handle_cls(metric, name, label_names)
                self._handles[name] = handle
                logger.debug("Registered %s %s%s", metric_cls.__name__, name, label_names)
                return handle

        if not isinstance(handle, handle_cls):
            raise ValueError(
                f"Metric {name} is already registered as a different kind"
            )
        if handle.label_names != label_names:
            raise ValueError(
                f"Metric {name} is already registered with labels {handle.label_names}"
            )
        return handle

    def metric_names(self) -> list[str]:
        with self._lock:
            return sorted(self._handles)

    def exposition(self) -> tuple[bytes, str]:
        """Render all metrics in the Prometheus text format."""
        return generate_latest(self._registry), CONTENT_TYPE_LATEST

    def close(self) -> None:
        """Unregister every metric created through this registry."""
        with self._lock:
            handles = list(self._handles.values())
            self._handles.clear()
        for handle in handles:
            try:
                self._registry.unregister(handle._metric)
            except KeyError:
                logger.warning("Metric %s was already unregistered", handle.name)
