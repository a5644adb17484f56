"""Application bootstrap and lifecycle management."""

from typing import Protocol

from prometheus_client import CollectorRegistry

from .config import Settings
from .diagnostics import DiagnosticHub, DiagnosticSubscriber
from .logging_config import get_logger
from .masstransit import MassTransitListenerHandler
from .registry import MetricRegistry

logger = get_logger(__name__)


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...

    @property
    def settings(self) -> Settings: ...

    @property
    def hub(self) -> DiagnosticHub: ...

    @property
    def registry(self) -> MetricRegistry: ...


class Application:
    """Main application bootstrap."""

    def __init__(
        self,
        settings: Settings | None = None,
        collector_registry: CollectorRegistry | None = None,
    ):
        self._settings = settings or Settings.from_env()
        self._collector_registry = collector_registry

        # Components (will be initialized in start())
        self._registry: MetricRegistry | None = None
        self._hub: DiagnosticHub | None = None
        self._handler: MassTransitListenerHandler | None = None
        self._subscriber: DiagnosticSubscriber | None = None

    @property
    def settings(self) -> Settings:
        return self._settings

    async def start(self) -> None:
        """Initialize components in dependency order."""
        if self._subscriber is not None:
            return
        logger.info("Starting application")

        # 1. MetricRegistry (no dependencies)
        self._registry = MetricRegistry(self._collector_registry)
        logger.info("Metric registry initialized")

        # 2. DiagnosticHub (no dependencies)
        self._hub = DiagnosticHub()

        # 3. Handler (depends on MetricRegistry)
        self._handler = MassTransitListenerHandler(
            self._settings.source_name, self._registry
        )

        # 4. Subscriber (depends on Handler + Hub)
        self._subscriber = DiagnosticSubscriber([self._handler])
        self._subscriber.subscribe(self._hub)
        # Sources reported over HTTP must already exist
        self._hub.get_source(self._settings.source_name)
        logger.info(
            "Listening for diagnostic source %s", self._settings.source_name
        )

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        if self._subscriber:
            self._subscriber.dispose()
            self._subscriber = None
        self._handler = None
        self._hub = None
        if self._registry:
            self._registry.close()
            self._registry = None
            logger.info("Metric registry closed")

    @property
    def hub(self) -> DiagnosticHub:
        """Get diagnostic hub instance."""
        if not self._hub:
            raise RuntimeError("Application not started")
        return self._hub

    @property
    def registry(self) -> MetricRegistry:
        """Get metric registry instance."""
        if not self._registry:
            raise RuntimeError("Application not started")
        return self._registry
