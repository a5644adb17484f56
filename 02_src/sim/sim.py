"""SIM implementation - synthetic MassTransit traffic for local testing."""

import asyncio
import random
from typing import Protocol

import httpx

from bus_metrics.logging_config import get_logger
from bus_metrics.masstransit import DiagnosticHeaders, OperationName

logger = get_logger(__name__)

MESSAGE_TYPES = ["OrderPlaced", "OrderPaid", "OrderShipped"]
CONSUMER_TYPES = ["OrderConsumer", "BillingConsumer", "ShippingConsumer"]
SAGA_TRANSITIONS = [
    ("Initial", "Placed"),
    ("Placed", "Paid"),
    ("Paid", "Shipped"),
]
SAGA_TYPE = "OrderStateMachine"


class ISim(Protocol):
    """Generate synthetic bus activity against the API."""

    async def start(self) -> None:
        """Start scenario in the background."""
        ...

    async def stop(self) -> None:
        """Stop scenario."""
        ...


class Sim:
    """SIM posting one order lifecycle per round to /api/activities."""

    def __init__(
        self,
        api_url: str = "http://localhost:8000",
        source_name: str = "MassTransit",
        rounds: int = 10,
        failure_rate: float = 0.1,
        client: httpx.AsyncClient | None = None,
    ):
        self._api_url = api_url
        self._source_name = source_name
        self._rounds = rounds
        self._failure_rate = failure_rate
        self._client = client
        self._owns_client = client is None
        self._running = False
        self._task: asyncio.Task | None = None

    async def start(self) -> None:
        """Start scenario in the background."""
        if self._running:
            return

        self._running = True
        if self._client is None:
            self._client = httpx.AsyncClient()

        self._task = asyncio.create_task(self._run_scenario())

    async def stop(self) -> None:
        """Stop scenario."""
        self._running = False

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def wait(self) -> None:
        """Wait until the scenario finishes or is stopped."""
        if self._task:
            try:
                await self._task
            except asyncio.CancelledError:
                pass

    async def _run_scenario(self) -> None:
        try:
            for i in range(self._rounds):
                if not self._running:
                    break
                await self.run_round(i)
                await asyncio.sleep(random.uniform(0.5, 2))
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.error("SIM scenario error: %s", e)
        finally:
            self._running = False

    async def run_round(self, index: int = 0) -> int:
        """Report one order's worth of activities. Returns how many were accepted."""
        message_type = MESSAGE_TYPES[index % len(MESSAGE_TYPES)]
        consumer_type = CONSUMER_TYPES[index % len(CONSUMER_TYPES)]
        begin_state, end_state = SAGA_TRANSITIONS[index % len(SAGA_TRANSITIONS)]

        activities = [
            (OperationName.Transport.SEND, []),
            (
                OperationName.Transport.RECEIVE,
                [[DiagnosticHeaders.MESSAGE_TYPES, message_type]],
            ),
            (
                OperationName.Consumer.CONSUME,
                [[DiagnosticHeaders.CONSUMER_TYPE, consumer_type]],
            ),
            (OperationName.Saga.SEND, [[DiagnosticHeaders.SAGA_TYPE, SAGA_TYPE]]),
            (
                OperationName.Saga.RAISE_EVENT,
                [
                    [DiagnosticHeaders.SAGA_TYPE, SAGA_TYPE],
                    [DiagnosticHeaders.BEGIN_STATE, begin_state],
                    [DiagnosticHeaders.END_STATE, end_state],
                ],
            ),
        ]

        accepted = 0
        for operation_name, tags in activities:
            failed = random.random() < self._failure_rate
            if await self._send_activity(
                operation_name,
                "exception" if failed else "stop",
                tags,
                duration_seconds=random.uniform(0.001, 0.5),
                exception="TimeoutException: simulated" if failed else None,
            ):
                accepted += 1
        return accepted

    async def _send_activity(
        self,
        operation_name: str,
        phase: str,
        tags: list,
        duration_seconds: float,
        exception: str | None = None,
    ) -> bool:
        """Send an activity via HTTP API."""
        if not self._client:
            return False

        try:
            response = await self._client.post(
                f"{self._api_url}/api/activities",
                json={
                    "source": self._source_name,
                    "operation_name": operation_name,
                    "phase": phase,
                    "tags": tags,
                    "duration_seconds": duration_seconds,
                    "exception": exception,
                },
                timeout=10.0,
            )
        except httpx.HTTPError as e:
            logger.error("SIM: Failed to send %s: %s", operation_name, e)
            return False

        if response.status_code == 200:
            logger.info("SIM: %s %s (%.3fs)", operation_name, phase, duration_seconds)
            return True

        logger.error("SIM: Error %s: %s", response.status_code, response.text)
        return False
