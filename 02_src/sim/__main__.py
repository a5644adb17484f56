"""Run the SIM against a running bus-metrics API."""

import asyncio
from pathlib import Path

from dotenv import load_dotenv

from bus_metrics.config import Settings
from bus_metrics.logging_config import setup_logging

from .sim import Sim


async def run() -> None:
    settings = Settings.from_env()
    sim = Sim(api_url=settings.api_url, source_name=settings.source_name)
    await sim.start()
    try:
        await sim.wait()
    finally:
        await sim.stop()


if __name__ == "__main__":
    load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")
    setup_logging(Settings.from_env())
    asyncio.run(run())
