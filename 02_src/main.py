"""Main entry point for bus-metrics."""

from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from bus_metrics.api import create_fastapi_app
from bus_metrics.app import Application
from bus_metrics.config import Settings
from bus_metrics.logging_config import setup_logging


def main():
    """Run the application."""
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env")

    settings = Settings.from_env()
    setup_logging(settings)

    app = create_fastapi_app(Application(settings))

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
