"""Project-level configuration and path helpers."""

import os
from dataclasses import dataclass
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_LOG_PATH = LOGS_DIR / "app.log"

DEFAULT_SOURCE_NAME = "MassTransit"


@dataclass
class Settings:
    """Runtime settings resolved from the environment."""

    log_level: str = "INFO"
    log_file: str = str(DEFAULT_LOG_PATH)
    api_host: str = "localhost"
    api_port: int = 8000
    source_name: str = DEFAULT_SOURCE_NAME

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables, falling back to defaults."""
        return cls(
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE", str(DEFAULT_LOG_PATH)),
            api_host=os.getenv("API_HOST", "localhost"),
            api_port=int(os.getenv("API_PORT", "8000")),
            source_name=os.getenv("DIAGNOSTIC_SOURCE", DEFAULT_SOURCE_NAME),
        )

    @property
    def api_url(self) -> str:
        return f"http://{self.api_host}:{self.api_port}"
