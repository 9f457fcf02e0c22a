"""
config/settings.py
──────────────────
Runtime configuration loaded from environment variables.

Only the entry point reads these; the engine itself takes no settings.
"""
import os
from dataclasses import dataclass


@dataclass
class Settings:
    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_FORMAT: str = os.getenv(
        "LOG_FORMAT", "%(asctime)s %(levelname)s [%(name)s] %(message)s"
    )

    # CLI output
    JSON_INDENT: int = int(os.getenv("JSON_INDENT", "2"))


settings = Settings()
