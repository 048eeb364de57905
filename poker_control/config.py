"""Application configuration."""

import os
from dataclasses import dataclass


@dataclass
class Config:
    """Settings read from environment variables."""

    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./poker_control.db")
    storage_key: str = os.getenv("STORAGE_KEY", "poker_control_state_v1")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    report_dir: str = os.getenv("REPORT_DIR", "./reports")


config = Config()
