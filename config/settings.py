"""
config/settings.py
──────────────────
Application configuration loaded from environment variables.
"""
import os
from dataclasses import dataclass


@dataclass
class Settings:
    # Server
    DEBUG: bool = os.getenv("DEBUG", "true").lower() == "true"
    PORT: int = int(os.getenv("PORT", "3000"))
    HOST: str = os.getenv("HOST", "0.0.0.0")

    # Database (SQLite path, ":memory:" for tests)
    DATABASE_URL: str = os.getenv("DATABASE_URL", "bridge_monitor.db")

    # Dashboard refresh interval in milliseconds
    UPDATE_INTERVAL_MS: int = int(os.getenv("UPDATE_INTERVAL_MS", "2000"))

    # Liveness sweep
    LIVENESS_INTERVAL_S: float = float(os.getenv("LIVENESS_INTERVAL_S", "5"))
    OFFLINE_TIMEOUT_S: float = float(os.getenv("OFFLINE_TIMEOUT_S", "10"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # i18n
    DEFAULT_LANG: str = os.getenv("DEFAULT_LANG", "en")

    # Demo data
    SEED_DEMO_REGIONS: bool = os.getenv("SEED_DEMO_REGIONS", "true").lower() == "true"
    DEMO_FEED: bool = os.getenv("DEMO_FEED", "false").lower() == "true"
    SIMULATION_SEED: int = int(os.getenv("SIMULATION_SEED", "42"))


settings = Settings()
