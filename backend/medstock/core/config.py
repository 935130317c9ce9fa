"""Application configuration.

Environment variables override all defaults. A local ``backend/.env`` is
loaded for development but never overrides variables already set.
"""

import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

_BACKEND_DIR = Path(__file__).resolve().parents[2]
load_dotenv(dotenv_path=_BACKEND_DIR / ".env", override=False)


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    # Runtime
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    DEBUG: bool = ENVIRONMENT == "development"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Store capacities (main pharmacy + secondary branch)
    MAX_MEDICINES: int = int(os.getenv("MAX_MEDICINES", "200"))
    MAX_BRANCH: int = int(os.getenv("MAX_BRANCH", "50"))

    # Field bounds. Name/company lengths include the terminator slot, so the
    # longest accepted token is one shorter.
    MAX_NAME_LEN: int = 50
    MAX_COMPANY_LEN: int = 40
    MAX_MEDICINE_ID: int = 1_000_000
    MAX_QUANTITY: int = 1_000_000
    MAX_PRICE: int = 1_000_000
    MIN_EXPIRY_YEAR: int = 2020
    MAX_EXPIRY_YEAR: int = 9999

    # Reminders
    DEFAULT_LOW_STOCK_THRESHOLD: int = int(os.getenv("DEFAULT_LOW_STOCK_THRESHOLD", "20"))

    # Seed both stores with the reference sample data on API startup
    SEED_SAMPLE_DATA: bool = _env_bool("SEED_SAMPLE_DATA")

    # HTTP wrapper
    API_HOST: str = os.getenv("API_HOST", "127.0.0.1")
    API_PORT: int = int(os.getenv("API_PORT", "8000"))
    CORS_ORIGINS: List[str] = [
        origin.strip()
        for origin in os.getenv(
            "CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"
        ).split(",")
        if origin.strip()
    ]


settings = Settings()
