# pricematch/config/settings.py

"""Central configuration for the pricematch engine."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the pricematch engine."""

    # --- Credentials ---
    RAPIDAPI_KEY: str = os.getenv("RAPIDAPI_KEY", "")

    # --- Fetching ---
    SOURCE_TIMEOUT: float = float(
        os.getenv("PRICEMATCH_SOURCE_TIMEOUT", "15")
    )                                   # Per-source deadline (secs)

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json",
        "Accept-Language": "en-US,en;q=0.9",
        "sec-ch-ua-mobile": "?0",
        "sec-ch-ua-platform": '"Windows"',
    }

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    LOGS_DIR: Path = BASE_DIR / "logs"

    # --- Sources (ids must match models.source.SourceId) ---
    AVAILABLE_SOURCES: list[dict[str, str]] = [
        {
            "id": "amazon",
            "label": "Amazon",
        },
        {
            "id": "flipkart",
            "label": "Flipkart",
        },
    ]
