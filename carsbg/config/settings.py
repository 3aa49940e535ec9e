# carsbg/config/settings.py

"""Central configuration for the carsbg search engine."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the carsbg search engine."""

    # --- Target site ---
    SEARCH_URL: str = os.getenv(
        "CARSBG_SEARCH_URL", "https://www.cars.bg/carslist.php"
    )

    # --- Scraping ---
    REQUEST_TIMEOUT: int = 10           # Seconds before a page request times out
    REQUEST_DELAY: float = float(       # Seconds between page requests
        os.getenv("CARSBG_REQUEST_DELAY", "1.0")
    )

    # --- Paging ---
    DEFAULT_PAGES: int = 2
    MIN_PAGES: int = 1
    MAX_PAGES: int = 10

    # --- Presentation ---
    MAX_RESULTS_SHOWN: int = 10         # Cards sent per search
    COMMAND_PREFIX: str = "!"

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": (
            "text/html,application/xhtml+xml,"
            "application/xml;q=0.9,image/avif,"
            "image/webp,image/apng,*/*;q=0.8"
        ),
        "Accept-Language": "bg-BG,bg;q=0.9,en-US;q=0.8,en;q=0.7",
        "Referer": "https://www.cars.bg/",
        "Upgrade-Insecure-Requests": "1",
    }

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    SELECTORS_PATH: Path = (
        Path(__file__).resolve().parent / "selectors.json"
    )
    LOGS_DIR: Path = Path(
        os.getenv("CARSBG_LOGS_DIR", str(BASE_DIR / "logs"))
    )
