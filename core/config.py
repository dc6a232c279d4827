"""
Configuration loader for the datacenter price crawler.
Loads environment variables from .env file.
"""
import os
from pathlib import Path
from typing import List
from dotenv import load_dotenv


# Load .env from the project root
PROJECT_ROOT = Path(__file__).parent.parent
ENV_PATH = PROJECT_ROOT / ".env"
load_dotenv(ENV_PATH)


class Config:
    """Application configuration."""
    MONGO_URI: str = os.getenv("MONGO_URI", "mongodb://localhost:27017/fconline")
    DATABASE_NAME: str = os.getenv("DATABASE_NAME", "fconline")
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development").lower()

    # Browser
    CHROME_EXECUTABLE_PATH: str = os.getenv("CHROME_EXECUTABLE_PATH", "/usr/bin/google-chrome-stable")
    BLOCKED_DOMAINS: str = os.getenv("BLOCKED_DOMAINS", "google-analytics.com,doubleclick.net")

    # Target page
    DATACENTER_URL_TEMPLATE: str = os.getenv(
        "DATACENTER_URL_TEMPLATE",
        "https://fconline.nexon.com/DataCenter/PlayerInfo?spid={id}&n1Strong={grade}",
    )
    PRICE_SELECTOR: str = os.getenv("PRICE_SELECTOR", ".txt strong")
    SCRAPE_TIMEOUT_MS: int = int(os.getenv("SCRAPE_TIMEOUT_MS", "80000"))

    # Collections
    PRICE_COLLECTION: str = os.getenv("PRICE_COLLECTION", "prices")
    REPORT_COLLECTION: str = os.getenv("REPORT_COLLECTION", "eventvaluecharts")
    PLAYER_REPORT_COLLECTION: str = os.getenv("PLAYER_REPORT_COLLECTION", "playerreports")

    # Report
    REPORT_ID: str = os.getenv("REPORT_ID", "챔피언스 저니 4000p")
    REPORT_UTC_OFFSET_HOURS: int = int(os.getenv("REPORT_UTC_OFFSET_HOURS", "9"))

    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    def blocked_domains(self) -> List[str]:
        """Comma-separated BLOCKED_DOMAINS as a clean list."""
        return [d.strip().lower() for d in self.BLOCKED_DOMAINS.split(",") if d.strip()]


# Singleton instance
config = Config()
