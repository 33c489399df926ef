"""
Configuration & Settings
Competitor Scan
"""

from pydantic import BaseModel
from typing import List, Optional
import os


class Settings(BaseModel):
    # App
    APP_NAME: str = "Competitor Scan"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = os.getenv("DEBUG", "").lower() in ("1", "true", "yes")

    # News search API
    # Without a key every peer falls back to sample coverage.
    NEWS_API_KEY: Optional[str] = os.getenv("NEWS_API_KEY") or None
    NEWS_API_URL: str = os.getenv("NEWS_API_URL", "https://newsapi.org/v2/everything")
    REQUEST_TIMEOUT: float = float(os.getenv("REQUEST_TIMEOUT", "7"))
    PAGE_SIZE: int = 10
    SORT_BY: str = "popularity"
    USER_AGENT: str = "CompetitorScan/1.0 (+https://newsapi.org)"

    # Scan defaults
    DEFAULT_BRAND: str = "The Ordinary"
    DEFAULT_REGION: str = "EU"
    DEFAULT_CATEGORY: str = "skincare"
    LOOKBACK_DAYS: int = 30
    SPANISH_REGIONS: List[str] = ["ES", "PT", "BR", "MX"]

    # Fan-out and ranking
    MAX_PEERS: int = 6
    MAX_WORKERS: int = 6
    TOP_N: int = 6
    CITATION_LIMIT: int = 3
    HIGHLIGHT_LIMIT: int = 3

    # Recommendation
    # Fewer citations than this across all competitors -> "medium" risk.
    RISK_CITATION_THRESHOLD: int = 4

    # API
    API_HOST: str = "0.0.0.0"
    API_PORT: int = int(os.getenv("PORT", "8000"))
    CORS_ALLOW_ORIGINS: List[str] = ["*"]
    CORS_ALLOW_METHODS: List[str] = ["GET", "OPTIONS"]
    CORS_ALLOW_HEADERS: List[str] = ["Content-Type", "Authorization"]


settings = Settings()
