"""
Peer Resolution Agent
----------------------
Turns raw request parameters into a ScanPlan:

  - normalizes brand / region / category (defaults for blanks)
  - resolves category peers from the static catalog, minus the brand itself
  - bounds the fan-out to the first MAX_PEERS peers
  - derives the lookback date and the query language from the region

Input:  ScanRequest
Output: ScanPlan
"""

import logging
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional

from agents.base import Agent
from config.catalog import peers_for
from config.settings import settings
from models.schemas import ScanPlan, ScanRequest

logger = logging.getLogger(__name__)


def build_request(
    brand: Optional[str] = None,
    region: Optional[str] = None,
    category: Optional[str] = None,
) -> ScanRequest:
    """Apply defaults and casing rules to raw query values."""
    brand = (brand or "").strip() or settings.DEFAULT_BRAND
    region = ((region or "").strip() or settings.DEFAULT_REGION).upper()
    category = ((category or "").strip() or settings.DEFAULT_CATEGORY).lower()
    return ScanRequest(brand=brand, region=region, category=category)


def resolve_peers(category: str, brand: str) -> List[str]:
    """Catalog peers for `category`, excluding `brand` (case-insensitive)."""
    own = brand.strip().lower()
    return [p for p in peers_for(category) if p.lower() != own]


def language_for(region: str) -> str:
    return "es" if region.upper() in settings.SPANISH_REGIONS else "en"


def lookback_date(days: int = settings.LOOKBACK_DAYS, today: Optional[date] = None) -> str:
    today = today or datetime.now(timezone.utc).date()
    return (today - timedelta(days=days)).isoformat()


class PeerResolutionAgent(Agent):
    """
    Stage 1: Peer Resolution
    """

    def __init__(
        self,
        max_peers: Optional[int] = None,
        lookback_days: Optional[int] = None,
        api_key: Optional[str] = None,
    ):
        super().__init__(name="PeerResolutionAgent")
        self.max_peers = max_peers if max_peers is not None else settings.MAX_PEERS
        self.lookback_days = lookback_days if lookback_days is not None else settings.LOOKBACK_DAYS
        self.api_key = api_key if api_key is not None else settings.NEWS_API_KEY

    def run(self, request: ScanRequest) -> ScanPlan:
        peers = resolve_peers(request.category, request.brand)
        if not peers:
            self.logger.warning(
                f"No catalog peers for category '{request.category}' "
                f"(brand '{request.brand}')"
            )
        bounded = peers[: self.max_peers]

        plan = ScanPlan(
            request=request,
            peers=bounded,
            since=lookback_date(self.lookback_days),
            language=language_for(request.region),
            api_key=self.api_key or None,
        )
        self.logger.info(
            f"{request.brand} / {request.category} / {request.region}: "
            f"{len(bounded)} peers since {plan.since} (lang={plan.language})"
        )
        return plan
