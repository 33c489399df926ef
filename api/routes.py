"""
FastAPI Route Handlers
Competitor Scan
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from api.schemas import ErrorResponse, HealthResponse, ScanResponse
from config.catalog import supported_categories
from config.settings import settings
from utils.pipeline import ScanError, run_scan

logger = logging.getLogger(__name__)

router = APIRouter()


# ─── Health ──────────────────────────────────────────────────────────────────

@router.get("/health", response_model=HealthResponse, tags=["System"])
def health_check():
    return HealthResponse(
        status="ok",
        version=settings.APP_VERSION,
        timestamp=datetime.now(timezone.utc),
        news_api_configured=bool(settings.NEWS_API_KEY),
        categories=supported_categories(),
    )


# ─── Competitor Scan ─────────────────────────────────────────────────────────

@router.get(
    "/competitor-scan",
    response_model=ScanResponse,
    responses={500: {"model": ErrorResponse}},
    tags=["Scan"],
)
def competitor_scan(
    brand: Optional[str] = Query(None, description=f"Requesting brand (default {settings.DEFAULT_BRAND!r})"),
    region: Optional[str] = Query(None, description=f"Region code (default {settings.DEFAULT_REGION!r})"),
    category: Optional[str] = Query(None, description=f"Catalog category (default {settings.DEFAULT_CATEGORY!r})"),
):
    """
    Rank the brand's category peers by recent press mentions:
    Resolve peers → Fetch news → Synthesize → Rank → Recommend
    """
    try:
        report = run_scan(brand=brand, region=region, category=category)
    except ScanError as e:
        logger.error(f"Competitor scan failed: {e}")
        return JSONResponse(status_code=500, content={"error": str(e)})

    return ScanResponse(**report.to_dict())

