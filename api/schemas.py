"""
Pydantic schemas for API response validation.
"""

from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


# ─── Competitor Scan ─────────────────────────────────────────────────────────

class CitationResponse(BaseModel):
    title: str
    source: Optional[str] = None
    url: Optional[str] = None
    published_at: Optional[str] = Field(None, alias="publishedAt")


class SummaryResponse(BaseModel):
    short: str
    positioning: str
    strengths: List[str]
    differentiators: List[str]
    highlights: List[str]


class CompetitorResponse(BaseModel):
    name: str
    mentions: int = Field(..., ge=0)
    origin: str = Field(..., description="newsapi | sample")
    summary: SummaryResponse
    citations: List[CitationResponse]


class RecommendationResponse(BaseModel):
    text: str
    next_steps: List[str]
    risk: str = Field(..., description="low | medium | none")


class MetaResponse(BaseModel):
    generated_at: str
    source: str = Field(..., description="newsapi | sample | mixed")
    run_id: Optional[str] = None
    peers_queried: int
    fallback_peers: int


class ScanResponse(BaseModel):
    brand: str
    region: str
    category: str
    competitors: List[CompetitorResponse]
    recommendation: RecommendationResponse
    meta: MetaResponse


# ─── System ──────────────────────────────────────────────────────────────────

class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str
    version: str
    timestamp: datetime
    news_api_configured: bool
    categories: List[str]
