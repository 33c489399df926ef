"""
Core data models / schemas for the Competitor Scan system.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any
from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def isoformat(ts: datetime) -> str:
    """ISO-8601 in UTC with a trailing Z, millisecond precision."""
    return ts.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


# ---------------------------------------------------------------------------
# Request / plan
# ---------------------------------------------------------------------------

@dataclass
class ScanRequest:
    brand: str
    region: str                     # upper-cased, e.g. "EU", "ES"
    category: str                   # lower-cased catalog key

    def to_dict(self) -> Dict[str, str]:
        return {"brand": self.brand, "region": self.region, "category": self.category}


@dataclass
class ScanPlan:
    request: ScanRequest
    peers: List[str]
    since: str                      # YYYY-MM-DD lookback date
    language: str                   # "en" | "es"
    api_key: Optional[str] = None


# ---------------------------------------------------------------------------
# Raw ingestion
# ---------------------------------------------------------------------------

@dataclass
class Article:
    title: str
    source: Optional[str] = None    # publisher name
    url: Optional[str] = None
    published_at: Optional[str] = None

    @classmethod
    def from_api(cls, raw: Dict[str, Any]) -> "Article":
        source = raw.get("source") or {}
        return cls(
            title=raw.get("title"),
            source=source.get("name") if isinstance(source, dict) else None,
            url=raw.get("url"),
            published_at=raw.get("publishedAt"),
        )

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "title": self.title,
            "source": self.source,
            "url": self.url,
            "publishedAt": self.published_at,
        }


@dataclass
class PeerCoverage:
    """Articles retrieved for one peer, or its sample stand-in."""
    peer: str
    position: int                   # index in ScanPlan.peers
    articles: List[Article]
    origin: str = "newsapi"         # "newsapi" | "sample"
    mentions: Optional[int] = None  # overrides len(articles) for sample records
    headlines: Optional[List[str]] = None  # overrides article titles for synthesis
    error: Optional[str] = None

    @property
    def mention_count(self) -> int:
        return self.mentions if self.mentions is not None else len(self.articles)

    @property
    def titles(self) -> List[str]:
        if self.headlines is not None:
            return list(self.headlines)
        return [a.title for a in self.articles]

    @property
    def is_fallback(self) -> bool:
        return self.origin == "sample"


@dataclass
class FetchOutput:
    plan: ScanPlan
    coverages: List[PeerCoverage]


# ---------------------------------------------------------------------------
# Derived summaries
# ---------------------------------------------------------------------------

@dataclass
class PeerSummary:
    short: str
    positioning: str
    strengths: List[str] = field(default_factory=list)
    differentiators: List[str] = field(default_factory=list)
    highlights: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "short": self.short,
            "positioning": self.positioning,
            "strengths": list(self.strengths),
            "differentiators": list(self.differentiators),
            "highlights": list(self.highlights),
        }


@dataclass
class CompetitorSummary:
    name: str
    mentions: int
    summary: PeerSummary
    citations: List[Article] = field(default_factory=list)
    origin: str = "newsapi"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "mentions": self.mentions,
            "origin": self.origin,
            "summary": self.summary.to_dict(),
            "citations": [c.to_dict() for c in self.citations],
        }


@dataclass
class SynthesisOutput:
    plan: ScanPlan
    competitors: List[CompetitorSummary]


@dataclass
class Recommendation:
    text: str
    next_steps: List[str]
    risk: str                       # "low" | "medium" | "none"

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text, "next_steps": list(self.next_steps), "risk": self.risk}


# ---------------------------------------------------------------------------
# Scan report
# ---------------------------------------------------------------------------

@dataclass
class ScanReport:
    request: ScanRequest
    competitors: List[CompetitorSummary]
    recommendation: Recommendation
    source: str                     # "newsapi" | "sample" | "mixed"
    peers_queried: int = 0
    fallback_peers: int = 0
    run_id: Optional[str] = None
    generated_at: datetime = field(default_factory=utcnow)

    @property
    def total_citations(self) -> int:
        return sum(len(c.citations) for c in self.competitors)

    def to_dict(self) -> Dict[str, Any]:
        return {
            **self.request.to_dict(),
            "competitors": [c.to_dict() for c in self.competitors],
            "recommendation": self.recommendation.to_dict(),
            "meta": {
                "generated_at": isoformat(self.generated_at),
                "source": self.source,
                "run_id": self.run_id,
                "peers_queried": self.peers_queried,
                "fallback_peers": self.fallback_peers,
            },
        }
