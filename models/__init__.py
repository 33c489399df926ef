"""
Core data models for the Competitor Scan system.
"""

from .schemas import (
    ScanRequest,
    ScanPlan,
    Article,
    PeerCoverage,
    FetchOutput,
    PeerSummary,
    CompetitorSummary,
    SynthesisOutput,
    Recommendation,
    ScanReport,
)

__all__ = [
    "ScanRequest",
    "ScanPlan",
    "Article",
    "PeerCoverage",
    "FetchOutput",
    "PeerSummary",
    "CompetitorSummary",
    "SynthesisOutput",
    "Recommendation",
    "ScanReport",
]
