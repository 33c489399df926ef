"""
Ranking Agent
--------------
Orders competitors by recent mention volume and derives one recommendation:

  rank     stable sort by mentions (descending), keep the first TOP_N
  leader   highest-ranked competitor, if any
  risk     "none"   no competitors
           "medium" total citations < RISK_CITATION_THRESHOLD
           "low"    otherwise

Input:  SynthesisOutput
Output: ScanReport
"""

import logging
from typing import List, Optional

from agents.base import Agent
from config.settings import settings
from models.schemas import CompetitorSummary, Recommendation, ScanReport, SynthesisOutput

logger = logging.getLogger(__name__)


def rank_competitors(competitors: List[CompetitorSummary], top_n: int = settings.TOP_N) -> List[CompetitorSummary]:
    """Mentions descending; `sorted` is stable so ties keep their order."""
    return sorted(competitors, key=lambda c: c.mentions, reverse=True)[:top_n]


def assess_risk(competitors: List[CompetitorSummary], threshold: int = settings.RISK_CITATION_THRESHOLD) -> str:
    if not competitors:
        return "none"
    total = sum(len(c.citations) for c in competitors)
    return "medium" if total < threshold else "low"


def build_recommendation(
    competitors: List[CompetitorSummary],
    threshold: int = settings.RISK_CITATION_THRESHOLD,
) -> Recommendation:
    """Plain-English next steps keyed on the leading competitor."""
    risk = assess_risk(competitors, threshold)
    leader = competitors[0].name if competitors else None

    if leader:
        return Recommendation(
            text=(
                f"Momentum this month is led by {leader}. "
                "Compare pricing and landing copy; ship one reactive post this week."
            ),
            next_steps=[
                f"Add {leader} to watchlist and enable weekly alert",
                "Review pricing/landing copy vs the top competitor",
                "Publish one reactive post based on a cited article",
            ],
            risk=risk,
        )
    return Recommendation(
        text="Coverage is low this month. Maintain plan and re-check next week.",
        next_steps=["Schedule auto re-run next Monday"],
        risk=risk,
    )


def report_source(competitors: List[CompetitorSummary]) -> str:
    origins = {c.origin for c in competitors}
    if not origins or origins == {"sample"}:
        return "sample"
    if origins == {"newsapi"}:
        return "newsapi"
    return "mixed"


class RankingAgent(Agent):
    """
    Stage 4: Ranking & Recommendation
    """

    def __init__(self, top_n: Optional[int] = None, risk_threshold: Optional[int] = None):
        super().__init__(name="RankingAgent")
        self.top_n = top_n if top_n is not None else settings.TOP_N
        self.risk_threshold = (
            risk_threshold if risk_threshold is not None else settings.RISK_CITATION_THRESHOLD
        )

    def run(self, synthesis: SynthesisOutput) -> ScanReport:
        ranked = rank_competitors(synthesis.competitors, self.top_n)
        recommendation = build_recommendation(ranked, self.risk_threshold)

        for rank, c in enumerate(ranked, 1):
            self.logger.info(
                f"  #{rank} {c.name:<20} mentions={c.mentions:>3} "
                f"citations={len(c.citations)} [{c.origin}]"
            )

        return ScanReport(
            request=synthesis.plan.request,
            competitors=ranked,
            recommendation=recommendation,
            source=report_source(synthesis.competitors),
            peers_queried=len(synthesis.plan.peers),
            fallback_peers=sum(1 for c in synthesis.competitors if c.origin == "sample"),
        )
