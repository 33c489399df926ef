"""
Synthesis Agent
----------------
Derives a structured summary for each peer from its headlines using plain
keyword and regex rules. No model, no scoring: identical titles always give
identical output.

  strengths        substring rules over the joined, lower-cased titles
  differentiators  regex rules over the same text
  highlights       first HIGHLIGHT_LIMIT titles as returned
  citations        first CITATION_LIMIT articles

Input:  FetchOutput
Output: SynthesisOutput
"""

import logging
import re
from typing import List, Optional, Sequence, Tuple

from agents.base import Agent
from config.settings import settings
from models.schemas import (
    CompetitorSummary, FetchOutput, PeerCoverage, PeerSummary, SynthesisOutput,
)

logger = logging.getLogger(__name__)

TITLE_SEPARATOR = " • "

# (label, substrings); each rule contributes its label at most once.
STRENGTH_RULES: Sequence[Tuple[str, Tuple[str, ...]]] = (
    ("Brand momentum", ("award", "bestseller")),
    ("Active product launches", ("launch", "new")),
    ("Partnership activity", ("partnership", "collab")),
    ("Sustainability narrative", ("sustainab", "eco")),
    ("Retail distribution updates", ("retail", "store")),
    ("Growth signals", ("growth", "revenue")),
)

# "ai" and "spa" are whole words only; as substrings they hit "retail", "space".
DIFFERENTIATOR_RULES: Sequence[Tuple[str, "re.Pattern[str]"]] = (
    ("Actives-led positioning", re.compile(r"vitamin c|retinol|niacinamide", re.I)),
    ("Wellness/clinic crossover", re.compile(r"\bspa\b|clinic", re.I)),
    ("Personalization/tech angle", re.compile(r"\bai\b|personalized", re.I)),
)


def _joined(titles: Sequence[str]) -> str:
    return TITLE_SEPARATOR.join((t or "").lower() for t in titles)


def match_strengths(text: str) -> List[str]:
    return [label for label, needles in STRENGTH_RULES if any(n in text for n in needles)]


def match_differentiators(text: str) -> List[str]:
    return [label for label, pattern in DIFFERENTIATOR_RULES if pattern.search(text)]


def synthesize_from_titles(
    peer: str,
    titles: Sequence[str],
    category: str = settings.DEFAULT_CATEGORY,
    highlight_limit: int = settings.HIGHLIGHT_LIMIT,
) -> PeerSummary:
    """Build a PeerSummary for `peer` from its headlines."""
    text = _joined(titles)
    strengths = match_strengths(text)
    differentiators = match_differentiators(text)

    if strengths:
        short = f"{peer} shows {strengths[0].lower()} in recent coverage."
    else:
        short = f"{peer} has steady coverage this period."
    positioning = differentiators[0] if differentiators else f"General DTC {category} positioning"

    return PeerSummary(
        short=short,
        positioning=positioning,
        strengths=strengths,
        differentiators=differentiators,
        highlights=list(titles[:highlight_limit]),
    )


class SynthesisAgent(Agent):
    """
    Stage 3: Keyword Synthesis
    """

    def __init__(self, citation_limit: Optional[int] = None, highlight_limit: Optional[int] = None):
        super().__init__(name="SynthesisAgent")
        self.citation_limit = citation_limit if citation_limit is not None else settings.CITATION_LIMIT
        self.highlight_limit = highlight_limit if highlight_limit is not None else settings.HIGHLIGHT_LIMIT

    def summarize(self, coverage: PeerCoverage, category: str) -> CompetitorSummary:
        summary = synthesize_from_titles(
            coverage.peer,
            coverage.titles,
            category=category,
            highlight_limit=self.highlight_limit,
        )
        return CompetitorSummary(
            name=coverage.peer,
            mentions=coverage.mention_count,
            summary=summary,
            citations=coverage.articles[: self.citation_limit],
            origin=coverage.origin,
        )

    def run(self, fetched: FetchOutput) -> SynthesisOutput:
        category = fetched.plan.request.category
        competitors = [self.summarize(c, category) for c in fetched.coverages]
        for c in competitors:
            self.logger.debug(
                f"  {c.name}: {c.mentions} mentions, strengths={c.summary.strengths}"
            )
        return SynthesisOutput(plan=fetched.plan, competitors=competitors)
