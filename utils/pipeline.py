"""
Pipeline runner — wires the four scan stages together and returns a ScanReport.

Architecture:
  PeerResolutionAgent → NewsFetchAgent → SynthesisAgent → RankingAgent
"""

from __future__ import annotations

import logging
from typing import Optional

from agents.base import Orchestrator
from agents.news import NewsApiClient, NewsFetchAgent
from agents.peers import PeerResolutionAgent, build_request
from agents.ranker import RankingAgent
from agents.synthesizer import SynthesisAgent
from models.schemas import ScanReport

logger = logging.getLogger(__name__)


class ScanError(RuntimeError):
    """The scan pipeline failed as a whole."""


def build_orchestrator(
    api_key: Optional[str] = None,
    client: Optional[NewsApiClient] = None,
    max_peers: Optional[int] = None,
    top_n: Optional[int] = None,
) -> Orchestrator:
    return Orchestrator([
        PeerResolutionAgent(max_peers=max_peers, api_key=api_key),
        NewsFetchAgent(client=client),
        SynthesisAgent(),
        RankingAgent(top_n=top_n),
    ])


def run_scan(
    brand: Optional[str] = None,
    region: Optional[str] = None,
    category: Optional[str] = None,
    api_key: Optional[str] = None,
    client: Optional[NewsApiClient] = None,
    max_peers: Optional[int] = None,
    top_n: Optional[int] = None,
) -> ScanReport:
    """
    End-to-end competitor scan.

    Parameters
    ----------
    brand, region, category : str, optional
        Raw request values; blanks fall back to the configured defaults.
    api_key : str, optional
        News API key; defaults to settings.NEWS_API_KEY.
    client : NewsApiClient, optional
        Injected HTTP client (tests, custom sessions).
    """
    request = build_request(brand, region, category)
    pipeline = build_orchestrator(api_key=api_key, client=client, max_peers=max_peers, top_n=top_n)

    result = pipeline.execute(request)
    if not result.success:
        raise ScanError(result.error or "scan failed")

    report: ScanReport = result.data
    report.run_id = pipeline.run_id
    logger.debug(pipeline.summary())
    return report
