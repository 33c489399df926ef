"""
News Fetch Agent
-----------------
Queries the news search API once per peer and collects the articles.

Sources:
  - NewsAPI `everything` endpoint (https://newsapi.org/docs/endpoints/everything)
  - Sample coverage when no API key is configured or a peer's call fails

All peer calls run in a thread pool, each bounded by REQUEST_TIMEOUT and
never retried. The stage waits for every call to settle and keeps the plan's
peer order in its output.

Architecture:
  NewsFetchAgent.run(ScanPlan) -> FetchOutput
"""

import concurrent.futures
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import requests

from agents.base import Agent
from config.settings import settings
from models.schemas import Article, FetchOutput, PeerCoverage, ScanPlan, isoformat, utcnow

logger = logging.getLogger(__name__)


class NewsFetchError(Exception):
    """A single peer query failed: timeout, transport error, non-2xx or bad payload."""

    def __init__(self, peer: str, reason: str):
        super().__init__(f"{peer}: {reason}")
        self.peer = peer
        self.reason = reason


# ─── API Client ──────────────────────────────────────────────────────────────


class NewsApiClient:
    """Thin wrapper over the NewsAPI `everything` search."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        page_size: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url or settings.NEWS_API_URL
        self.timeout = timeout if timeout is not None else settings.REQUEST_TIMEOUT
        self.page_size = page_size if page_size is not None else settings.PAGE_SIZE
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": settings.USER_AGENT})

    def build_params(self, peer: str, since: str, language: str, api_key: str) -> Dict[str, Any]:
        return {
            "q": peer,
            "from": since,
            "language": language,
            "sortBy": settings.SORT_BY,
            "pageSize": self.page_size,
            "apiKey": api_key,
        }

    def search(self, peer: str, since: str, language: str, api_key: str) -> List[Article]:
        """Articles mentioning `peer` since `since`; only entries with a title."""
        params = self.build_params(peer, since, language, api_key)
        try:
            resp = self.session.get(self.base_url, params=params, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except requests.Timeout:
            raise NewsFetchError(peer, f"timed out after {self.timeout:.0f}s")
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else "?"
            raise NewsFetchError(peer, f"NewsAPI {status}")
        except requests.RequestException as e:
            raise NewsFetchError(peer, f"request failed: {e.__class__.__name__}")
        except ValueError:
            raise NewsFetchError(peer, "invalid JSON payload")

        if not isinstance(data, dict):
            raise NewsFetchError(peer, "unexpected payload shape")
        if data.get("status") == "error":
            raise NewsFetchError(peer, f"NewsAPI error: {data.get('code') or data.get('message')}")

        raw_articles = data.get("articles") or []
        return [
            Article.from_api(a)
            for a in raw_articles
            if isinstance(a, dict) and isinstance(a.get("title"), str) and a["title"]
        ]

    def close(self) -> None:
        self.session.close()


# ─── Sample Coverage ─────────────────────────────────────────────────────────


SAMPLE_HEADLINES = (
    "{peer} announces new cleanser",
    "{peer} partners with major retailer",
    "{peer} sustainability update gains press",
)


def sample_coverage(
    peer: str,
    position: int,
    now: Optional[datetime] = None,
    error: Optional[str] = None,
) -> PeerCoverage:
    """
    Deterministic stand-in coverage for a peer, so a scan always returns
    well-formed competitor entries.
    """
    now = now or utcnow()
    citation = Article(
        title=f"{peer} launches new product",
        source="ExampleSource",
        url="https://example.com",
        published_at=isoformat(now),
    )
    return PeerCoverage(
        peer=peer,
        position=position,
        articles=[citation],
        origin="sample",
        mentions=5 + ((position * 3) % 7),
        headlines=[h.format(peer=peer) for h in SAMPLE_HEADLINES],
        error=error,
    )


# ─── NewsFetchAgent ──────────────────────────────────────────────────────────


class NewsFetchAgent(Agent):
    """
    Stage 2: News Fetch

    Input:  ScanPlan
    Output: FetchOutput (one PeerCoverage per plan peer, in plan order)
    """

    def __init__(self, client: Optional[NewsApiClient] = None, max_workers: Optional[int] = None):
        super().__init__(name="NewsFetchAgent")
        self.client = client
        self.max_workers = max_workers if max_workers is not None else settings.MAX_WORKERS

    def fetch_peer(self, client: NewsApiClient, plan: ScanPlan, peer: str, position: int) -> PeerCoverage:
        try:
            articles = client.search(peer, plan.since, plan.language, plan.api_key)
        except NewsFetchError as e:
            self.logger.warning(f"  Falling back to sample for {peer}: {e.reason}")
            return sample_coverage(peer, position, error=e.reason)

        self.logger.info(f"  → {len(articles)} articles for {peer}")
        return PeerCoverage(peer=peer, position=position, articles=articles, origin="newsapi")

    def run(self, plan: ScanPlan) -> FetchOutput:
        if not plan.peers:
            return FetchOutput(plan=plan, coverages=[])

        if not plan.api_key:
            self.logger.warning("NEWS_API_KEY not set. Returning sample coverage for all peers.")
            now = utcnow()
            return FetchOutput(
                plan=plan,
                coverages=[sample_coverage(p, i, now) for i, p in enumerate(plan.peers)],
            )

        # A client built here is closed here; an injected one belongs to the caller.
        client = self.client or NewsApiClient()
        workers = max(1, min(self.max_workers, len(plan.peers)))
        try:
            with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
                futures = [
                    executor.submit(self.fetch_peer, client, plan, peer, i)
                    for i, peer in enumerate(plan.peers)
                ]
                concurrent.futures.wait(futures)
        finally:
            if client is not self.client:
                client.close()

        coverages: List[PeerCoverage] = []
        for i, (peer, future) in enumerate(zip(plan.peers, futures)):
            try:
                coverages.append(future.result())
            except Exception as exc:  # pylint: disable=broad-exception-caught
                self.logger.error(f"  {peer} generated an exception: {exc}")
                coverages.append(sample_coverage(peer, i, error=str(exc)))

        fallbacks = sum(1 for c in coverages if c.is_fallback)
        self.logger.info(
            f"Fetched {len(coverages)} peers ({fallbacks} fell back to sample)"
        )
        return FetchOutput(plan=plan, coverages=coverages)
