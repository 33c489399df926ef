"""
Scan pipeline tests with a stubbed news API session.
Run with: python -m pytest tests/ -v
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import date
from unittest.mock import MagicMock

import pytest
import requests

from agents.base import Agent, Orchestrator
from agents.news import NewsApiClient, NewsFetchAgent, sample_coverage
from agents.peers import (
    PeerResolutionAgent, build_request, language_for, lookback_date, resolve_peers,
)
from agents.ranker import RankingAgent, assess_risk, build_recommendation, rank_competitors
from agents.synthesizer import SynthesisAgent, synthesize_from_titles
from config.settings import settings
from models.schemas import Article, CompetitorSummary, PeerSummary
from utils.pipeline import ScanError, run_scan


# ─── Helpers ─────────────────────────────────────────────────────────────────

def api_article(title, source="Vogue", url="https://news.example/a"):
    return {
        "title": title,
        "source": {"id": None, "name": source},
        "url": url,
        "publishedAt": "2026-10-01T08:00:00Z",
    }


def api_response(articles=None, status_code=200, payload=None):
    resp = MagicMock()
    resp.status_code = status_code
    if status_code >= 400:
        err_resp = MagicMock(status_code=status_code)
        resp.raise_for_status.side_effect = requests.HTTPError(response=err_resp)
    resp.json.return_value = payload if payload is not None else {
        "status": "ok",
        "totalResults": len(articles or []),
        "articles": articles or [],
    }
    return resp


def stub_client(by_peer):
    """NewsApiClient whose session answers per `q` from `by_peer`; unknown peers time out."""
    session = MagicMock()

    def fake_get(url, params=None, timeout=None):
        outcome = by_peer.get(params["q"], requests.Timeout("no stub"))
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    session.get.side_effect = fake_get
    return NewsApiClient(session=session)


def competitor(name, mentions, citations=1, origin="newsapi"):
    return CompetitorSummary(
        name=name,
        mentions=mentions,
        summary=PeerSummary(short=f"{name} has steady coverage this period.", positioning="x"),
        citations=[Article(title=f"{name} {i}") for i in range(citations)],
        origin=origin,
    )


# ─── Fixtures ────────────────────────────────────────────────────────────────

@pytest.fixture(autouse=True)
def no_env_key(monkeypatch):
    monkeypatch.setattr(settings, "NEWS_API_KEY", None)


@pytest.fixture
def skincare_plan():
    return PeerResolutionAgent(api_key="test-key").run(build_request("The Ordinary", "EU", "skincare"))


# ─── Peer Resolution ─────────────────────────────────────────────────────────

class TestPeerResolution:
    def test_defaults_applied_for_blank_values(self):
        req = build_request("", None, "  ")
        assert req.brand == "The Ordinary"
        assert req.region == "EU"
        assert req.category == "skincare"

    def test_region_upper_and_category_lower(self):
        req = build_request("CeraVe", "es", "SkinCare")
        assert req.region == "ES"
        assert req.category == "skincare"

    @pytest.mark.parametrize("brand", ["The Ordinary", "the ordinary", "  THE ORDINARY "])
    def test_brand_excluded_case_insensitive(self, brand):
        peers = resolve_peers("skincare", brand)
        assert "The Ordinary" not in peers
        assert peers[0] == "CeraVe"

    def test_unknown_category_has_no_peers(self):
        assert resolve_peers("pet food", "Acme") == []

    def test_language_from_region(self):
        assert language_for("ES") == "es"
        assert language_for("MX") == "es"
        assert language_for("EU") == "en"
        assert language_for("US") == "en"

    def test_lookback_date(self):
        assert lookback_date(30, today=date(2026, 10, 18)) == "2026-09-18"

    def test_plan_bounded_to_max_peers(self, skincare_plan):
        assert len(skincare_plan.peers) == 6
        assert skincare_plan.peers == [
            "CeraVe", "La Roche-Posay", "The INKEY List",
            "Paula’s Choice", "Bioderma", "Avene",
        ]
        assert skincare_plan.language == "en"
        assert skincare_plan.api_key == "test-key"

    def test_blank_key_means_no_key(self):
        plan = PeerResolutionAgent(api_key="").run(build_request())
        assert plan.api_key is None


# ─── Keyword Synthesis ───────────────────────────────────────────────────────

class TestSynthesis:
    def test_award_and_launch_titles(self):
        summary = synthesize_from_titles("X", ["X wins award", "X launches new serum"])
        assert "Brand momentum" in summary.strengths
        assert "Active product launches" in summary.strengths
        assert summary.short == "X shows brand momentum in recent coverage."

    def test_each_rule_adds_label_once(self):
        summary = synthesize_from_titles("X", ["new", "new launch", "another launch"])
        assert summary.strengths == ["Active product launches"]

    def test_deterministic(self):
        titles = ["CeraVe retinol serum launch", "CeraVe revenue growth", "CeraVe clinic partnership"]
        assert synthesize_from_titles("CeraVe", titles) == synthesize_from_titles("CeraVe", titles)

    def test_no_matches_gives_steady_coverage(self):
        summary = synthesize_from_titles("Avene", ["Avene quarterly update"], category="skincare")
        assert summary.strengths == []
        assert summary.differentiators == []
        assert summary.short == "Avene has steady coverage this period."
        assert summary.positioning == "General DTC skincare positioning"

    def test_differentiators(self):
        summary = synthesize_from_titles("X", [
            "X bets on niacinamide",
            "X opens day spa in Paris",
            "X rolls out AI skin analysis",
        ])
        assert summary.differentiators == [
            "Actives-led positioning",
            "Wellness/clinic crossover",
            "Personalization/tech angle",
        ]
        assert summary.positioning == "Actives-led positioning"

    def test_ai_is_a_whole_word(self):
        summary = synthesize_from_titles("X", ["X expands retail footprint in Spain"])
        assert "Personalization/tech angle" not in summary.differentiators
        assert "Wellness/clinic crossover" not in summary.differentiators
        assert "Retail distribution updates" in summary.strengths

    def test_personalized_spelling(self):
        assert synthesize_from_titles("X", ["X launches personalized serums"]).differentiators == [
            "Personalization/tech angle",
        ]
        assert synthesize_from_titles("X", ["X launches personalised serums"]).differentiators == []

    def test_highlights_limited_to_three(self):
        titles = [f"headline {i}" for i in range(5)]
        assert synthesize_from_titles("X", titles).highlights == titles[:3]


# ─── News Fetch ──────────────────────────────────────────────────────────────

class TestNewsFetch:
    def test_no_key_returns_sample_for_every_peer(self):
        plan = PeerResolutionAgent(api_key=None).run(build_request())
        client = NewsApiClient(session=MagicMock())
        fetched = NewsFetchAgent(client=client).run(plan)

        assert [c.peer for c in fetched.coverages] == plan.peers
        assert all(c.origin == "sample" for c in fetched.coverages)
        assert [c.mention_count for c in fetched.coverages] == [5, 8, 11, 7, 10, 6]
        client.session.get.assert_not_called()

    def test_sample_coverage_shape(self):
        cov = sample_coverage("Bioderma", 4)
        assert cov.mention_count == 10
        assert len(cov.articles) == 1
        assert cov.articles[0].title == "Bioderma launches new product"
        assert cov.articles[0].source == "ExampleSource"
        assert cov.titles[0] == "Bioderma announces new cleanser"

    def test_query_params(self, skincare_plan):
        client = stub_client({p: api_response([]) for p in skincare_plan.peers})
        NewsFetchAgent(client=client).run(skincare_plan)

        calls = client.session.get.call_args_list
        assert len(calls) == 6
        params = next(c.kwargs["params"] for c in calls if c.kwargs["params"]["q"] == "CeraVe")
        assert params["from"] == skincare_plan.since
        assert params["language"] == "en"
        assert params["sortBy"] == "popularity"
        assert params["pageSize"] == 10
        assert params["apiKey"] == "test-key"
        assert all(c.kwargs["timeout"] == settings.REQUEST_TIMEOUT for c in calls)

    def test_articles_without_title_dropped(self, skincare_plan):
        outcomes = {p: api_response([]) for p in skincare_plan.peers}
        outcomes["CeraVe"] = api_response([
            api_article("CeraVe wins award"),
            {"title": None, "source": {"name": "X"}},
            {"title": "", "source": {"name": "X"}},
            api_article("CeraVe launches new cleanser"),
        ])
        fetched = NewsFetchAgent(client=stub_client(outcomes)).run(skincare_plan)

        cerave = fetched.coverages[0]
        assert cerave.origin == "newsapi"
        assert cerave.mention_count == 2
        assert cerave.articles[0].source == "Vogue"
        assert cerave.articles[0].published_at == "2026-10-01T08:00:00Z"

    def test_failures_fall_back_per_peer(self, skincare_plan):
        outcomes = {p: api_response([api_article(f"{p} news")]) for p in skincare_plan.peers}
        outcomes["CeraVe"] = requests.Timeout("slow")
        outcomes["Bioderma"] = api_response(status_code=500)
        outcomes["Avene"] = requests.ConnectionError("down")
        bad_json = api_response([])
        bad_json.json.side_effect = ValueError("not json")
        outcomes["The INKEY List"] = bad_json

        fetched = NewsFetchAgent(client=stub_client(outcomes)).run(skincare_plan)
        by_peer = {c.peer: c for c in fetched.coverages}

        assert by_peer["CeraVe"].origin == "sample"
        assert "timed out" in by_peer["CeraVe"].error
        assert by_peer["Bioderma"].error == "NewsAPI 500"
        assert by_peer["Avene"].origin == "sample"
        assert by_peer["The INKEY List"].error == "invalid JSON payload"
        assert by_peer["La Roche-Posay"].origin == "newsapi"
        assert [c.peer for c in fetched.coverages] == skincare_plan.peers

    def test_owned_session_closed_after_each_scan(self, monkeypatch):
        session_factory = MagicMock()
        monkeypatch.setattr(requests, "Session", session_factory)

        for _ in range(3):
            run_scan(api_key="k")

        assert session_factory.call_count == 3
        assert session_factory.return_value.close.call_count == 3

    def test_injected_client_left_open(self, skincare_plan):
        client = stub_client({})
        NewsFetchAgent(client=client).run(skincare_plan)
        client.session.close.assert_not_called()

    def test_api_error_status_payload(self, skincare_plan):
        outcomes = {p: api_response(payload={"status": "error", "code": "rateLimited"})
                    for p in skincare_plan.peers}
        fetched = NewsFetchAgent(client=stub_client(outcomes)).run(skincare_plan)
        assert all(c.origin == "sample" for c in fetched.coverages)


# ─── Ranking ─────────────────────────────────────────────────────────────────

class TestRanking:
    def test_sorted_by_mentions_desc(self):
        ranked = rank_competitors([competitor("A", 2), competitor("B", 9), competitor("C", 5)])
        assert [c.name for c in ranked] == ["B", "C", "A"]

    def test_ties_keep_order(self):
        ranked = rank_competitors([competitor("A", 3), competitor("B", 7), competitor("C", 3), competitor("D", 3)])
        assert [c.name for c in ranked] == ["B", "A", "C", "D"]

    def test_top_n(self):
        ranked = rank_competitors([competitor(str(i), i) for i in range(10)], top_n=4)
        assert [c.name for c in ranked] == ["9", "8", "7", "6"]

    def test_risk_levels(self):
        assert assess_risk([]) == "none"
        assert assess_risk([competitor("A", 5, citations=3)]) == "medium"
        assert assess_risk([competitor("A", 5, citations=3), competitor("B", 1, citations=1)]) == "low"

    def test_recommendation_names_leader(self):
        rec = build_recommendation([competitor("CeraVe", 9), competitor("Avene", 3)])
        assert "CeraVe" in rec.text
        assert rec.next_steps[0] == "Add CeraVe to watchlist and enable weekly alert"
        assert len(rec.next_steps) == 3
        assert rec.risk == "medium"

    def test_recommendation_without_competitors(self):
        rec = build_recommendation([])
        assert rec.text.startswith("Coverage is low this month")
        assert rec.next_steps == ["Schedule auto re-run next Monday"]
        assert rec.risk == "none"


# ─── Full Pipeline ───────────────────────────────────────────────────────────

class TestFullPipeline:
    def test_scan_without_key(self):
        report = run_scan(brand="The Ordinary", region="EU", category="skincare")

        assert 0 < len(report.competitors) <= 6
        names = [c.name for c in report.competitors]
        assert "The Ordinary" not in names
        for c in report.competitors:
            assert c.summary.short
            assert len(c.citations) >= 1
        assert names[0] == "The INKEY List"
        assert report.source == "sample"
        assert report.fallback_peers == 6
        assert report.recommendation.risk == "low"
        assert report.run_id

    def test_scan_with_live_results(self):
        outcomes = {
            "CeraVe": api_response([api_article("CeraVe wins award"), api_article("CeraVe launches new serum")]),
            "Eucerin": api_response([api_article("Eucerin partnership")]),
        }
        client = stub_client(outcomes)
        report = run_scan(brand="La Roche-Posay", category="skincare", api_key="k", client=client, max_peers=8, top_n=8)

        names = [c.name for c in report.competitors]
        assert "La Roche-Posay" not in names
        assert len(names) == 7
        # Peers missing from `outcomes` time out and fall back to sample.
        assert report.source == "mixed"
        cerave = next(c for c in report.competitors if c.name == "CeraVe")
        assert cerave.mentions == 2
        assert "Brand momentum" in cerave.summary.strengths
        assert "Active product launches" in cerave.summary.strengths

    def test_every_call_failing_still_well_formed(self):
        plan = PeerResolutionAgent(api_key="k").run(build_request())
        client = stub_client({p: requests.Timeout() for p in plan.peers})
        report = run_scan(api_key="k", client=client)
        assert len(report.competitors) == 6
        assert all(c.origin == "sample" and c.citations for c in report.competitors)

    def test_unknown_category(self):
        report = run_scan(category="pet food")
        assert report.competitors == []
        assert report.recommendation.risk == "none"
        assert report.to_dict()["category"] == "pet food"

    def test_report_dict_shape(self):
        payload = run_scan().to_dict()
        assert set(payload) == {"brand", "region", "category", "competitors", "recommendation", "meta"}
        citation = payload["competitors"][0]["citations"][0]
        assert set(citation) == {"title", "source", "url", "publishedAt"}
        assert payload["meta"]["source"] == "sample"
        assert payload["meta"]["generated_at"].endswith("Z")

    def test_stage_failure_raises_scan_error(self, monkeypatch):
        def boom(self, data):
            raise RuntimeError("synthesis exploded")
        monkeypatch.setattr(SynthesisAgent, "run", boom)
        with pytest.raises(ScanError, match="synthesis exploded"):
            run_scan()

    def test_orchestrator_chains_stages_and_summarizes(self):
        class AddOne(Agent):
            def run(self, data):
                return data + 1

        pipeline = Orchestrator([AddOne("First"), AddOne("Second")])
        result = pipeline.execute(1)
        assert result.success
        assert result.data == 3
        assert result.agent_name == "Second"
        summary = pipeline.summary()
        assert pipeline.run_id in summary
        assert "[OK] First" in summary and "[OK] Second" in summary

    def test_orchestrator_stops_on_failure(self):
        class Fails(Agent):
            def run(self, data):
                raise ValueError("nope")

        later = MagicMock(spec=Agent)
        result = Orchestrator([Fails("Fails"), later]).execute(None)
        assert not result.success
        assert result.error == "nope"
        later.execute.assert_not_called()
