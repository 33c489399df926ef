"""
Streamlit Dashboard
Competitor Scan

Sections:
  1. Sidebar — brand / region / category
  2. Overview KPIs
  3. Mention Ranking chart
  4. Competitor cards (summary, strengths, citations)
  5. Recommendation
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import streamlit as st
import pandas as pd
import plotly.express as px
from typing import Dict, Optional
import logging

from config.catalog import supported_categories
from config.settings import settings
from models.schemas import CompetitorSummary, ScanReport
from utils.pipeline import run_scan

logger = logging.getLogger(__name__)

# ─── Page Config ─────────────────────────────────────────────────────────────

st.set_page_config(
    page_title="Competitor Scan",
    page_icon="🔍",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .sample-badge {
        background: #ffa500;
        color: white;
        border-radius: 20px;
        padding: 2px 10px;
        font-size: 12px;
        font-weight: bold;
    }
    .live-badge {
        background: #00cc88;
        color: white;
        border-radius: 20px;
        padding: 2px 10px;
        font-size: 12px;
    }
</style>
""", unsafe_allow_html=True)

RISK_ICONS = {"low": "🟢", "medium": "🟠", "none": "⚪"}


# ─── State Management ────────────────────────────────────────────────────────

def get_state():
    if "report" not in st.session_state:
        st.session_state.report = None
    return st.session_state


# ─── Scan Runner ─────────────────────────────────────────────────────────────

@st.cache_data(ttl=900, show_spinner=False)
def run_scan_cached(brand: str, region: str, category: str) -> ScanReport:
    """Run one scan (cached so widget changes don't re-query the news API)."""
    return run_scan(brand=brand, region=region, category=category)


# ─── Sidebar ─────────────────────────────────────────────────────────────────

def render_sidebar() -> Dict:
    with st.sidebar:
        st.title("🔍 Scan")
        st.divider()

        brand = st.text_input("Your brand", settings.DEFAULT_BRAND)
        region = st.text_input("Region code", settings.DEFAULT_REGION, help="ES, PT, BR, MX query Spanish-language press")
        categories = supported_categories()
        category = st.selectbox(
            "Category",
            options=categories,
            index=categories.index(settings.DEFAULT_CATEGORY) if settings.DEFAULT_CATEGORY in categories else 0,
        )

        st.divider()
        if not settings.NEWS_API_KEY:
            st.warning("NEWS_API_KEY is not set. Results use sample coverage.")
        run_button = st.button("🚀 Run Scan", type="primary", use_container_width=True)

    return {"brand": brand, "region": region, "category": category, "run": run_button}


# ─── KPI Cards ───────────────────────────────────────────────────────────────

def render_kpis(report: ScanReport):
    col1, col2, col3, col4, col5 = st.columns(5)
    with col1:
        st.metric("🏢 Peers", len(report.competitors))
    with col2:
        st.metric("📰 Mentions", sum(c.mentions for c in report.competitors))
    with col3:
        st.metric("🔗 Citations", report.total_citations)
    with col4:
        risk = report.recommendation.risk
        st.metric("⚠️ Risk", f"{RISK_ICONS.get(risk, '')} {risk}")
    with col5:
        st.metric("🗞️ Data Source", report.source, delta=f"{report.fallback_peers} on sample", delta_color="off")


# ─── Mention Ranking ─────────────────────────────────────────────────────────

def render_mention_chart(report: ScanReport):
    st.subheader("📈 Mention Ranking")

    df = pd.DataFrame([{
        "Competitor": f"#{rank} {c.name}",
        "Mentions": c.mentions,
        "Origin": c.origin,
    } for rank, c in enumerate(report.competitors, 1)])

    fig = px.bar(
        df.iloc[::-1],
        x="Mentions",
        y="Competitor",
        orientation="h",
        color="Origin",
        color_discrete_map={"newsapi": "#4a90e2", "sample": "#ffa500"},
        title=f"Press mentions, last {settings.LOOKBACK_DAYS} days",
    )
    fig.update_layout(height=max(300, len(df) * 45))
    st.plotly_chart(fig, use_container_width=True)


# ─── Competitor Cards ────────────────────────────────────────────────────────

def render_competitor_card(rank: int, c: CompetitorSummary):
    badge = "sample-badge" if c.origin == "sample" else "live-badge"
    st.markdown(
        f"### #{rank} {c.name} <span class='{badge}'>{c.origin}</span>",
        unsafe_allow_html=True,
    )
    st.markdown(f"**{c.mentions} mentions** · {c.summary.short}")
    st.markdown(f"*Positioning:* {c.summary.positioning}")

    col_l, col_r = st.columns(2)
    with col_l:
        st.markdown("**💪 Strengths**")
        for s in c.summary.strengths or ["—"]:
            st.markdown(f"- {s}")
        st.markdown("**✨ Differentiators**")
        for d in c.summary.differentiators or ["—"]:
            st.markdown(f"- {d}")
    with col_r:
        st.markdown("**🔗 Citations**")
        for cite in c.citations:
            source = cite.source or "unknown"
            if cite.url:
                st.markdown(f"- [{cite.title}]({cite.url}) · _{source}_")
            else:
                st.markdown(f"- {cite.title} · _{source}_")
    st.divider()


def render_recommendation(report: ScanReport):
    rec = report.recommendation
    st.subheader(f"💡 Recommendation {RISK_ICONS.get(rec.risk, '')}")
    if rec.risk == "low":
        st.success(rec.text)
    else:
        st.info(rec.text)
    for step in rec.next_steps:
        st.markdown(f"- {step}")


# ─── Main App ─────────────────────────────────────────────────────────────────

def main():
    st.title("🔍 Competitor Scan")
    st.caption("Who are my category peers and what have they been doing in the press lately?")

    config = render_sidebar()
    state = get_state()

    if config["run"]:
        with st.spinner("Querying the press for each peer..."):
            try:
                state.report = run_scan_cached(config["brand"], config["region"], config["category"])
            except Exception as e:
                st.error(f"❌ Scan failed: {e}")
                return

    report: Optional[ScanReport] = state.report

    if report is None:
        st.info("👈 **Pick a brand and category in the sidebar and click 'Run Scan'.**")
        return

    req = report.request
    st.caption(f"{req.brand} · {req.region} · {req.category} · run {report.run_id}")

    if report.source != "newsapi":
        st.warning("Some or all competitors below are built from sample coverage, not live press.")

    render_kpis(report)
    st.divider()

    if not report.competitors:
        st.info("No catalog peers for this category.")
        render_recommendation(report)
        return

    render_recommendation(report)
    st.divider()

    tab1, tab2 = st.tabs(["🏢 Competitors", "📈 Mention Ranking"])
    with tab1:
        for rank, c in enumerate(report.competitors, 1):
            render_competitor_card(rank, c)
    with tab2:
        render_mention_chart(report)


if __name__ == "__main__":
    main()
