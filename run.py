#!/usr/bin/env python3
"""
Quick CLI runner for the Competitor Scan.

Usage:
    python run.py                                   # Demo scan, printed report
    python run.py --brand CeraVe --region ES        # Demo scan for another brand
    python run.py --mode api                        # Start FastAPI server
    python run.py --mode dashboard                  # Start Streamlit dashboard
"""

import sys
import os
import argparse
import logging

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("run")


def demo(brand=None, region=None, category=None):
    """Run one scan and print the report."""
    from utils.pipeline import ScanError, run_scan

    try:
        report = run_scan(brand=brand, region=region, category=category)
    except ScanError as e:
        print(f"\nScan failed: {e}")
        sys.exit(1)

    req = report.request
    print("\n" + "=" * 70)
    print("  COMPETITOR SCAN")
    print("=" * 70)
    print(f"  Brand      : {req.brand}")
    print(f"  Region     : {req.region}")
    print(f"  Category   : {req.category}")
    print(f"  Source     : {report.source} ({report.fallback_peers}/{report.peers_queried} peers on sample data)")
    print(f"  Run ID     : {report.run_id}")
    print("=" * 70)

    if not report.competitors:
        print("  No catalog peers for this category.")

    for rank, c in enumerate(report.competitors, 1):
        print(f"\n#{rank}  {c.name}  —  {c.mentions} mentions [{c.origin}]")
        print(f"    {c.summary.short}")
        print(f"    Positioning:     {c.summary.positioning}")
        if c.summary.strengths:
            print(f"    Strengths:       {', '.join(c.summary.strengths)}")
        if c.summary.differentiators:
            print(f"    Differentiators: {', '.join(c.summary.differentiators)}")
        for cite in c.citations:
            print(f"      - {cite.title} ({cite.source or 'unknown source'})")

    rec = report.recommendation
    print("\n" + "─" * 70)
    print(f"  RECOMMENDATION  (risk: {rec.risk})")
    print("─" * 70)
    print(f"  {rec.text}")
    for step in rec.next_steps:
        print(f"   → {step}")
    print("=" * 70 + "\n")
    return report


def start_api():
    import uvicorn
    from config.settings import settings
    uvicorn.run(
        "api.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
    )


def start_dashboard():
    import subprocess
    subprocess.run([
        sys.executable, "-m", "streamlit", "run",
        os.path.join(os.path.dirname(os.path.abspath(__file__)), "dashboard", "app.py"),
        "--server.port", "8501",
    ])


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Competitor Scan")
    parser.add_argument(
        "--mode",
        choices=["demo", "api", "dashboard"],
        default="demo",
        help="Run mode: demo | api | dashboard",
    )
    parser.add_argument("--brand", help="Requesting brand (excluded from peers)")
    parser.add_argument("--region", help="Region code, e.g. EU, ES, US")
    parser.add_argument("--category", help="Catalog category, e.g. skincare")
    args = parser.parse_args()

    if args.mode == "demo":
        demo(args.brand, args.region, args.category)
    elif args.mode == "api":
        start_api()
    elif args.mode == "dashboard":
        start_dashboard()
