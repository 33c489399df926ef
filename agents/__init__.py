from .base import Agent, AgentResult, Orchestrator
from .peers import PeerResolutionAgent
from .news import NewsFetchAgent, NewsApiClient, NewsFetchError
from .synthesizer import SynthesisAgent
from .ranker import RankingAgent

__all__ = [
    "Agent", "AgentResult", "Orchestrator",
    "PeerResolutionAgent", "NewsFetchAgent", "NewsApiClient", "NewsFetchError",
    "SynthesisAgent", "RankingAgent",
]
