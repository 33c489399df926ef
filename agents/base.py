"""
Base Agent class and Orchestrator
Competitor Scan
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional
from dataclasses import dataclass
from datetime import datetime, timezone
import logging
import traceback
import time
import uuid


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class AgentResult:
    """Standardized result envelope returned by every agent."""
    agent_name: str
    success: bool
    data: Any = None
    error: Optional[str] = None
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    @property
    def duration_seconds(self) -> Optional[float]:
        if self.started_at and self.finished_at:
            return (self.finished_at - self.started_at).total_seconds()
        return None

    def __repr__(self):
        status = "OK" if self.success else "FAILED"
        dur = f" ({self.duration_seconds:.2f}s)" if self.duration_seconds else ""
        return f"[{status}] {self.agent_name}{dur}"


class Agent(ABC):
    """
    Abstract base class for all scan stages.
    Subclasses must implement `run(data)`.
    """

    def __init__(self, name: str):
        self.name = name
        self.logger = logging.getLogger(f"agent.{name}")

    @abstractmethod
    def run(self, data: Any) -> Any:
        raise NotImplementedError

    def execute(self, data: Any) -> AgentResult:
        """
        Wraps `run()` with timing, structured logging, and error handling.
        """
        started_at = _now()
        self.logger.debug(f"[{self.name}] Starting...")
        try:
            result = self.run(data)
            finished_at = _now()
            duration = (finished_at - started_at).total_seconds()
            self.logger.info(f"[{self.name}] Completed in {duration:.2f}s")
            return AgentResult(
                agent_name=self.name,
                success=True,
                data=result,
                started_at=started_at,
                finished_at=finished_at,
            )
        except Exception as e:
            finished_at = _now()
            self.logger.error(f"[{self.name}] Failed: {e}\n{traceback.format_exc()}")
            return AgentResult(
                agent_name=self.name,
                success=False,
                error=str(e) or e.__class__.__name__,
                started_at=started_at,
                finished_at=finished_at,
            )


class Orchestrator:
    """
    Sequential scan pipeline orchestrator.
    Each agent's output becomes the next agent's input; the first
    failure ends the run.
    """

    def __init__(self, agents: List[Agent]):
        self.agents = agents
        self.logger = logging.getLogger("orchestrator")
        self.run_history: List[AgentResult] = []
        self.run_id: Optional[str] = None

    def execute(self, input_data: Any) -> AgentResult:
        """Execute the full pipeline and return the final AgentResult."""
        self.run_history.clear()
        self.run_id = uuid.uuid4().hex[:12]
        data = input_data
        total_start = time.perf_counter()

        self.logger.info(
            f"Scan {self.run_id} starting: {len(self.agents)} stages"
        )

        for i, agent in enumerate(self.agents, 1):
            self.logger.debug(f"  [{i}/{len(self.agents)}] {agent.name}")
            result = agent.execute(data)
            self.run_history.append(result)

            if not result.success:
                self.logger.error(f"Scan {self.run_id}: '{agent.name}' failed: {result.error}")
                return result
            data = result.data

        elapsed = time.perf_counter() - total_start
        self.logger.info(f"Scan {self.run_id} complete in {elapsed:.2f}s")
        if not self.run_history:
            return AgentResult(agent_name="Orchestrator", success=True, data=data)
        return self.run_history[-1]

    def summary(self) -> str:
        lines = [f"Scan {self.run_id}:"]
        for r in self.run_history:
            lines.append(f"  {r}")
        return "\n".join(lines)
