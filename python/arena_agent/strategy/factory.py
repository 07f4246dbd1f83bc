from typing import Optional

from arena_agent.arena.client import ArenaClient
from arena_agent.arena.validation import ValidationGate
from arena_agent.config.settings import Provenance, RoutingPolicy, StrategyMode

from .agentic import AgenticStrategy
from .interfaces import LlmBackend, StrategyEngine, ToolSessionFactory
from .research_strategy import ResearchThenDecideStrategy
from .single_shot import SingleShotStrategy
from .tools import empty_tool_session


def build_strategy(
    mode: StrategyMode,
    *,
    backend: LlmBackend,
    routing: RoutingPolicy = RoutingPolicy.STRICT,
    tool_session: Optional[ToolSessionFactory] = None,
    client: Optional[ArenaClient] = None,
    gate: Optional[ValidationGate] = None,
    agent_id: Optional[str] = None,
    provenance: Optional[Provenance] = None,
) -> StrategyEngine:
    """Return the strategy implementation for ``mode``."""
    session = tool_session or empty_tool_session

    if mode is StrategyMode.SINGLE_SHOT:
        return SingleShotStrategy(backend, routing)
    if mode is StrategyMode.RESEARCH:
        return ResearchThenDecideStrategy(backend, session, routing)
    if mode is StrategyMode.AGENTIC:
        if client is None or gate is None or not agent_id:
            raise ValueError("Agentic strategy needs an arena client, gate and agent id")
        return AgenticStrategy(
            backend,
            session,
            client=client,
            gate=gate,
            agent_id=agent_id,
            provenance=provenance or Provenance(),
            routing=routing,
        )
    raise ValueError(f"Unsupported strategy mode: {mode}")
