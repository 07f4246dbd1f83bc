"""Wires settings into concrete components and runs the pipeline once."""

from typing import Optional

import httpx
from loguru import logger

from arena_agent.arena.client import ArenaClient
from arena_agent.arena.snapshot import MarketSnapshotReader
from arena_agent.arena.validation import ValidationGate
from arena_agent.config.settings import AgentSettings
from arena_agent.strategy.factory import build_strategy
from arena_agent.strategy.interfaces import LlmBackend, ToolSessionFactory
from arena_agent.strategy.tools import taostats_tool_session

from .orchestrator import DecisionPipeline, PipelineResult


def _default_backend(settings: AgentSettings) -> LlmBackend:
    from arena_agent.strategy.backend import AgnoBackend
    from arena_agent.utils.model import create_model_from_settings

    return AgnoBackend(
        create_model_from_settings(settings), debug_mode=settings.debug_mode
    )


def _default_tool_session(settings: AgentSettings) -> ToolSessionFactory:
    api_key = (
        settings.taostats_api_key.get_secret_value()
        if settings.taostats_api_key
        else None
    )
    return taostats_tool_session(settings.taostats_mcp_url, api_key)


async def run_pipeline(
    settings: AgentSettings,
    *,
    backend: Optional[LlmBackend] = None,
    tool_session: Optional[ToolSessionFactory] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> PipelineResult:
    """Build every component from ``settings`` and run one decision cycle."""
    logger.info("Starting agent {}", settings.agent_id)
    backend = backend or _default_backend(settings)
    tool_session = tool_session or _default_tool_session(settings)

    async with ArenaClient(
        settings.api_url,
        settings.agent_token.get_secret_value(),
        timeout=settings.http_timeout,
        transport=transport,
    ) as client:
        gate = ValidationGate(client, settings.agent_id)
        strategy = build_strategy(
            settings.strategy,
            backend=backend,
            routing=settings.routing,
            tool_session=tool_session,
            client=client,
            gate=gate,
            agent_id=settings.agent_id,
            provenance=settings.provenance,
        )
        logger.info("Using {} strategy", settings.strategy.value)
        pipeline = DecisionPipeline(
            reader=MarketSnapshotReader(client, settings.agent_id),
            strategy=strategy,
            gate=gate,
            client=client,
            agent_id=settings.agent_id,
            provenance=settings.provenance,
        )
        return await pipeline.run()


async def run_agent(settings: AgentSettings, **kwargs) -> int:
    """Run one cycle and return the process exit code."""
    try:
        result = await run_pipeline(settings, **kwargs)
    except Exception:
        logger.exception("Fatal error while setting up the agent")
        return 1
    return result.exit_code
