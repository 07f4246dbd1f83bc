"""Two-phase strategy: tool-augmented research, then a structured decision.

Keeping tool use out of the schema-constrained call means the decision phase
only ever sees text, so oversized or missing research output is handled by the
artifact policy in :mod:`.research` rather than by the trade schema.
"""

from loguru import logger

from arena_agent.arena.snapshot import MarketSnapshot
from arena_agent.config.constants import RESEARCH_MAX_CHARS, RESEARCH_MAX_STEPS
from arena_agent.config.settings import RoutingPolicy, StrategyMode

from .interfaces import LlmBackend, StrategyEngine, ToolSessionFactory
from .loop import BoundedStepLoop
from .models import (
    ResearchArtifact,
    ResearchSource,
    StepLoopResult,
    StrategyOutput,
    TradePlan,
)
from .prompts import (
    DECISION_TASK,
    RESEARCH_TASK,
    build_decision_prompt,
    build_research_prompt,
    build_system_prompt,
)
from .research import build_research_artifact


class ResearchThenDecideStrategy(StrategyEngine):
    def __init__(
        self,
        backend: LlmBackend,
        tool_session: ToolSessionFactory,
        routing: RoutingPolicy = RoutingPolicy.STRICT,
        *,
        max_steps: int = RESEARCH_MAX_STEPS,
        max_research_chars: int = RESEARCH_MAX_CHARS,
    ) -> None:
        self._backend = backend
        self._tool_session = tool_session
        self._loop = BoundedStepLoop(max_steps)
        self._max_research_chars = max_research_chars
        self._research_instructions = build_system_prompt(routing, RESEARCH_TASK)
        self._decision_instructions = build_system_prompt(routing, DECISION_TASK)

    async def research(self, snapshot: MarketSnapshot) -> StepLoopResult:
        """Phase 1: free-text generation with market data tools, step-bounded."""
        logger.info("Research phase (max {} steps)...", self._loop.max_steps)
        async with self._tool_session() as tools:
            events = self._backend.run_with_tools(
                instructions=self._research_instructions,
                prompt=build_research_prompt(snapshot),
                tools=tools,
                max_steps=self._loop.max_steps,
            )
            result = await self._loop.run(events)

        for call in result.tool_calls:
            logger.info("Research tool call: {} {}", call.tool_name, call.tool_args)
        logger.info(
            "Research finished after {} step(s), {} tool call(s)",
            len(result.steps),
            len(result.tool_calls),
        )
        return result

    async def decide(self, snapshot: MarketSnapshot) -> StrategyOutput:
        loop_result = await self.research(snapshot)
        artifact = build_research_artifact(loop_result, self._max_research_chars)
        self._log_artifact(artifact)

        logger.info("Decision phase...")
        plan = await self._backend.generate_structured(
            instructions=self._decision_instructions,
            prompt=build_decision_prompt(snapshot, artifact.text),
            output_schema=TradePlan,
        )
        return StrategyOutput(
            trades=plan.trades,
            reasoning=plan.reasoning,
            mode=StrategyMode.RESEARCH,
            research=artifact,
            tool_calls=loop_result.tool_calls,
        )

    def _log_artifact(self, artifact: ResearchArtifact) -> None:
        if artifact.source is ResearchSource.TOOL_RESULTS:
            logger.warning("Research summary was empty; using raw tool results instead")
        elif artifact.source is ResearchSource.EMPTY:
            logger.warning("Research produced neither a summary nor tool results")
        if artifact.truncated:
            logger.warning(
                "Research artifact truncated to {} characters", self._max_research_chars
            )
