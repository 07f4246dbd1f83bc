from loguru import logger

from arena_agent.arena.snapshot import MarketSnapshot
from arena_agent.config.settings import RoutingPolicy, StrategyMode

from .interfaces import LlmBackend, StrategyEngine
from .models import StrategyOutput, TradePlan
from .prompts import build_single_shot_prompt, build_system_prompt


class SingleShotStrategy(StrategyEngine):
    """One structured generation over the snapshot summary, no tools."""

    def __init__(
        self, backend: LlmBackend, routing: RoutingPolicy = RoutingPolicy.STRICT
    ) -> None:
        self._backend = backend
        self._instructions = build_system_prompt(routing)

    async def decide(self, snapshot: MarketSnapshot) -> StrategyOutput:
        prompt = build_single_shot_prompt(snapshot)
        logger.debug("Single-shot prompt: {}", prompt)
        plan = await self._backend.generate_structured(
            instructions=self._instructions,
            prompt=prompt,
            output_schema=TradePlan,
        )
        return StrategyOutput(
            trades=plan.trades,
            reasoning=plan.reasoning,
            mode=StrategyMode.SINGLE_SHOT,
        )
