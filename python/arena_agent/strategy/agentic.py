from loguru import logger

from arena_agent.arena.client import ArenaClient
from arena_agent.arena.decision import build_decision_payload
from arena_agent.arena.snapshot import MarketSnapshot
from arena_agent.arena.validation import ValidationGate
from arena_agent.config.constants import AGENTIC_MAX_STEPS, SUBMIT_TOOL_NAME
from arena_agent.config.settings import Provenance, RoutingPolicy, StrategyMode
from arena_agent.core.exceptions import EngineIncompleteError, ValidationFailure

from .interfaces import LlmBackend, StrategyEngine, ToolSessionFactory
from .loop import BoundedStepLoop
from .models import StrategyOutput
from .prompts import AGENTIC_TASK, build_agentic_prompt, build_system_prompt
from .tools import ArenaTools


class AgenticStrategy(StrategyEngine):
    """Single tool-driven run in which the model fetches state and submits itself.

    The call order (portfolio, research, submit last) is only requested in the
    prompt. A run that ends without a submission raises EngineIncompleteError
    and nothing is committed. Once a submission is committed the run counts as
    submitted, even if an earlier tool call failed.
    """

    def __init__(
        self,
        backend: LlmBackend,
        tool_session: ToolSessionFactory,
        *,
        client: ArenaClient,
        gate: ValidationGate,
        agent_id: str,
        provenance: Provenance,
        routing: RoutingPolicy = RoutingPolicy.STRICT,
        max_steps: int = AGENTIC_MAX_STEPS,
    ) -> None:
        self._backend = backend
        self._tool_session = tool_session
        self._client = client
        self._gate = gate
        self._agent_id = agent_id
        self._provenance = provenance
        self._loop = BoundedStepLoop(max_steps, terminal_tools=[SUBMIT_TOOL_NAME])
        self._instructions = build_system_prompt(routing, AGENTIC_TASK)

    def _build_tools(self, snapshot: MarketSnapshot) -> ArenaTools:
        return ArenaTools(
            client=self._client,
            gate=self._gate,
            agent_id=self._agent_id,
            interval_start=snapshot.interval_start,
            payload_builder=lambda trades, reasoning: build_decision_payload(
                trades, reasoning, self._provenance
            ),
        )

    async def decide(self, snapshot: MarketSnapshot) -> StrategyOutput:
        arena_tools = self._build_tools(snapshot)
        registry = arena_tools.build_registry()

        logger.info("Agentic run (max {} steps)...", self._loop.max_steps)
        async with self._tool_session() as market_tools:
            events = self._backend.run_with_tools(
                instructions=self._instructions,
                prompt=build_agentic_prompt(snapshot),
                tools=[*registry.list_tools(), *market_tools],
                max_steps=self._loop.max_steps,
            )
            result = await self._loop.run(events)

        committed = arena_tools.submission is not None
        if arena_tools.error is not None:
            if not committed:
                raise arena_tools.error
            # the framework reported the failure to the model, which still submitted
            logger.warning(
                "Agentic run hit a tool error before submitting: {}", arena_tools.error
            )

        if not committed or arena_tools.payload is None:
            validation = arena_tools.validation
            if validation is not None and validation.is_blocking:
                raise ValidationFailure(validation.errors, validation.warnings)
            raise EngineIncompleteError(len(result.steps), self._loop.max_steps)

        payload = arena_tools.payload
        return StrategyOutput(
            trades=payload.decision.trades,
            reasoning=payload.reasoning,
            mode=StrategyMode.AGENTIC,
            tool_calls=result.tool_calls,
            payload=payload,
            validation=arena_tools.validation,
            submission=arena_tools.submission,
        )
