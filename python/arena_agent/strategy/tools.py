"""Tools offered to the strategies.

Market data comes from the Taostats MCP server through an agno ``MCPTools``
session. The agentic strategy additionally gets arena-side tools that read the
portfolio and validate + submit the decision.
"""

import json
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, List, Optional

from loguru import logger
from pydantic import BaseModel, Field

from arena_agent.arena.client import ArenaClient
from arena_agent.arena.models import (
    DecisionPayload,
    SubmissionResult,
    Trade,
    ValidationResult,
)
from arena_agent.arena.validation import ValidationGate
from arena_agent.config.constants import (
    PORTFOLIO_TOOL_NAME,
    REASONING_MAX_LENGTH,
    SUBMIT_TOOL_NAME,
)

from .interfaces import ToolSessionFactory
from .tool_registry import ToolRegistry

PayloadBuilder = Callable[[List[Trade], str], DecisionPayload]


@asynccontextmanager
async def empty_tool_session() -> AsyncIterator[List[Any]]:
    """Tool session offering no tools."""
    yield []


def taostats_tool_session(
    url: str,
    api_key: Optional[str] = None,
    timeout_seconds: int = 30,
) -> ToolSessionFactory:
    """Return a factory opening an MCP session against the Taostats data server.

    The MCP connection lives exactly as long as the ``async with`` block of the
    caller and is closed on every exit path.
    """

    @asynccontextmanager
    async def session() -> AsyncIterator[List[Any]]:
        from agno.tools.mcp import MCPTools, SSEClientParams

        headers = {"Authorization": api_key} if api_key else None
        params = SSEClientParams(url=url, headers=headers)
        async with MCPTools(
            server_params=params, transport="sse", timeout_seconds=timeout_seconds
        ) as mcp_tools:
            logger.info("Connected to market data tools at {}", url)
            try:
                yield [mcp_tools]
            finally:
                logger.info("Closing market data tool session")

    return session


class SubmitDecisionArgs(BaseModel):
    trades: List[Trade] = Field(
        default_factory=list,
        description="Trades to execute this interval; empty to hold positions",
    )
    reasoning: str = Field(
        ...,
        max_length=REASONING_MAX_LENGTH,
        description="1-2 sentence explanation of your trading decision",
    )


class ArenaTools:
    """Arena-side tools for one agentic run, bound to a single interval.

    Validation and submission outcomes are recorded on the instance so the
    strategy can tell whether a decision was committed. Errors raised by the
    arena are recorded as well and re-raised by the strategy after the run,
    so a framework that turns tool exceptions into text cannot hide them.
    """

    def __init__(
        self,
        client: ArenaClient,
        gate: ValidationGate,
        agent_id: str,
        interval_start: str,
        payload_builder: PayloadBuilder,
    ) -> None:
        self._client = client
        self._gate = gate
        self._agent_id = agent_id
        self._interval_start = interval_start
        self._payload_builder = payload_builder
        self.payload: Optional[DecisionPayload] = None
        self.validation: Optional[ValidationResult] = None
        self.submission: Optional[SubmissionResult] = None
        self.error: Optional[Exception] = None

    async def get_portfolio(self) -> str:
        """Return the agent's current balances and NAV as JSON."""
        try:
            portfolio = await self._client.get_portfolio(self._agent_id)
        except Exception as exc:
            self.error = exc
            raise
        return json.dumps(portfolio.model_dump(mode="json"))

    async def submit_decision(self, trades: List[Trade], reasoning: str) -> str:
        """Validate the trades with the arena and submit them for this interval."""
        trades = [Trade.model_validate(trade) for trade in trades]
        payload = self._payload_builder(trades, reasoning)
        try:
            validation = await self._gate.validate(payload)
            self.validation = validation
            if validation.is_blocking:
                for error in validation.errors:
                    logger.error("Validation error: {}", error)
                return "Validation failed, nothing was submitted: " + "; ".join(
                    validation.errors or ["decision marked invalid"]
                )

            logger.info("Submitting decision with {} trade(s)...", len(trades))
            submission = await self._client.submit_decision(
                self._agent_id, payload, self._interval_start
            )
        except Exception as exc:
            self.error = exc
            raise

        self.payload = payload
        self.submission = submission
        return (
            f"Submitted. submission_id={submission.submission_id} "
            f"interval={submission.interval_start}"
        )

    def build_registry(self) -> ToolRegistry:
        registry = ToolRegistry()
        registry.register(
            PORTFOLIO_TOOL_NAME,
            self.get_portfolio,
            "Fetch your current portfolio balances and NAV (USD).",
        )
        registry.register(
            SUBMIT_TOOL_NAME,
            self.submit_decision,
            "Validate and submit your trades for this interval. Call exactly once, last.",
            args_schema=SubmitDecisionArgs,
        )
        return registry
