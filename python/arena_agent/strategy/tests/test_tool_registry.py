"""Tests for the tool registry, its agno functions and the arena-side agentic tools."""

import json

import pytest
from agno.tools.function import Function
from pydantic import BaseModel, ValidationError

from arena_agent.arena.decision import build_decision_payload
from arena_agent.arena.models import Trade
from arena_agent.arena.validation import ValidationGate
from arena_agent.config.constants import REASONING_MAX_LENGTH
from arena_agent.core.exceptions import StrategyOutputError, TransportError
from arena_agent.strategy.backend import AgnoBackend, to_agno_function
from arena_agent.strategy.models import TradePlan
from arena_agent.strategy.tool_registry import ToolRegistry
from arena_agent.strategy.tools import ArenaTools


class TestToolRegistry:
    @pytest.mark.asyncio
    async def test_infers_schema_and_executes(self):
        def add(a: int, b: int = 1) -> int:
            return a + b

        registry = ToolRegistry()
        registry.register("add", add, "Add numbers")

        assert await registry.list_tools()[0].invoke({"a": "2"}) == 3

    @pytest.mark.asyncio
    async def test_awaits_coroutines(self):
        async def echo(text: str) -> str:
            return text

        registry = ToolRegistry()
        registry.register("echo", echo, "Echo")

        assert await registry.list_tools()[0].invoke({"text": "hi"}) == "hi"

    @pytest.mark.asyncio
    async def test_explicit_schema_keeps_nested_models(self):
        class Args(BaseModel):
            trades: list[Trade]

        received = {}

        def record(trades):
            received["trades"] = trades
            return len(trades)

        registry = ToolRegistry()
        registry.register("record", record, "Record", args_schema=Args)

        await registry.list_tools()[0].invoke(
            {"trades": [{"from": "USD", "to": "TAO", "amount": 1}]}
        )
        assert received["trades"] == [Trade(from_asset="USD", to="TAO", amount=1)]

    def test_duplicate_registration(self):
        registry = ToolRegistry()
        registry.register("noop", lambda: None, "Nothing")
        with pytest.raises(ValueError, match="already registered"):
            registry.register("noop", lambda: None, "Nothing")

    def test_tools_keep_registration_order(self):
        registry = ToolRegistry()
        registry.register("b", lambda: None, "B")
        registry.register("a", lambda: None, "A")
        assert [tool.tool_id for tool in registry.list_tools()] == ["b", "a"]


@pytest.fixture
def arena_tools(client, agent_id, interval_start, provenance):
    return ArenaTools(
        client=client,
        gate=ValidationGate(client, agent_id),
        agent_id=agent_id,
        interval_start=interval_start,
        payload_builder=lambda trades, reasoning: build_decision_payload(
            trades, reasoning, provenance
        ),
    )


class TestArenaTools:

    @pytest.mark.asyncio
    async def test_get_portfolio_returns_json(self, arena_tools):
        data = json.loads(await arena_tools.get_portfolio())
        assert data["nav_usd"] == 1000.0
        assert data["balances"] == [{"asset": "USD", "amount": 1000.0}]

    @pytest.mark.asyncio
    async def test_submit_accepts_wire_dicts(self, arena_tools, arena):
        message = await arena_tools.submit_decision(
            [{"from": "USD", "to": "TAO", "amount": 25}], "Small buy."
        )

        assert message.startswith("Submitted. submission_id=sub-123")
        assert arena_tools.submission.accepted
        assert arena_tools.payload.decision.trades[0].from_asset == "USD"
        assert len(arena.submissions) == 1

    @pytest.mark.asyncio
    async def test_blocking_validation_reports_errors(self, arena_tools, arena):
        arena.validation = {"valid": False, "errors": ["Unknown asset FOO"], "warnings": []}

        message = await arena_tools.submit_decision([], "Hold.")

        assert "Unknown asset FOO" in message
        assert arena_tools.submission is None
        assert arena_tools.validation.is_blocking
        assert arena.submissions == []

    @pytest.mark.asyncio
    async def test_transport_errors_are_recorded(self, arena_tools, arena, agent_id):
        arena.failures[f"/v1/agents/{agent_id}/validate"] = (500, "boom")

        with pytest.raises(TransportError):
            await arena_tools.submit_decision([], "Hold.")

        assert isinstance(arena_tools.error, TransportError)


class TestAgnoFunctions:
    @pytest.fixture
    def functions(self, arena_tools):
        return {
            function.name: function
            for function in map(to_agno_function, arena_tools.build_registry().list_tools())
        }

    def test_submit_carries_registered_description_and_schema(self, functions):
        submit = functions["submit_decision"]

        assert isinstance(submit, Function)
        assert submit.description == (
            "Validate and submit your trades for this interval. Call exactly once, last."
        )
        properties = submit.parameters["properties"]
        assert properties["reasoning"]["maxLength"] == REASONING_MAX_LENGTH
        assert "from" in submit.parameters["$defs"]["Trade"]["properties"]
        assert submit.parameters["required"] == ["reasoning"]

    def test_portfolio_takes_no_arguments(self, functions):
        assert functions["get_portfolio"].parameters == {
            "type": "object",
            "properties": {},
        }

    @pytest.mark.asyncio
    async def test_entrypoint_rejects_oversized_reasoning(self, functions, arena):
        with pytest.raises(ValidationError):
            await functions["submit_decision"].entrypoint(
                trades=[], reasoning="x" * (REASONING_MAX_LENGTH + 1)
            )

        assert arena.requests == []

    @pytest.mark.asyncio
    async def test_entrypoint_validates_wire_trades(self, functions, arena):
        message = await functions["submit_decision"].entrypoint(
            trades=[{"from": "USD", "to": "TAO", "amount": 3}], reasoning="Buy."
        )

        assert message.startswith("Submitted.")
        assert len(arena.submissions) == 1

    def test_toolkits_pass_through(self):
        toolkit = object()
        assert to_agno_function(toolkit) is toolkit


class TestStructuredOutputCoercion:
    def test_instance_passes_through(self):
        plan = TradePlan(trades=[], reasoning="Hold.")
        assert AgnoBackend._coerce(plan, TradePlan) is plan

    def test_json_string(self):
        plan = AgnoBackend._coerce(
            '{"trades": [{"from": "USD", "to": "TAO", "amount": 5}], "reasoning": "Buy."}',
            TradePlan,
        )
        assert plan.trades[0].to == "TAO"

    def test_invalid_json(self):
        with pytest.raises(StrategyOutputError):
            AgnoBackend._coerce("not json", TradePlan)

    def test_missing_content(self):
        with pytest.raises(StrategyOutputError, match="no TradePlan"):
            AgnoBackend._coerce(None, TradePlan)
