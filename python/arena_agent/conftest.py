"""Shared fixtures: an in-memory arena API and a scripted LLM backend."""

import json
from typing import Any, Dict, List, Optional, Sequence, Tuple

import httpx
import pytest
import pytest_asyncio
from agno.tools.function import Function
from loguru import logger

from arena_agent.arena.client import ArenaClient
from arena_agent.arena.models import (
    AssetInfo,
    ClockResponse,
    Interval,
    Portfolio,
    VersionResponse,
)
from arena_agent.arena.snapshot import MarketSnapshot
from arena_agent.config.settings import Provenance
from arena_agent.strategy.backend import to_agno_function
from arena_agent.strategy.interfaces import LlmBackend
from arena_agent.strategy.models import ReasoningEvent, ReasoningEventKind, TradePlan

AGENT_ID = "agent-1"
INTERVAL_START = "2026-10-19T12:00:00Z"
API_URL = "http://arena.test"


class FakeArena:
    """Minimal arena API served through ``httpx.MockTransport``."""

    def __init__(self) -> None:
        self.schema_version = 1
        self.balances: List[Dict[str, Any]] = [{"asset": "USD", "amount": 1000.0}]
        self.nav_usd = 1000.0
        self.assets: List[Dict[str, Any]] = [
            {"asset_id": "USD", "name": "US Dollar", "subnet_id": None},
            {"asset_id": "TAO", "name": "Bittensor", "subnet_id": None},
            {"asset_id": "ALPHA_1", "name": "Subnet 1", "subnet_id": 1},
        ]
        self.validation: Dict[str, Any] = {"valid": True, "errors": [], "warnings": []}
        self.submission: Dict[str, Any] = {
            "accepted": True,
            "submission_id": "sub-123",
            "interval_start": INTERVAL_START,
        }
        self.failures: Dict[str, Tuple[int, str]] = {}
        self.requests: List[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path in self.failures:
            status, body = self.failures[path]
            return httpx.Response(status, text=body)

        routes = {
            ("GET", "/v1/version"): lambda: {
                "schema_version": self.schema_version,
                "server_time": "2026-10-19T12:05:00Z",
                "interval_seconds": 900,
            },
            ("GET", "/v1/game/clock"): lambda: {
                "current_interval": {
                    "id": "interval-42",
                    "start_time": INTERVAL_START,
                    "end_time": "2026-10-19T12:15:00Z",
                },
                "server_time": "2026-10-19T12:05:00Z",
                "seconds_remaining": 600,
            },
            ("GET", f"/v1/agents/{AGENT_ID}/portfolio"): lambda: {
                "agent_id": AGENT_ID,
                "balances": self.balances,
                "nav_usd": self.nav_usd,
                "updated_at": "2026-10-19T12:04:00Z",
            },
            ("GET", "/v1/game/assets"): lambda: self.assets,
            ("POST", f"/v1/agents/{AGENT_ID}/validate"): lambda: self.validation,
            ("POST", f"/v1/agents/{AGENT_ID}/submissions"): lambda: self.submission,
        }
        route = routes.get((request.method, path))
        if route is None:
            return httpx.Response(404, text="not found")
        return httpx.Response(200, json=route())

    @property
    def paths(self) -> List[str]:
        return [request.url.path for request in self.requests]

    def requests_to(self, path: str) -> List[httpx.Request]:
        return [request for request in self.requests if request.url.path == path]

    def bodies_to(self, path: str) -> List[Dict[str, Any]]:
        return [json.loads(request.content) for request in self.requests_to(path)]

    @property
    def submissions(self) -> List[httpx.Request]:
        return self.requests_to(f"/v1/agents/{AGENT_ID}/submissions")


class ScriptedBackend(LlmBackend):
    """LLM backend replaying a fixed script.

    Script entries for tool runs:
    - ``("content", text)``
    - ``("tool", name, args)``: runs the matching local tool through its agno
      function; tool exceptions become the tool result text, as in agno
    - ``("tool", name, args, result)``: reports a canned result
    - ``("raise", exc)``
    """

    def __init__(
        self,
        script: Optional[Sequence[tuple]] = None,
        plan: Optional[TradePlan] = None,
    ) -> None:
        self.script = list(script or [])
        self.plan = plan or TradePlan(trades=[], reasoning="Holding positions.")
        self.tool_runs: List[Dict[str, Any]] = []
        self.structured_calls: List[Dict[str, Any]] = []
        self.stream_closed = False

    async def run_with_tools(self, *, instructions, prompt, tools, max_steps):
        self.tool_runs.append(
            {
                "instructions": instructions,
                "prompt": prompt,
                "tools": list(tools),
                "max_steps": max_steps,
            }
        )
        try:
            for entry in self.script:
                kind = entry[0]
                if kind == "content":
                    yield ReasoningEvent(kind=ReasoningEventKind.CONTENT, text=entry[1])
                elif kind == "raise":
                    raise entry[1]
                elif kind == "tool":
                    name, args = entry[1], entry[2]
                    yield ReasoningEvent(
                        kind=ReasoningEventKind.TOOL_STARTED,
                        tool_name=name,
                        tool_args=args,
                    )
                    if len(entry) > 3:
                        result = entry[3]
                    else:
                        result = await self._invoke(tools, name, args)
                    yield ReasoningEvent(
                        kind=ReasoningEventKind.TOOL_COMPLETED,
                        tool_name=name,
                        tool_args=args,
                        result=result,
                    )
        finally:
            self.stream_closed = True

    @staticmethod
    async def _invoke(tools, name, args):
        for tool in tools:
            function = to_agno_function(tool)
            if isinstance(function, Function) and function.name == name:
                try:
                    return await function.entrypoint(**args)
                except Exception as exc:
                    return f"Error: {exc}"
        raise AssertionError(f"tool {name} was not offered")

    async def generate_structured(self, *, instructions, prompt, output_schema):
        self.structured_calls.append(
            {"instructions": instructions, "prompt": prompt, "schema": output_schema}
        )
        return self.plan


class RecordingToolSession:
    """Tool session factory that records enter/exit of each session."""

    def __init__(self, tools: Optional[List[Any]] = None) -> None:
        self.tools = list(tools or [])
        self.opened = 0
        self.closed = 0

    def __call__(self):
        return self

    async def __aenter__(self):
        self.opened += 1
        return list(self.tools)

    async def __aexit__(self, exc_type, exc, tb):
        self.closed += 1
        return False


@pytest.fixture
def arena() -> FakeArena:
    return FakeArena()


@pytest_asyncio.fixture
async def client(arena):
    async with ArenaClient(
        API_URL + "/", "secret-token", transport=httpx.MockTransport(arena.handler)
    ) as arena_client:
        yield arena_client


@pytest.fixture
def provenance() -> Provenance:
    return Provenance(
        repo_url="https://github.com/acme/agent",
        commit_sha="abc123",
        workflow_run_url="https://github.com/acme/agent/actions/runs/7",
    )


@pytest.fixture
def snapshot() -> MarketSnapshot:
    return MarketSnapshot(
        version=VersionResponse(
            schema_version=1, server_time="2026-10-19T12:05:00Z", interval_seconds=900
        ),
        clock=ClockResponse(
            current_interval=Interval(
                id="interval-42",
                start_time=INTERVAL_START,
                end_time="2026-10-19T12:15:00Z",
            ),
            server_time="2026-10-19T12:05:00Z",
            seconds_remaining=600,
        ),
        portfolio=Portfolio(
            agent_id=AGENT_ID,
            balances=[{"asset": "USD", "amount": 900.0}, {"asset": "TAO", "amount": 0.25}],
            nav_usd=1000.0,
            updated_at="2026-10-19T12:04:00Z",
        ),
        assets=[
            AssetInfo(asset_id="USD", name="US Dollar"),
            AssetInfo(asset_id="TAO", name="Bittensor"),
            AssetInfo(asset_id="ALPHA_1", name="Subnet 1", subnet_id=1),
        ],
    )


@pytest.fixture
def scripted_backend():
    return ScriptedBackend


@pytest.fixture
def tool_session():
    return RecordingToolSession


@pytest.fixture
def agent_id() -> str:
    return AGENT_ID


@pytest.fixture
def interval_start() -> str:
    return INTERVAL_START


@pytest.fixture
def captured_logs():
    """Collect loguru records emitted during the test."""
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)
