from __future__ import annotations

from abc import ABC, abstractmethod
from typing import (
    Any,
    AsyncContextManager,
    AsyncIterator,
    Callable,
    List,
    Sequence,
    Type,
    TypeVar,
)

from pydantic import BaseModel

from arena_agent.arena.snapshot import MarketSnapshot

from .models import ReasoningEvent, StrategyOutput

SchemaT = TypeVar("SchemaT", bound=BaseModel)

# Zero-argument callable returning an async context manager that yields the
# tool list for one reasoning run and releases the underlying session on exit.
ToolSessionFactory = Callable[[], AsyncContextManager[List[Any]]]


class LlmBackend(ABC):
    """Generation capability consumed by the strategies.

    Concrete implementations wrap an LLM framework; tests use scripted fakes.
    """

    @abstractmethod
    def run_with_tools(
        self,
        *,
        instructions: str,
        prompt: str,
        tools: Sequence[Any],
        max_steps: int,
    ) -> AsyncIterator[ReasoningEvent]:
        """Run free-text generation with tool access, yielding events as they occur."""
        raise NotImplementedError

    @abstractmethod
    async def generate_structured(
        self,
        *,
        instructions: str,
        prompt: str,
        output_schema: Type[SchemaT],
    ) -> SchemaT:
        """Run a single schema-constrained generation without tools."""
        raise NotImplementedError


class StrategyEngine(ABC):
    """Maps a market snapshot to a trade decision."""

    @abstractmethod
    async def decide(self, snapshot: MarketSnapshot) -> StrategyOutput:
        """Produce trades and reasoning for the snapshot's interval."""
        raise NotImplementedError
