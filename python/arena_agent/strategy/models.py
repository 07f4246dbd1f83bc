"""Data models used by the strategy engine."""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from arena_agent.arena.models import (
    DecisionPayload,
    SubmissionResult,
    Trade,
    ValidationResult,
)
from arena_agent.config.constants import REASONING_MAX_LENGTH
from arena_agent.config.settings import StrategyMode


class TradePlan(BaseModel):
    """Structured output the decision phase must produce."""

    trades: List[Trade] = Field(
        default_factory=list,
        description="Trades to execute this interval; empty to hold positions",
    )
    reasoning: str = Field(
        ...,
        max_length=REASONING_MAX_LENGTH,
        description="1-2 sentence explanation of your trading decision",
    )


class ReasoningEventKind(str, Enum):
    CONTENT = "content"
    TOOL_STARTED = "tool_started"
    TOOL_COMPLETED = "tool_completed"


class ReasoningEvent(BaseModel):
    """One event emitted by a tool-augmented generation run."""

    kind: ReasoningEventKind
    text: str = ""
    tool_name: Optional[str] = None
    tool_args: Dict[str, Any] = Field(default_factory=dict)
    result: Any = None


class ToolCallRecord(BaseModel):
    tool_name: str
    tool_args: Dict[str, Any] = Field(default_factory=dict)
    result: Any = None


class StepRecord(BaseModel):
    """Tool calls made and text produced during one reasoning step."""

    index: int
    tool_calls: List[ToolCallRecord] = Field(default_factory=list)
    text: str = ""


class StepLoopResult(BaseModel):
    steps: List[StepRecord] = Field(default_factory=list)
    terminal_tool: Optional[str] = None
    budget_exhausted: bool = False

    @property
    def tool_calls(self) -> List[ToolCallRecord]:
        return [call for step in self.steps for call in step.tool_calls]

    @property
    def final_text(self) -> str:
        """Text of the last step, which is where a model summarizes."""
        return self.steps[-1].text if self.steps else ""


class ResearchSource(str, Enum):
    SUMMARY = "summary"
    TOOL_RESULTS = "tool_results"
    EMPTY = "empty"


class ResearchArtifact(BaseModel):
    text: str
    source: ResearchSource
    truncated: bool = False


class StrategyOutput(BaseModel):
    """What a strategy hands to the pipeline for one interval."""

    trades: List[Trade] = Field(default_factory=list)
    reasoning: str
    mode: StrategyMode
    research: Optional[ResearchArtifact] = None
    tool_calls: List[ToolCallRecord] = Field(default_factory=list)
    # Set only when the strategy itself validated and submitted (agentic mode)
    payload: Optional[DecisionPayload] = None
    validation: Optional[ValidationResult] = None
    submission: Optional[SubmissionResult] = None

    @property
    def already_submitted(self) -> bool:
        return self.submission is not None
