"""Explicit bounded step loop over a tool-augmented generation run.

A step is one model turn: the text it produces and the tool calls it issues.
A new step opens when the model speaks or calls a tool again after all tool
results of the current step came back. The loop stops when the step budget is
used up or when a terminal tool call completes, whichever happens first.
"""

from typing import AsyncIterator, Iterable

from loguru import logger

from .models import (
    ReasoningEvent,
    ReasoningEventKind,
    StepLoopResult,
    StepRecord,
    ToolCallRecord,
)


class BoundedStepLoop:
    def __init__(self, max_steps: int, terminal_tools: Iterable[str] = ()) -> None:
        if max_steps < 1:
            raise ValueError("max_steps must be at least 1")
        self._max_steps = max_steps
        self._terminal_tools = frozenset(terminal_tools)

    @property
    def max_steps(self) -> int:
        return self._max_steps

    async def run(self, events: AsyncIterator[ReasoningEvent]) -> StepLoopResult:
        steps: list[StepRecord] = []
        current = StepRecord(index=0)
        pending_calls = 0
        awaiting_model = False
        terminal_tool = None
        exhausted = False

        try:
            async for event in events:
                opens_step = event.kind is ReasoningEventKind.TOOL_STARTED or (
                    event.kind is ReasoningEventKind.CONTENT and bool(event.text)
                )
                if opens_step and awaiting_model:
                    steps.append(current)
                    if len(steps) >= self._max_steps:
                        exhausted = True
                        logger.warning(
                            "Step budget of {} exhausted; stopping generation",
                            self._max_steps,
                        )
                        break
                    current = StepRecord(index=len(steps))
                    awaiting_model = False

                if event.kind is ReasoningEventKind.CONTENT:
                    current.text += event.text
                elif event.kind is ReasoningEventKind.TOOL_STARTED:
                    pending_calls += 1
                    logger.debug(
                        "Step {}: calling tool {} with {}",
                        current.index + 1,
                        event.tool_name,
                        event.tool_args,
                    )
                elif event.kind is ReasoningEventKind.TOOL_COMPLETED:
                    pending_calls = max(pending_calls - 1, 0)
                    current.tool_calls.append(
                        ToolCallRecord(
                            tool_name=event.tool_name or "unknown",
                            tool_args=event.tool_args,
                            result=event.result,
                        )
                    )
                    logger.info(
                        "Step {}/{}: tool {} completed",
                        current.index + 1,
                        self._max_steps,
                        event.tool_name,
                    )
                    if event.tool_name in self._terminal_tools:
                        terminal_tool = event.tool_name
                        break
                    awaiting_model = pending_calls == 0
        finally:
            aclose = getattr(events, "aclose", None)
            if aclose is not None:
                await aclose()

        if not exhausted and (current.text or current.tool_calls):
            steps.append(current)

        return StepLoopResult(
            steps=steps, terminal_tool=terminal_tool, budget_exhausted=exhausted
        )
