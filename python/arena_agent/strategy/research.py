"""Research artifact policy: fall back to raw tool output, then truncate."""

import json
from typing import Any, Iterable, Tuple

from arena_agent.config.constants import (
    EMPTY_RESEARCH_NOTE,
    RESEARCH_MAX_CHARS,
    RESEARCH_TOOL_SEPARATOR,
    RESEARCH_TRUNCATION_MARKER,
)

from .models import ResearchArtifact, ResearchSource, StepLoopResult, ToolCallRecord


def stringify_tool_result(result: Any) -> str:
    if isinstance(result, str):
        return result
    if result is None:
        return "null"
    return json.dumps(result, ensure_ascii=False, default=str)


def synthesize_from_tool_calls(calls: Iterable[ToolCallRecord]) -> str:
    """Concatenate raw tool results as ``[tool]\\n<result>`` blocks."""
    blocks = [
        f"[{call.tool_name}]\n{stringify_tool_result(call.result)}" for call in calls
    ]
    return RESEARCH_TOOL_SEPARATOR.join(blocks)


def truncate_research(
    text: str,
    max_chars: int = RESEARCH_MAX_CHARS,
    marker: str = RESEARCH_TRUNCATION_MARKER,
) -> Tuple[str, bool]:
    """Cut ``text`` to ``max_chars`` characters and append ``marker`` if it was longer."""
    if len(text) <= max_chars:
        return text, False
    return text[:max_chars] + marker, True


def build_research_artifact(
    loop_result: StepLoopResult, max_chars: int = RESEARCH_MAX_CHARS
) -> ResearchArtifact:
    """Turn a research run into the text embedded in the decision prompt.

    The model's final text is preferred. When it is blank (the model stopped
    after calling tools without summarizing) the recorded tool results are used
    instead, and a fixed note stands in when neither exists.
    """
    text = loop_result.final_text.strip()
    source = ResearchSource.SUMMARY
    if not text:
        calls = loop_result.tool_calls
        if calls:
            text = synthesize_from_tool_calls(calls)
            source = ResearchSource.TOOL_RESULTS
        else:
            text = EMPTY_RESEARCH_NOTE
            source = ResearchSource.EMPTY

    text, truncated = truncate_research(text, max_chars)
    return ResearchArtifact(text=text, source=source, truncated=truncated)
