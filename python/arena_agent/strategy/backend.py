"""agno-backed implementation of the LLM capability."""

import json
from typing import Any, AsyncIterator, Optional, Sequence, Type

from agno.agent import Agent
from agno.tools.function import Function
from loguru import logger
from pydantic import ValidationError

from arena_agent.core.exceptions import StrategyOutputError

from .interfaces import LlmBackend, SchemaT
from .models import ReasoningEvent, ReasoningEventKind
from .tool_registry import ToolDefinition


def to_agno_function(tool: Any) -> Any:
    """Expose a registered tool to agno with its own name, description and schema.

    Arguments from the model go through ``ToolDefinition.invoke`` so they are
    validated against the registered schema. Toolkits (e.g. MCP) pass through.
    """
    if not isinstance(tool, ToolDefinition):
        return tool

    async def entrypoint(**kwargs: Any) -> Any:
        return await tool.invoke(kwargs)

    return Function(
        name=tool.tool_id,
        description=tool.description,
        parameters=tool.parameters_schema(),
        entrypoint=entrypoint,
        skip_entrypoint_processing=True,
    )


class AgnoBackend(LlmBackend):
    """Runs generations through ``agno.agent.Agent`` on a preconfigured model."""

    def __init__(self, model: Any, *, debug_mode: bool = False) -> None:
        self._model = model
        self._debug_mode = debug_mode

    async def run_with_tools(
        self,
        *,
        instructions: str,
        prompt: str,
        tools: Sequence[Any],
        max_steps: int,
    ) -> AsyncIterator[ReasoningEvent]:
        agent = Agent(
            model=self._model,
            instructions=[instructions],
            tools=[to_agno_function(tool) for tool in tools],
            tool_call_limit=max_steps,
            markdown=False,
            debug_mode=self._debug_mode,
        )
        response_stream = agent.arun(
            prompt, stream=True, stream_intermediate_steps=True
        )
        try:
            async for event in response_stream:
                if event.event == "RunContent":
                    if event.content:
                        yield ReasoningEvent(
                            kind=ReasoningEventKind.CONTENT, text=str(event.content)
                        )
                elif event.event == "ToolCallStarted":
                    yield ReasoningEvent(
                        kind=ReasoningEventKind.TOOL_STARTED,
                        tool_name=event.tool.tool_name,
                        tool_args=event.tool.tool_args or {},
                    )
                elif event.event == "ToolCallCompleted":
                    yield ReasoningEvent(
                        kind=ReasoningEventKind.TOOL_COMPLETED,
                        tool_name=event.tool.tool_name,
                        tool_args=event.tool.tool_args or {},
                        result=event.tool.result,
                    )
        finally:
            # stop the underlying model run when the caller stops consuming
            aclose = getattr(response_stream, "aclose", None)
            if aclose is not None:
                await aclose()

    async def generate_structured(
        self,
        *,
        instructions: str,
        prompt: str,
        output_schema: Type[SchemaT],
    ) -> SchemaT:
        agent = Agent(
            model=self._model,
            instructions=[instructions],
            output_schema=output_schema,
            markdown=False,
            debug_mode=self._debug_mode,
        )
        response = await agent.arun(prompt)
        content = getattr(response, "content", None)
        logger.debug("Received LLM response {}", content)
        return self._coerce(content, output_schema)

    @staticmethod
    def _coerce(content: Optional[Any], output_schema: Type[SchemaT]) -> SchemaT:
        if isinstance(content, output_schema):
            return content
        try:
            if isinstance(content, str):
                return output_schema.model_validate(json.loads(content))
            if isinstance(content, dict):
                return output_schema.model_validate(content)
        except (ValueError, ValidationError) as exc:
            raise StrategyOutputError(
                f"LLM output failed {output_schema.__name__} validation: {exc}"
            ) from exc
        raise StrategyOutputError(
            f"LLM returned no {output_schema.__name__} (got {type(content).__name__})"
        )
