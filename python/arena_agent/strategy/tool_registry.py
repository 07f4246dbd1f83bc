from __future__ import annotations

import inspect
from collections.abc import Callable
from typing import Any, Optional, Type

from loguru import logger
from pydantic import BaseModel, ConfigDict, create_model

CallableType = Callable[..., Any]


class ToolDefinition(BaseModel):
    """Describe a callable tool with metadata for the model and for execution."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    tool_id: str
    description: str
    args_schema: Type[BaseModel] | None
    func: CallableType

    def parameters_schema(self) -> dict[str, Any]:
        """JSON schema of the arguments, using wire aliases."""
        if self.args_schema is None:
            return {"type": "object", "properties": {}}
        return self.args_schema.model_json_schema(by_alias=True)

    async def invoke(self, args: Optional[dict[str, Any]] = None) -> Any:
        """Validate ``args`` against the schema and call the tool."""
        params = ToolRegistry._validate_args(self.args_schema, args or {})
        return await ToolRegistry._maybe_await(self.func(**params))


class ToolRegistry:
    """Registry of locally implemented tools offered to one reasoning run."""

    def __init__(self) -> None:
        self._registry: dict[str, ToolDefinition] = {}

    def register(
        self,
        tool_id: str,
        func: CallableType,
        description: str,
        *,
        args_schema: Type[BaseModel] | None = None,
    ) -> None:
        """Register a callable tool with optional schema reflection."""
        if tool_id in self._registry:
            raise ValueError(f"Tool '{tool_id}' already registered")

        schema = args_schema or self._infer_schema(func)
        self._registry[tool_id] = ToolDefinition(
            tool_id=tool_id,
            description=description,
            args_schema=schema,
            func=func,
        )
        logger.debug("Tool registered: {tool_id}", tool_id=tool_id)

    def list_tools(self) -> list[ToolDefinition]:
        """Return registered tools in registration order."""
        return list(self._registry.values())

    @staticmethod
    def _validate_args(
        schema: Type[BaseModel] | None, args: dict[str, Any]
    ) -> dict[str, Any]:
        if schema is None:
            return dict(args)
        validated = schema.model_validate(args)
        # keep nested models typed instead of dumping them back to dicts
        return {name: getattr(validated, name) for name in type(validated).model_fields}

    @staticmethod
    async def _maybe_await(value: Any) -> Any:
        if inspect.isawaitable(value):
            return await value
        return value

    @staticmethod
    def _infer_schema(func: CallableType) -> Type[BaseModel] | None:
        try:
            signature = inspect.signature(func)
        except (TypeError, ValueError):
            return None

        fields: dict[str, tuple[Any, Any]] = {}
        for name, param in signature.parameters.items():
            if name in {"self", "cls"}:
                continue
            if param.kind in {inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD}:
                return None
            annotation = (
                param.annotation
                if param.annotation is not inspect.Signature.empty
                else Any
            )
            default = (
                param.default
                if param.default is not inspect.Signature.empty
                else ...
            )
            fields[name] = (annotation, default)

        if not fields:
            return None

        model_name = f"{func.__name__.capitalize()}Args"
        return create_model(model_name, **fields)


__all__ = ["ToolDefinition", "ToolRegistry"]
