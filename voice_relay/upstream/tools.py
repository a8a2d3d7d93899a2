"""Static registry of functions the model may call."""

from __future__ import annotations

from typing import Any
from datetime import datetime
from dataclasses import field, dataclass
from collections.abc import Callable, Iterable

import orjson

from voice_relay.errors import FunctionExecutionError

ToolHandler = Callable[[dict[str, Any]], dict[str, Any]]


@dataclass(frozen=True, slots=True)
class ToolSpec:
    name: str
    description: str
    handler: ToolHandler
    parameters: dict[str, Any] = field(
        default_factory=lambda: {"type": "object", "properties": {}, "required": []}
    )

    def declaration(self) -> dict[str, Any]:
        return {
            "type": "function",
            "name": self.name,
            "description": self.description,
            "parameters": self.parameters,
        }


def get_current_time(_arguments: dict[str, Any]) -> dict[str, Any]:
    now = datetime.now().astimezone()
    return {
        "time": now.strftime("%m/%d/%Y, %I:%M:%S %p"),
        "timezone": now.tzname() or "UTC",
    }


BUILTIN_TOOLS: tuple[ToolSpec, ...] = (
    ToolSpec(name="get_current_time", description="Get the current time", handler=get_current_time),
)


def _parse_arguments(arguments: Any) -> dict[str, Any]:
    if arguments is None or arguments == "":
        return {}
    if isinstance(arguments, dict):
        return arguments
    parsed = orjson.loads(arguments)
    if not isinstance(parsed, dict):
        raise ValueError("function arguments must be a JSON object")
    return parsed


class ToolRegistry:
    def __init__(self, tools: Iterable[ToolSpec] = BUILTIN_TOOLS) -> None:
        self._tools: dict[str, ToolSpec] = {tool.name: tool for tool in tools}

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def declarations(self) -> list[dict[str, Any]]:
        return [tool.declaration() for tool in self._tools.values()]

    def execute(self, name: str, arguments: Any = None) -> str:
        """Run ``name`` and return its JSON-encoded result.

        Unknown names produce an ``{"error": ...}`` result rather than raising.
        Raises:
            FunctionExecutionError: the handler (or argument parsing) failed.
        """
        tool = self._tools.get(name)
        if tool is None:
            return orjson.dumps({"error": f"Unknown function: {name}"}).decode("utf-8")
        try:
            result = tool.handler(_parse_arguments(arguments))
            return orjson.dumps(result).decode("utf-8")
        except Exception as exc:
            raise FunctionExecutionError(name=name, message=str(exc) or type(exc).__name__) from exc


__all__ = ["BUILTIN_TOOLS", "ToolRegistry", "ToolSpec", "get_current_time"]
