"""Tool registration and JSON-schema helpers."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Iterator, List, Mapping, Optional, Sequence

from mcp.types import Tool

from .rendering import ToolResult

_TOOL_NAME = re.compile(r"^[a-z][a-z0-9_]*(\.[a-z][a-z0-9_]*)+$")

Handler = Callable[[Mapping[str, Any], Any], Awaitable[ToolResult]]


class ToolScope(str, Enum):
    """What a handler receives besides its arguments."""

    ACCOUNT = "account"
    MANAGER = "manager"


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    handler: Handler
    input_schema: Dict[str, Any] = field(default_factory=lambda: object_schema({}))
    scope: ToolScope = ToolScope.ACCOUNT

    def to_tool(self) -> Tool:
        return Tool(name=self.name, description=self.description, inputSchema=self.input_schema)


class ToolRegistry:
    """Name-unique collection of tools, populated once at startup."""

    def __init__(self) -> None:
        self._tools: Dict[str, ToolSpec] = {}

    def add(self, spec: ToolSpec) -> ToolSpec:
        if not _TOOL_NAME.match(spec.name):
            raise ValueError(f"Invalid tool name: {spec.name!r}")
        if "\n" in spec.description or not spec.description.strip():
            raise ValueError(f"Tool {spec.name} needs a one-line description")
        if spec.name in self._tools:
            raise ValueError(f"Tool {spec.name} is already registered")
        self._tools[spec.name] = spec
        return spec

    def tool(
        self,
        name: str,
        description: str,
        input_schema: Optional[Dict[str, Any]] = None,
        *,
        scope: ToolScope = ToolScope.ACCOUNT,
    ) -> Callable[[Handler], Handler]:
        """Decorator form of :meth:`add`."""

        def decorator(handler: Handler) -> Handler:
            self.add(
                ToolSpec(
                    name=name,
                    description=description,
                    handler=handler,
                    input_schema=input_schema or object_schema({}),
                    scope=scope,
                )
            )
            return handler

        return decorator

    def get(self, name: str) -> Optional[ToolSpec]:
        return self._tools.get(name)

    def names(self) -> List[str]:
        return sorted(self._tools)

    def tools(self) -> List[Tool]:
        return [self._tools[name].to_tool() for name in self.names()]

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[ToolSpec]:
        return iter([self._tools[name] for name in self.names()])


# schema helpers


def object_schema(properties: Dict[str, Dict[str, Any]], required: Sequence[str] = ()) -> Dict[str, Any]:
    schema: Dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = list(required)
    return schema


def integer(description: str, **extra: Any) -> Dict[str, Any]:
    return {"type": "integer", "description": description, **extra}


def string(description: str, *, enum: Optional[Sequence[str]] = None) -> Dict[str, Any]:
    schema: Dict[str, Any] = {"type": "string", "description": description}
    if enum:
        schema["enum"] = list(enum)
    return schema


def boolean(description: str) -> Dict[str, Any]:
    return {"type": "boolean", "description": description}


def string_array(description: str) -> Dict[str, Any]:
    return {"type": "array", "items": {"type": "string"}, "description": description}


def object_array(description: str, item: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return {"type": "array", "items": item or {"type": "object"}, "description": description}


def nested_object(description: str, properties: Optional[Dict[str, Dict[str, Any]]] = None) -> Dict[str, Any]:
    schema: Dict[str, Any] = {"type": "object", "description": description}
    if properties:
        schema["properties"] = properties
    return schema
