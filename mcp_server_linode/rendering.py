"""Deterministic text rendering for tool results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from mcp.types import CallToolResult, TextContent

from .errors import ServerError

UNASSIGNED = "Unassigned"
PUBLIC = "Public"
PRIVATE = "Private"

Pair = Tuple[str, Any]


@dataclass(frozen=True)
class ToolResult:
    """Text body of a tool invocation plus its error flag."""

    text: str
    is_error: bool = False
    structured: Optional[Dict[str, Any]] = None

    @classmethod
    def from_error(cls, error: ServerError) -> "ToolResult":
        return cls(text=str(error), is_error=True, structured=error.payload())

    def to_call_tool_result(self) -> CallToolResult:
        return CallToolResult(
            content=[TextContent(type="text", text=self.text)],
            structuredContent=self.structured,
            isError=self.is_error,
        )


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or (isinstance(value, (list, tuple, dict)) and not value)


def visibility(is_public: Any) -> str:
    return PUBLIC if is_public else PRIVATE


def assignment(linode_id: Any) -> str:
    if not linode_id:
        return UNASSIGNED
    return f"Assigned to Linode {linode_id}"


def join(values: Optional[Iterable[Any]], empty: str = "") -> str:
    text = ", ".join(str(value) for value in values or ())
    return text or empty


def truncate(text: str, limit: int = 100) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


def key_values(pairs: Iterable[Pair], indent: str = "") -> List[str]:
    """One ``Key: value`` line per pair, skipping empty optional values."""

    return [f"{indent}{key}: {value}" for key, value in pairs if not _is_empty(value)]


def render_list(category: str, items: Sequence[Mapping[str, Any]], render_item: Callable[[Mapping[str, Any]], str]) -> str:
    """``Found N <category>:``, a blank line, then one block per item."""

    header = f"Found {len(items)} {category}:"
    if not items:
        return header
    blocks = [render_item(item).rstrip("\n") for item in items]
    return header + "\n\n" + "\n\n".join(blocks)


def render_detail(
    title: str,
    pairs: Iterable[Pair],
    sections: Iterable[Tuple[str, Sequence[str]]] = (),
) -> str:
    """``<Title> Details:`` with key/value lines and optional titled sections."""

    lines = [f"{title} Details:"]
    lines.extend(key_values(pairs))
    for heading, body in sections:
        if not body:
            continue
        lines.append("")
        lines.append(f"{heading}:")
        lines.extend(body)
    return "\n".join(lines)


def render_confirmation(message: str, pairs: Iterable[Pair] = ()) -> str:
    """Short mutation receipt such as ``Domain created successfully:``."""

    lines = key_values(pairs)
    if not lines:
        return message
    return "\n".join([f"{message}:"] + lines)
