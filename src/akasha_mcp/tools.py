"""Tool registry.

The gateway exposes exactly one tool, ``qdrant_search``. Its descriptor is
built once and never mutated, so repeated listings serialize identically.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from pydantic import BaseModel, ConfigDict

SEARCH_TOOL_NAME = "qdrant_search"

SEARCH_INPUT_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "query": {"type": "string"},
        "traditions": {
            "oneOf": [
                {"type": "string"},
                {"type": "array", "items": {"type": "string"}},
            ]
        },
        "topK": {"type": "number", "default": 6},
        "lang": {"type": "string"},
    },
    "required": ["query", "traditions"],
}


class ToolDescriptor(BaseModel):
    """Static description of an exposed tool."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    input_schema: dict[str, Any]

    def to_wire(self) -> dict[str, Any]:
        """Serialize for ``tools/list``.

        The schema is published under both spellings; clients disagree on
        which one they read.
        """
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.input_schema,
            "inputSchema": self.input_schema,
        }


SEARCH_TOOL = ToolDescriptor(
    name=SEARCH_TOOL_NAME,
    description=(
        "Embed + search via Akasha FastAPI /query. "
        "Args: query, traditions (string|array), topK, lang."
    ),
    input_schema=SEARCH_INPUT_SCHEMA,
)


class ToolRegistry:
    """Immutable lookup of tool descriptors by name."""

    def __init__(self, tools: tuple[ToolDescriptor, ...] = (SEARCH_TOOL,)) -> None:
        names = [tool.name for tool in tools]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate tool names: {names}")
        self._tools = {tool.name: tool for tool in tools}

    def get(self, name: Any) -> ToolDescriptor | None:
        """Look up a tool; non-string names never match."""
        if not isinstance(name, str):
            return None
        return self._tools.get(name)

    def list_tools(self) -> list[dict[str, Any]]:
        """Wire form of every registered tool, in registration order."""
        return [tool.to_wire() for tool in self._tools.values()]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name in self._tools

    def __iter__(self) -> Iterator[ToolDescriptor]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)
