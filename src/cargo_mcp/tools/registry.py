from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict

from ..errors import UnknownToolError
from .base import Tool, ToolSpec

if TYPE_CHECKING:
    from ..app_context import AppContext


@dataclass
class ToolRegistry:
    _tools: Dict[str, Tool] = None  # type: ignore

    def __post_init__(self):
        if self._tools is None:
            self._tools = {}

    def register(self, tool: Tool) -> None:
        name = tool.spec.name
        if name in self._tools:
            raise ValueError(f"Tool already registered: {name}")
        self._tools[name] = tool

    def get(self, name: str) -> Tool:
        if name not in self._tools:
            raise UnknownToolError(f"Unknown tool: {name}")
        return self._tools[name]

    def list_specs(self) -> list[ToolSpec]:
        # registration order
        return [t.spec for t in self._tools.values()]

    def call(self, ctx: "AppContext", name: str, arguments: Any) -> str:
        """Validate ``arguments`` against the named tool and run it."""
        tool = self.get(name)
        parsed = tool.parse(arguments)
        return tool.execute(ctx, parsed)
