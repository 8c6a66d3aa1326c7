from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from ..app_context import AppContext


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    parameters: dict[str, Any]   # JSONSchema
    examples: tuple[dict[str, Any], ...] = field(default_factory=tuple)

    def to_mcp(self) -> dict[str, Any]:
        schema = dict(self.parameters)
        if self.examples:
            schema["examples"] = [dict(e) for e in self.examples]
        return {"name": self.name, "description": self.description, "inputSchema": schema}


class Tool(Protocol):
    spec: ToolSpec
    def parse(self, args: Any) -> Any: ...
    def execute(self, ctx: "AppContext", args: Any) -> str: ...
