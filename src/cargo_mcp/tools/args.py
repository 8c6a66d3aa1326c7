from __future__ import annotations

from typing import Any, Iterable

from ..command.builder import encode_env
from ..errors import ToolArgumentError


class ArgReader:
    """Typed accessors over a raw ``arguments`` object for one tool.

    Missing keys and explicit nulls both read as "not given". Keys outside
    ``allowed`` are rejected so that typos don't silently become no-ops.
    """

    def __init__(self, tool: str, obj: Any, allowed: Iterable[str]):
        if obj is None:
            obj = {}
        if not isinstance(obj, dict):
            raise ToolArgumentError(f"{tool}: arguments must be an object, got {type(obj).__name__}")
        unknown = sorted(set(obj) - set(allowed))
        if unknown:
            raise ToolArgumentError(f"{tool}: unknown argument(s): {', '.join(unknown)}")
        self.tool = tool
        self.obj = obj

    def _fail(self, key: str, expected: str) -> ToolArgumentError:
        got = type(self.obj.get(key)).__name__
        return ToolArgumentError(f"{self.tool}: '{key}' must be {expected}, got {got}")

    def opt_str(self, key: str) -> str | None:
        v = self.obj.get(key)
        if v is None:
            return None
        if not isinstance(v, str):
            raise self._fail(key, "a string")
        return v or None

    def req_str(self, key: str) -> str:
        v = self.opt_str(key)
        if v is None:
            raise ToolArgumentError(f"{self.tool}: missing required argument '{key}'")
        return v

    def flag(self, key: str) -> bool:
        v = self.obj.get(key)
        if v is None:
            return False
        if not isinstance(v, bool):
            raise self._fail(key, "a boolean")
        return v

    def str_list(self, key: str, *, required: bool = False) -> tuple[str, ...]:
        v = self.obj.get(key)
        if v is None:
            if required:
                raise ToolArgumentError(f"{self.tool}: missing required argument '{key}'")
            return ()
        if not isinstance(v, list) or not all(isinstance(x, str) for x in v):
            raise self._fail(key, "an array of strings")
        return tuple(v)

    def env(self, key: str = "cargo_env") -> dict[str, str]:
        try:
            return encode_env(self.obj.get(key))
        except ToolArgumentError as e:
            raise ToolArgumentError(f"{self.tool}: {e}") from e


TOOLCHAIN_PROP = {
    "type": "string",
    "description": "Optional Rust toolchain to use (e.g., 'stable', 'nightly', '1.70.0')",
}
CARGO_ENV_PROP = {
    "type": "object",
    "description": "Optional environment variables to set for the cargo command",
    "additionalProperties": {"type": ["string", "number", "boolean", "null"]},
}
PACKAGE_PROP = {"type": "string", "description": "Optional package name (for workspaces)"}


def cargo_schema(properties: dict[str, Any], required: Iterable[str] = ()) -> dict[str, Any]:
    props = dict(properties)
    props["toolchain"] = TOOLCHAIN_PROP
    props["cargo_env"] = CARGO_ENV_PROP
    return {
        "type": "object",
        "properties": props,
        "required": list(required),
        "additionalProperties": False,
    }
