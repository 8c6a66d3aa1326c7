from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any

DEFAULT_SESSION_ID = "default"


@dataclass
class CargoSessionData:
    # e.g. "stable", "nightly", "1.70.0"
    default_toolchain: str | None = None
    cargo_env: dict[str, str] = field(default_factory=dict)
    # keys we don't know about are written back untouched
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def from_obj(obj: Any) -> "CargoSessionData":
        if not isinstance(obj, dict):
            return CargoSessionData()
        tc = obj.get("default_toolchain")
        if not isinstance(tc, str) or not tc.strip():
            tc = None
        env = obj.get("cargo_env") or {}
        if not isinstance(env, dict):
            env = {}
        extra = {k: v for k, v in obj.items() if k not in ("default_toolchain", "cargo_env")}
        return CargoSessionData(
            default_toolchain=tc,
            cargo_env={str(k): str(v) for k, v in env.items()},
            extra=extra,
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = dict(self.extra)
        d["default_toolchain"] = self.default_toolchain
        d["cargo_env"] = dict(self.cargo_env)
        return d


@dataclass
class SharedContextData:
    """Working-directory record shared with sibling tool servers."""

    context_path: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def from_obj(obj: Any) -> "SharedContextData":
        if not isinstance(obj, dict):
            return SharedContextData()
        cp = obj.get("context_path")
        if not isinstance(cp, str) or not cp:
            cp = None
        extra = {k: v for k, v in obj.items() if k != "context_path"}
        return SharedContextData(context_path=cp, extra=extra)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = dict(self.extra)
        d["context_path"] = self.context_path
        return d
