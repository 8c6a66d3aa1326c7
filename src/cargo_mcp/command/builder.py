from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from ..errors import ToolArgumentError

CARGO = "cargo"
RUSTUP = "rustup"
PROJECT_MARKER = "Cargo.toml"


@dataclass(frozen=True)
class CommandSpec:
    program: str
    args: tuple[str, ...]
    cwd: str
    # overlay on top of the server's own environment
    env: Mapping[str, str] = field(default_factory=dict)

    @property
    def argv(self) -> list[str]:
        return [self.program, *self.args]


def resolve_toolchain(explicit: str | None, session_default: str | None) -> str | None:
    """Pick the toolchain for one call: explicit argument, then session default, then none."""
    if explicit:
        return explicit
    if session_default:
        return session_default
    return None


def encode_env_value(key: str, value: Any) -> str:
    # bool first: bool is a subclass of int
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return value
    if value is None:
        return ""
    raise ToolArgumentError(
        f"Invalid value for environment variable {key!r}: expected string, number, boolean or null, "
        f"got {type(value).__name__}"
    )


def encode_env(env: Any) -> dict[str, str]:
    if env is None:
        return {}
    if not isinstance(env, Mapping):
        raise ToolArgumentError(f"cargo_env must be an object, got {type(env).__name__}")
    out: dict[str, str] = {}
    for k, v in env.items():
        if not isinstance(k, str) or not k:
            raise ToolArgumentError(f"Invalid environment variable name: {k!r}")
        out[k] = encode_env_value(k, v)
    return out


def merge_env(session_env: Mapping[str, str] | None, call_env: Mapping[str, str] | None) -> dict[str, str]:
    merged = dict(session_env or {})
    merged.update(call_env or {})
    return merged


def with_passthrough(args: Sequence[str], passthrough: Sequence[str] | None) -> list[str]:
    """Append ``--`` and trailing tokens. No separator when there is nothing to pass."""
    out = list(args)
    if passthrough:
        out.append("--")
        out.extend(passthrough)
    return out


def create_cargo_command(
    cargo_args: Sequence[str],
    *,
    cwd: str,
    toolchain: str | None = None,
    env: Mapping[str, str] | None = None,
) -> CommandSpec:
    if toolchain:
        return CommandSpec(
            program=RUSTUP,
            args=("run", toolchain, CARGO, *cargo_args),
            cwd=cwd,
            env=dict(env or {}),
        )
    return CommandSpec(program=CARGO, args=tuple(cargo_args), cwd=cwd, env=dict(env or {}))
