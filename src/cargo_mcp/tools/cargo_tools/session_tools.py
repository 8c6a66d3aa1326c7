from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any
import os

from ...command.builder import PROJECT_MARKER
from ...errors import PreconditionError
from ..args import CARGO_ENV_PROP, TOOLCHAIN_PROP, ArgReader
from ..base import ToolSpec

if TYPE_CHECKING:
    from ...app_context import AppContext


@dataclass(frozen=True)
class SetWorkingDirectoryArgs:
    path: str

    @staticmethod
    def from_obj(obj: Any) -> "SetWorkingDirectoryArgs":
        r = ArgReader("set_working_directory", obj, ("path",))
        return SetWorkingDirectoryArgs(path=r.req_str("path"))


@dataclass
class SetWorkingDirectoryTool:
    spec: ToolSpec = ToolSpec(
        name="set_working_directory",
        description=(
            "Set the working directory for cargo operations. "
            "The directory is shared with other AI tool servers using the same session."
        ),
        parameters={
            "type": "object",
            "properties": {
                "path": {
                    "type": "string",
                    "description": "Path to set as the working directory; absolute, relative or starting with ~",
                },
            },
            "required": ["path"],
            "additionalProperties": False,
        },
        examples=({"path": "."}, {"path": "~/my-rust-project"}, {"path": "/Users/username/projects/my-app"}),
    )

    def parse(self, args: Any) -> SetWorkingDirectoryArgs:
        return SetWorkingDirectoryArgs.from_obj(args)

    def execute(self, ctx: "AppContext", args: SetWorkingDirectoryArgs) -> str:
        expanded = Path(os.path.expanduser(args.path))
        try:
            canonical = expanded.resolve(strict=True)
        except (OSError, RuntimeError) as e:
            raise PreconditionError(f"Could not resolve path '{args.path}': {e}") from e
        if not canonical.is_dir():
            raise PreconditionError(f"Could not resolve path '{args.path}': not a directory")

        ctx.set_working_directory(canonical)

        if (canonical / PROJECT_MARKER).exists():
            return (
                f"✅ Working directory set to: {canonical}\n"
                f"🦀 Rust project detected ({PROJECT_MARKER} found)"
            )
        return (
            f"✅ Working directory set to: {canonical}\n"
            f"⚠️  No {PROJECT_MARKER} found - this doesn't appear to be a Rust project"
        )


@dataclass(frozen=True)
class SetDefaultToolchainArgs:
    toolchain: str | None = None

    @staticmethod
    def from_obj(obj: Any) -> "SetDefaultToolchainArgs":
        r = ArgReader("set_default_toolchain", obj, ("toolchain",))
        return SetDefaultToolchainArgs(toolchain=r.opt_str("toolchain"))


@dataclass
class SetDefaultToolchainTool:
    spec: ToolSpec = ToolSpec(
        name="set_default_toolchain",
        description="Set the session default Rust toolchain used when a call gives none; omit or null to clear it",
        parameters={
            "type": "object",
            "properties": {"toolchain": TOOLCHAIN_PROP},
            "required": [],
            "additionalProperties": False,
        },
        examples=({"toolchain": "nightly"}, {"toolchain": None}),
    )

    def parse(self, args: Any) -> SetDefaultToolchainArgs:
        return SetDefaultToolchainArgs.from_obj(args)

    def execute(self, ctx: "AppContext", args: SetDefaultToolchainArgs) -> str:
        ctx.set_default_toolchain(args.toolchain)
        if args.toolchain:
            return f"✅ Default toolchain set to: {args.toolchain}"
        return "✅ Default toolchain cleared; cargo will be invoked directly"


@dataclass(frozen=True)
class SetCargoEnvArgs:
    cargo_env: dict[str, str] = field(default_factory=dict)
    replace: bool = False

    @staticmethod
    def from_obj(obj: Any) -> "SetCargoEnvArgs":
        r = ArgReader("set_cargo_env", obj, ("cargo_env", "replace"))
        return SetCargoEnvArgs(cargo_env=r.env(), replace=r.flag("replace"))


@dataclass
class SetCargoEnvTool:
    spec: ToolSpec = ToolSpec(
        name="set_cargo_env",
        description=(
            "Set session default environment variables for every cargo command. "
            "Per-call cargo_env values override these."
        ),
        parameters={
            "type": "object",
            "properties": {
                "cargo_env": CARGO_ENV_PROP,
                "replace": {"type": "boolean", "description": "Replace the stored variables instead of merging"},
            },
            "required": ["cargo_env"],
            "additionalProperties": False,
        },
        examples=({"cargo_env": {"RUST_BACKTRACE": "1"}}, {"cargo_env": {}, "replace": True}),
    )

    def parse(self, args: Any) -> SetCargoEnvArgs:
        return SetCargoEnvArgs.from_obj(args)

    def execute(self, ctx: "AppContext", args: SetCargoEnvArgs) -> str:
        env = ctx.set_cargo_env(args.cargo_env, replace=args.replace)
        if not env:
            return "✅ Session environment is empty"
        lines = [f"  {k}={v}" for k, v in sorted(env.items())]
        return "✅ Session environment:\n" + "\n".join(lines)


@dataclass
class GetSessionInfoTool:
    spec: ToolSpec = ToolSpec(
        name="get_session_info",
        description="Show the working directory, default toolchain and default environment of the session",
        parameters={"type": "object", "properties": {}, "required": [], "additionalProperties": False},
    )

    def parse(self, args: Any) -> None:
        ArgReader("get_session_info", args, ())
        return None

    def execute(self, ctx: "AppContext", args: None) -> str:
        context = ctx.get_context()
        toolchain = ctx.get_default_toolchain()
        env = ctx.get_cargo_env()
        out = f"=== session {ctx.session_id} ===\n"
        out += f"📁 Working directory: {context or '(not set)'}\n"
        out += f"🦀 Default toolchain: {toolchain or '(none)'}\n"
        if env:
            out += "🌱 Environment:\n" + "".join(f"  {k}={v}\n" for k, v in sorted(env.items()))
        else:
            out += "🌱 Environment: (none)\n"
        return out
