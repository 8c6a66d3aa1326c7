from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any

from ...command.builder import with_passthrough
from ..args import PACKAGE_PROP, ArgReader, cargo_schema
from ..base import ToolSpec
from .common import CargoCommandTool, package_args


@dataclass(frozen=True)
class RunArgs:
    package: str | None = None
    bin: str | None = None
    example: str | None = None
    release: bool = False
    features: str | None = None
    all_features: bool = False
    no_default_features: bool = False
    args: tuple[str, ...] = ()
    toolchain: str | None = None
    cargo_env: dict[str, str] = field(default_factory=dict)

    @staticmethod
    def from_obj(obj: Any) -> "RunArgs":
        r = ArgReader(
            "cargo_run",
            obj,
            (
                "package", "bin", "example", "release", "features", "all_features",
                "no_default_features", "args", "toolchain", "cargo_env",
            ),
        )
        return RunArgs(
            package=r.opt_str("package"),
            bin=r.opt_str("bin"),
            example=r.opt_str("example"),
            release=r.flag("release"),
            features=r.opt_str("features"),
            all_features=r.flag("all_features"),
            no_default_features=r.flag("no_default_features"),
            args=r.str_list("args"),
            toolchain=r.opt_str("toolchain"),
            cargo_env=r.env(),
        )


@dataclass
class CargoRunTool(CargoCommandTool):
    spec: ToolSpec = ToolSpec(
        name="cargo_run",
        description="Run a binary or example of the Rust project with cargo run",
        parameters=cargo_schema({
            "package": PACKAGE_PROP,
            "bin": {"type": "string", "description": "Binary to run (if the package has several)"},
            "example": {"type": "string", "description": "Example to run instead of a binary"},
            "release": {"type": "boolean", "description": "Run in release mode (optimized)"},
            "features": {"type": "string", "description": "Space or comma separated list of features to activate"},
            "all_features": {"type": "boolean", "description": "Activate all available features"},
            "no_default_features": {"type": "boolean", "description": "Do not activate the `default` feature"},
            "args": {"type": "array", "items": {"type": "string"}, "description": "Arguments passed to the binary after `--`"},
        }),
        examples=(
            {},
            {"bin": "server", "release": True},
            {"example": "demo", "args": ["--verbose", "input.txt"]},
            {"features": "tls metrics", "args": ["--config", "prod.toml"]},
        ),
    )
    title = "cargo run"
    args_type = RunArgs

    def cargo_args(self, args: RunArgs) -> list[str]:
        out = ["run", *package_args(args.package)]
        if args.bin:
            out += ["--bin", args.bin]
        if args.example:
            out += ["--example", args.example]
        if args.release:
            out.append("--release")
        if args.features:
            out += ["--features", args.features]
        if args.all_features:
            out.append("--all-features")
        if args.no_default_features:
            out.append("--no-default-features")
        return with_passthrough(out, args.args)
