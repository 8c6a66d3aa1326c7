from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any

from ...command.builder import with_passthrough
from ..args import PACKAGE_PROP, ArgReader, cargo_schema
from ..base import ToolSpec
from .common import CargoCommandTool, package_args


@dataclass(frozen=True)
class CheckArgs:
    package: str | None = None
    toolchain: str | None = None
    cargo_env: dict[str, str] = field(default_factory=dict)

    @staticmethod
    def from_obj(obj: Any) -> "CheckArgs":
        r = ArgReader("cargo_check", obj, ("package", "toolchain", "cargo_env"))
        return CheckArgs(package=r.opt_str("package"), toolchain=r.opt_str("toolchain"), cargo_env=r.env())


@dataclass
class CargoCheckTool(CargoCommandTool):
    spec: ToolSpec = ToolSpec(
        name="cargo_check",
        description="Run cargo check to verify the code compiles",
        parameters=cargo_schema({"package": PACKAGE_PROP}),
        examples=(
            {},
            {"package": "my-lib"},
            {"toolchain": "nightly"},
            {"cargo_env": {"RUSTFLAGS": "-D warnings", "CARGO_TARGET_DIR": "./target-check"}},
        ),
    )
    title = "cargo check"
    args_type = CheckArgs

    def cargo_args(self, args: CheckArgs) -> list[str]:
        return ["check", *package_args(args.package)]


@dataclass(frozen=True)
class BuildArgs:
    package: str | None = None
    release: bool = False
    toolchain: str | None = None
    cargo_env: dict[str, str] = field(default_factory=dict)

    @staticmethod
    def from_obj(obj: Any) -> "BuildArgs":
        r = ArgReader("cargo_build", obj, ("package", "release", "toolchain", "cargo_env"))
        return BuildArgs(
            package=r.opt_str("package"),
            release=r.flag("release"),
            toolchain=r.opt_str("toolchain"),
            cargo_env=r.env(),
        )


@dataclass
class CargoBuildTool(CargoCommandTool):
    spec: ToolSpec = ToolSpec(
        name="cargo_build",
        description="Build the Rust project with cargo build",
        parameters=cargo_schema({
            "package": PACKAGE_PROP,
            "release": {"type": "boolean", "description": "Build in release mode"},
        }),
        examples=({}, {"release": True}, {"package": "my-bin", "toolchain": "stable"}),
    )
    title = "cargo build"
    args_type = BuildArgs

    def cargo_args(self, args: BuildArgs) -> list[str]:
        out = ["build", *package_args(args.package)]
        if args.release:
            out.append("--release")
        return out


@dataclass(frozen=True)
class CleanArgs:
    package: str | None = None
    toolchain: str | None = None
    cargo_env: dict[str, str] = field(default_factory=dict)

    @staticmethod
    def from_obj(obj: Any) -> "CleanArgs":
        r = ArgReader("cargo_clean", obj, ("package", "toolchain", "cargo_env"))
        return CleanArgs(package=r.opt_str("package"), toolchain=r.opt_str("toolchain"), cargo_env=r.env())


@dataclass
class CargoCleanTool(CargoCommandTool):
    spec: ToolSpec = ToolSpec(
        name="cargo_clean",
        description="Remove build artifacts with cargo clean",
        parameters=cargo_schema({"package": {"type": "string", "description": "Optional package to clean artifacts for"}}),
        examples=({}, {"package": "my-lib"}),
    )
    title = "cargo clean"
    args_type = CleanArgs

    def cargo_args(self, args: CleanArgs) -> list[str]:
        return ["clean", *package_args(args.package)]


@dataclass(frozen=True)
class FmtCheckArgs:
    toolchain: str | None = None
    cargo_env: dict[str, str] = field(default_factory=dict)

    @staticmethod
    def from_obj(obj: Any) -> "FmtCheckArgs":
        r = ArgReader("cargo_fmt_check", obj, ("toolchain", "cargo_env"))
        return FmtCheckArgs(toolchain=r.opt_str("toolchain"), cargo_env=r.env())


@dataclass
class CargoFmtCheckTool(CargoCommandTool):
    spec: ToolSpec = ToolSpec(
        name="cargo_fmt_check",
        description="Check code formatting with cargo fmt --check (does not modify files)",
        parameters=cargo_schema({}),
        examples=({}, {"toolchain": "nightly"}),
    )
    title = "cargo fmt --check"
    args_type = FmtCheckArgs

    def cargo_args(self, args: FmtCheckArgs) -> list[str]:
        return ["fmt", "--check"]


@dataclass(frozen=True)
class ClippyArgs:
    package: str | None = None
    fix: bool = False
    toolchain: str | None = None
    cargo_env: dict[str, str] = field(default_factory=dict)

    @staticmethod
    def from_obj(obj: Any) -> "ClippyArgs":
        r = ArgReader("cargo_clippy", obj, ("package", "fix", "toolchain", "cargo_env"))
        return ClippyArgs(
            package=r.opt_str("package"),
            fix=r.flag("fix"),
            toolchain=r.opt_str("toolchain"),
            cargo_env=r.env(),
        )


@dataclass
class CargoClippyTool(CargoCommandTool):
    spec: ToolSpec = ToolSpec(
        name="cargo_clippy",
        description="Run cargo clippy for linting suggestions; warnings are denied",
        parameters=cargo_schema({
            "package": PACKAGE_PROP,
            "fix": {"type": "boolean", "description": "Automatically apply lint suggestions"},
        }),
        examples=({}, {"fix": True}, {"package": "my-lib", "toolchain": "nightly"}),
    )
    title = "cargo clippy"
    args_type = ClippyArgs

    def cargo_args(self, args: ClippyArgs) -> list[str]:
        out = ["clippy", *package_args(args.package)]
        if args.fix:
            out.append("--fix")
        # lint flags go to clippy-driver, after the separator
        return with_passthrough(out, ["-D", "warnings"])
