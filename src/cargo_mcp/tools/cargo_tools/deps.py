from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any

from ...errors import ToolArgumentError
from ..args import PACKAGE_PROP, ArgReader, cargo_schema
from ..base import ToolSpec
from .common import CargoCommandTool, package_args

_DEPS_PROP = {"type": "array", "items": {"type": "string"}}


def _required_deps(r: ArgReader) -> tuple[str, ...]:
    # checked at parse time, so nothing is spawned for an empty list
    deps = r.str_list("dependencies", required=True)
    if not deps:
        raise ToolArgumentError("No dependencies specified")
    return deps


@dataclass(frozen=True)
class AddArgs:
    dependencies: tuple[str, ...]
    package: str | None = None
    dev: bool = False
    optional: bool = False
    features: tuple[str, ...] = ()
    toolchain: str | None = None
    cargo_env: dict[str, str] = field(default_factory=dict)

    @staticmethod
    def from_obj(obj: Any) -> "AddArgs":
        r = ArgReader(
            "cargo_add",
            obj,
            ("dependencies", "package", "dev", "optional", "features", "toolchain", "cargo_env"),
        )
        return AddArgs(
            dependencies=_required_deps(r),
            package=r.opt_str("package"),
            dev=r.flag("dev"),
            optional=r.flag("optional"),
            features=r.str_list("features"),
            toolchain=r.opt_str("toolchain"),
            cargo_env=r.env(),
        )


@dataclass
class CargoAddTool(CargoCommandTool):
    spec: ToolSpec = ToolSpec(
        name="cargo_add",
        description="Add dependencies to Cargo.toml using cargo add",
        parameters=cargo_schema(
            {
                "dependencies": {**_DEPS_PROP, "description": "List of dependencies to add (e.g., ['serde', 'tokio@1.0'])"},
                "package": PACKAGE_PROP,
                "dev": {"type": "boolean", "description": "Add as development dependencies"},
                "optional": {"type": "boolean", "description": "Add as optional dependencies"},
                "features": {"type": "array", "items": {"type": "string"}, "description": "Features to enable"},
            },
            required=("dependencies",),
        ),
        examples=(
            {"dependencies": ["serde"]},
            {"dependencies": ["tokio@1.0"], "features": ["full"]},
            {"dependencies": ["proptest"], "dev": True},
        ),
    )
    title = "cargo add"
    args_type = AddArgs

    def cargo_args(self, args: AddArgs) -> list[str]:
        out = ["add", *package_args(args.package)]
        if args.dev:
            out.append("--dev")
        if args.optional:
            out.append("--optional")
        if args.features:
            out += ["--features", ",".join(args.features)]
        out.extend(args.dependencies)
        return out


@dataclass(frozen=True)
class RemoveArgs:
    dependencies: tuple[str, ...]
    package: str | None = None
    dev: bool = False
    toolchain: str | None = None
    cargo_env: dict[str, str] = field(default_factory=dict)

    @staticmethod
    def from_obj(obj: Any) -> "RemoveArgs":
        r = ArgReader("cargo_remove", obj, ("dependencies", "package", "dev", "toolchain", "cargo_env"))
        return RemoveArgs(
            dependencies=_required_deps(r),
            package=r.opt_str("package"),
            dev=r.flag("dev"),
            toolchain=r.opt_str("toolchain"),
            cargo_env=r.env(),
        )


@dataclass
class CargoRemoveTool(CargoCommandTool):
    spec: ToolSpec = ToolSpec(
        name="cargo_remove",
        description="Remove dependencies from Cargo.toml using cargo remove",
        parameters=cargo_schema(
            {
                "dependencies": {**_DEPS_PROP, "description": "List of dependencies to remove"},
                "package": PACKAGE_PROP,
                "dev": {"type": "boolean", "description": "Remove from development dependencies"},
            },
            required=("dependencies",),
        ),
        examples=({"dependencies": ["serde"]}, {"dependencies": ["proptest"], "dev": True}),
    )
    title = "cargo remove"
    args_type = RemoveArgs

    def cargo_args(self, args: RemoveArgs) -> list[str]:
        out = ["remove", *package_args(args.package)]
        if args.dev:
            out.append("--dev")
        out.extend(args.dependencies)
        return out


@dataclass(frozen=True)
class UpdateArgs:
    package: str | None = None
    dependencies: tuple[str, ...] = ()
    dry_run: bool = False
    toolchain: str | None = None
    cargo_env: dict[str, str] = field(default_factory=dict)

    @staticmethod
    def from_obj(obj: Any) -> "UpdateArgs":
        r = ArgReader("cargo_update", obj, ("package", "dependencies", "dry_run", "toolchain", "cargo_env"))
        return UpdateArgs(
            package=r.opt_str("package"),
            dependencies=r.str_list("dependencies"),
            dry_run=r.flag("dry_run"),
            toolchain=r.opt_str("toolchain"),
            cargo_env=r.env(),
        )


@dataclass
class CargoUpdateTool(CargoCommandTool):
    spec: ToolSpec = ToolSpec(
        name="cargo_update",
        description="Update dependencies in Cargo.lock using cargo update",
        parameters=cargo_schema({
            "package": PACKAGE_PROP,
            "dependencies": {**_DEPS_PROP, "description": "Optional specific dependencies to update"},
            "dry_run": {"type": "boolean", "description": "Show what would be updated without writing Cargo.lock"},
        }),
        examples=({}, {"dependencies": ["serde"]}, {"dry_run": True}),
    )
    title = "cargo update"
    args_type = UpdateArgs

    def cargo_args(self, args: UpdateArgs) -> list[str]:
        out = ["update", *package_args(args.package)]
        if args.dry_run:
            out.append("--dry-run")
        for dep in args.dependencies:
            out += ["--package", dep]
        return out
