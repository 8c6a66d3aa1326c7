from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any

from ...command.builder import with_passthrough
from ..args import PACKAGE_PROP, ArgReader, cargo_schema
from ..base import ToolSpec
from .common import CargoCommandTool, package_args


@dataclass(frozen=True)
class CargoTestArgs:
    package: str | None = None
    test_name: str | None = None
    toolchain: str | None = None
    cargo_env: dict[str, str] = field(default_factory=dict)

    @staticmethod
    def from_obj(obj: Any) -> "CargoTestArgs":
        r = ArgReader("cargo_test", obj, ("package", "test_name", "toolchain", "cargo_env"))
        return CargoTestArgs(
            package=r.opt_str("package"),
            test_name=r.opt_str("test_name"),
            toolchain=r.opt_str("toolchain"),
            cargo_env=r.env(),
        )


@dataclass
class CargoTestTool(CargoCommandTool):
    spec: ToolSpec = ToolSpec(
        name="cargo_test",
        description="Run tests with cargo test",
        parameters=cargo_schema({
            "package": PACKAGE_PROP,
            "test_name": {"type": "string", "description": "Optional test name filter"},
        }),
        examples=(
            {},
            {"package": "my-lib"},
            {"test_name": "test_parse"},
            {"cargo_env": {"RUST_BACKTRACE": "1"}},
        ),
    )
    title = "cargo test"
    args_type = CargoTestArgs

    def cargo_args(self, args: CargoTestArgs) -> list[str]:
        out = ["test", *package_args(args.package)]
        if args.test_name:
            out.append(args.test_name)
        return out


@dataclass(frozen=True)
class CargoBenchArgs:
    package: str | None = None
    bench_name: str | None = None
    baseline: str | None = None
    toolchain: str | None = None
    cargo_env: dict[str, str] = field(default_factory=dict)

    @staticmethod
    def from_obj(obj: Any) -> "CargoBenchArgs":
        r = ArgReader("cargo_bench", obj, ("package", "bench_name", "baseline", "toolchain", "cargo_env"))
        return CargoBenchArgs(
            package=r.opt_str("package"),
            bench_name=r.opt_str("bench_name"),
            baseline=r.opt_str("baseline"),
            toolchain=r.opt_str("toolchain"),
            cargo_env=r.env(),
        )


@dataclass
class CargoBenchTool(CargoCommandTool):
    spec: ToolSpec = ToolSpec(
        name="cargo_bench",
        description="Run benchmarks with cargo bench",
        parameters=cargo_schema({
            "package": PACKAGE_PROP,
            "bench_name": {"type": "string", "description": "Optional benchmark name filter"},
            "baseline": {"type": "string", "description": "Save results under this baseline name for comparison"},
        }),
        examples=({}, {"package": "my-lib"}, {"baseline": "main"}),
    )
    title = "cargo bench"
    args_type = CargoBenchArgs

    def cargo_args(self, args: CargoBenchArgs) -> list[str]:
        out = ["bench", *package_args(args.package)]
        if args.bench_name:
            out.append(args.bench_name)
        return with_passthrough(out, ["--save-baseline", args.baseline] if args.baseline else None)
