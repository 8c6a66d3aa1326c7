from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..base import ToolSpec

if TYPE_CHECKING:
    from ...app_context import AppContext


class CargoCommandTool:
    """Base for tools that map one validated argument object onto one cargo invocation.

    Subclasses provide ``spec``, ``title``, ``args_type`` (a frozen dataclass
    with a ``from_obj`` constructor) and ``cargo_args`` (args -> argv after ``cargo``).
    Every args dataclass carries ``toolchain`` and ``cargo_env``.
    """

    spec: ToolSpec
    title: str
    args_type: Any

    def parse(self, args: Any) -> Any:
        return self.args_type.from_obj(args)

    def cargo_args(self, args: Any) -> list[str]:
        raise NotImplementedError

    def execute(self, ctx: "AppContext", args: Any) -> str:
        return ctx.run_cargo(
            self.cargo_args(args),
            title=self.title,
            toolchain=args.toolchain,
            cargo_env=args.cargo_env,
        )


def package_args(package: str | None) -> list[str]:
    return ["--package", package] if package else []
