from __future__ import annotations

from .registry import ToolRegistry

from .cargo_tools.build import (
    CargoBuildTool,
    CargoCheckTool,
    CargoCleanTool,
    CargoClippyTool,
    CargoFmtCheckTool,
)
from .cargo_tools.deps import CargoAddTool, CargoRemoveTool, CargoUpdateTool
from .cargo_tools.run import CargoRunTool
from .cargo_tools.session_tools import (
    GetSessionInfoTool,
    SetCargoEnvTool,
    SetDefaultToolchainTool,
    SetWorkingDirectoryTool,
)
from .cargo_tools.testing import CargoBenchTool, CargoTestTool


def register_cargo_tools(registry: ToolRegistry) -> None:
    # order is what tools/list reports
    registry.register(CargoCheckTool())
    registry.register(CargoClippyTool())
    registry.register(CargoTestTool())
    registry.register(CargoFmtCheckTool())
    registry.register(CargoBuildTool())
    registry.register(CargoBenchTool())
    registry.register(CargoAddTool())
    registry.register(CargoRemoveTool())
    registry.register(CargoUpdateTool())
    registry.register(CargoCleanTool())
    registry.register(SetWorkingDirectoryTool())
    registry.register(CargoRunTool())
    registry.register(SetDefaultToolchainTool())
    registry.register(SetCargoEnvTool())
    registry.register(GetSessionInfoTool())
