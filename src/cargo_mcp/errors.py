from __future__ import annotations


class CargoMcpError(RuntimeError):
    """Base class for errors reported back to the caller as tool failures."""


class ToolArgumentError(CargoMcpError):
    pass


class UnknownToolError(CargoMcpError):
    pass


class PreconditionError(CargoMcpError):
    pass


class CommandStartError(CargoMcpError):
    """The subprocess could not be launched at all.

    ``report`` holds the rendered report so the caller still sees the command line.
    """

    def __init__(self, message: str, report: str = ""):
        super().__init__(message)
        self.report = report


class SessionStoreError(CargoMcpError):
    pass
