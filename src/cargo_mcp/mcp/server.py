from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from .. import __version__
from ..app_context import AppContext
from ..errors import CargoMcpError
from .protocol import (
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    TOOL_EXECUTION_FAILED,
    Notification,
    Request,
    Response,
)

logger = logging.getLogger(__name__)

SERVER_NAME = "cargo-mcp"
PROTOCOL_VERSION = "2025-06-18"
INSTRUCTIONS = """Cargo operations for Rust projects.

Use set_working_directory to set the project directory first, then run cargo commands."""


@dataclass
class ToolCallParams:
    name: str
    arguments: dict[str, Any]

    @staticmethod
    def from_obj(obj: Any) -> "ToolCallParams":
        if not isinstance(obj, dict):
            raise ValueError(f"params must be an object, got {type(obj).__name__}")
        name = obj.get("name")
        if not isinstance(name, str) or not name:
            raise ValueError("missing field `name`")
        arguments = obj.get("arguments")
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            raise ValueError(f"`arguments` must be an object, got {type(arguments).__name__}")
        return ToolCallParams(name=name, arguments=arguments)


class McpServer:
    """Routes requests to handlers. Every request yields exactly one Response."""

    def __init__(self, ctx: AppContext):
        self.ctx = ctx
        self._handlers = {
            "initialize": self._initialize,
            "tools/list": self._tools_list,
            "tools/call": self._tools_call,
        }

    def handle_request(self, req: Request) -> Response:
        handler = self._handlers.get(req.method)
        if handler is None:
            return Response.failure(req.id, METHOD_NOT_FOUND, f"Method not found: {req.method}")
        try:
            return handler(req)
        except Exception as e:
            # handlers convert expected failures themselves; this is the last boundary
            logger.exception("unhandled error in %s", req.method)
            return Response.failure(req.id, TOOL_EXECUTION_FAILED, f"Internal error: {e}")

    def handle_notification(self, note: Notification) -> None:
        if note.method == "notifications/initialized":
            logger.info("client initialized")
        elif note.method == "notifications/cancelled":
            # requests run to completion; nothing to cancel
            logger.debug("ignoring cancellation: %s", note.params)
        else:
            logger.debug("ignoring notification %s", note.method)

    def _initialize(self, req: Request) -> Response:
        version = PROTOCOL_VERSION
        if isinstance(req.params, dict) and isinstance(req.params.get("protocolVersion"), str):
            version = req.params["protocolVersion"]
        return Response.success(req.id, {
            "protocolVersion": version,
            "capabilities": {"tools": {}},
            "serverInfo": {"name": SERVER_NAME, "version": __version__},
            "instructions": INSTRUCTIONS,
        })

    def _tools_list(self, req: Request) -> Response:
        return Response.success(req.id, {"tools": [s.to_mcp() for s in self.ctx.tools.list_specs()]})

    def _tools_call(self, req: Request) -> Response:
        try:
            params = ToolCallParams.from_obj(req.params)
        except ValueError as e:
            return Response.failure(req.id, INVALID_PARAMS, "Invalid params", data=str(e))

        logger.info("tools/call %s", params.name)
        try:
            text = self.ctx.tools.call(self.ctx, params.name, params.arguments)
        except CargoMcpError as e:
            logger.warning("tool %s failed: %s", params.name, e)
            return Response.failure(req.id, TOOL_EXECUTION_FAILED, f"Tool execution failed: {e}")
        return Response.success(req.id, {"content": [{"type": "text", "text": text}]})
