from __future__ import annotations

import io
import json
import logging
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .app_context import AppContext
from .config.loader import load_settings
from .config.models import Settings
from .errors import CargoMcpError
from .mcp.server import McpServer
from .mcp.transport import serve as serve_stdio
from .util.log import setup_logging, stderr_console

logger = logging.getLogger(__name__)

app = typer.Typer(add_completion=False, help="cargo-mcp: Cargo operations for AI agents over stdio JSON-RPC.")
console = Console()

CONFIG_OPT = typer.Option(None, "--config", help="Optional settings JSON (cargo-mcp.json) path.")
SESSION_DIR_OPT = typer.Option(None, "--session-dir", help="Directory holding the session stores (default: ~/.ai-tools/sessions).")
SESSION_ID_OPT = typer.Option(None, "--session-id", help="Session id (default: 'default').")
LOG_LEVEL_OPT = typer.Option(None, "--log-level", help="DEBUG/INFO/WARNING/ERROR; logs go to stderr.")


def _settings(config: Path | None, session_dir: Path | None, session_id: str | None, log_level: str | None) -> Settings:
    try:
        settings = load_settings(explicit_path=config)
    except CargoMcpError as e:
        stderr_console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=2)
    overrides: dict[str, str] = {}
    if session_dir is not None:
        overrides["session_dir"] = str(session_dir)
    if session_id:
        overrides["session_id"] = session_id
    if log_level:
        overrides["log_level"] = log_level
    settings.apply_obj(overrides)
    setup_logging(settings.log_level)
    return settings


def _context(settings: Settings) -> AppContext:
    try:
        return AppContext.from_settings(settings)
    except CargoMcpError as e:
        stderr_console.print(f"[red]Failed to open session stores: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context):
    # bare `cargo-mcp` is what MCP clients launch
    if ctx.invoked_subcommand is None:
        serve(config=None, session_dir=None, session_id=None, log_level=None)


@app.command()
def serve(
    config: Path = CONFIG_OPT,
    session_dir: Path = SESSION_DIR_OPT,
    session_id: str = SESSION_ID_OPT,
    log_level: str = LOG_LEVEL_OPT,
):
    """Serve JSON-RPC on stdin/stdout until stdin closes."""
    settings = _settings(config, session_dir, session_id, log_level)
    app_ctx = _context(settings)
    # the wire format is UTF-8 whatever the locale says
    for stream in (sys.stdin, sys.stdout):
        if isinstance(stream, io.TextIOWrapper):
            try:
                stream.reconfigure(encoding="utf-8", errors="replace")
            except (ValueError, io.UnsupportedOperation):
                logger.debug("could not reconfigure %s", stream)
    serve_stdio(McpServer(app_ctx))


@app.command()
def tools():
    """List the registered tools."""
    table = Table(title="cargo-mcp tools")
    table.add_column("name", style="bright_cyan", no_wrap=True)
    table.add_column("description")
    for spec in AppContext.in_memory().tools.list_specs():
        table.add_row(spec.name, spec.description)
    console.print(table)


@app.command()
def call(
    name: str = typer.Argument(..., help="Tool name, e.g. cargo_check."),
    args: str = typer.Option("{}", "--args", "-a", help="Tool arguments as a JSON object."),
    config: Path = CONFIG_OPT,
    session_dir: Path = SESSION_DIR_OPT,
    session_id: str = SESSION_ID_OPT,
    log_level: str = LOG_LEVEL_OPT,
):
    """Run a single tool call against the persisted session and print its report."""
    try:
        arguments = json.loads(args)
    except json.JSONDecodeError as e:
        raise typer.BadParameter(f"--args is not valid JSON: {e}")
    settings = _settings(config, session_dir, session_id, log_level)
    app_ctx = _context(settings)
    try:
        text = app_ctx.tools.call(app_ctx, name, arguments)
    except CargoMcpError as e:
        stderr_console.print(f"[red]Tool execution failed:[/red] {escape(str(e))}", highlight=False)
        raise typer.Exit(code=1)
    console.print(text, markup=False, highlight=False, emoji=False, soft_wrap=True)
