from __future__ import annotations

import json
import logging
from typing import Callable, Optional

from ..errors import CommandStartError
from ..util.subprocess import (
    CmdResult,
    FAILED,
    NOT_STARTED,
    SIGNALED,
    SUCCEEDED,
    TIMED_OUT,
    run_cmd,
)
from .builder import CommandSpec

logger = logging.getLogger(__name__)

Runner = Callable[[CommandSpec, Optional[float]], CmdResult]


def shell_escape(arg: str) -> str:
    if any(c in arg for c in (" ", '"', "'", "\\")):
        return json.dumps(arg, ensure_ascii=False)
    return arg


def format_command(spec: CommandSpec) -> str:
    args = " ".join(shell_escape(a) for a in spec.args)
    return f"{spec.program} {args}" if args else spec.program


def _status_line(res: CmdResult) -> str:
    if res.status == SUCCEEDED:
        return "✅ Command completed successfully"
    if res.status == FAILED:
        return f"❌ Command failed with exit code: {res.returncode}"
    if res.status == SIGNALED:
        return f"❌ Command terminated by signal {-(res.returncode or 0)}"
    if res.status == TIMED_OUT:
        return f"❌ Command timed out after {res.detail} seconds"
    if res.status == NOT_STARTED:
        return f"❌ Command could not be started: {res.detail}"
    return f"❌ Command finished with unknown status: {res.status}"


def _section(label: str, text: str) -> str:
    if not text.endswith("\n"):
        text += "\n"
    return f"📤 {label}:\n{text}\n"


def render_report(title: str, spec: CommandSpec, res: CmdResult) -> str:
    out = f"=== {title} ===\n"
    out += f"📁 Working directory: {spec.cwd}\n"
    out += f"🔧 Command: {format_command(spec)}\n\n"
    out += _status_line(res) + "\n\n"
    if res.stdout:
        out += _section("STDOUT", res.stdout)
    if res.stderr:
        out += _section("STDERR", res.stderr)
    if not res.stdout and not res.stderr:
        out += "ℹ️  No output produced\n"
    return out


def default_runner(spec: CommandSpec, timeout: Optional[float] = None) -> CmdResult:
    return run_cmd(spec.argv, cwd=spec.cwd, env=spec.env, timeout=timeout)


def execute_command(
    spec: CommandSpec,
    title: str,
    *,
    runner: Runner = default_runner,
    timeout: Optional[float] = None,
) -> str:
    """Run ``spec`` to completion and return the textual report.

    A non-zero exit is still a successful call: the report documents it.
    Only a process that never started raises, as CommandStartError.
    """
    logger.info("running: %s (cwd=%s)", format_command(spec), spec.cwd)
    res = runner(spec, timeout)
    report = render_report(title, spec, res)
    if res.status == NOT_STARTED:
        raise CommandStartError(f"Failed to start {spec.program!r}: {res.detail}\n\n{report}", report=report)
    logger.info("%s finished: %s", title, res.status)
    return report
