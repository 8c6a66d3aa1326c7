"""Tests for running commands and rendering reports."""

import sys

import pytest

from cargo_mcp.command.builder import CommandSpec
from cargo_mcp.command.executor import execute_command, format_command, render_report, shell_escape
from cargo_mcp.errors import CommandStartError
from cargo_mcp.util.subprocess import (
    CmdResult,
    FAILED,
    NOT_STARTED,
    SIGNALED,
    SUCCEEDED,
    TIMED_OUT,
    run_cmd,
)


def _spec(*args, program="cargo", cwd="/work"):
    return CommandSpec(program=program, args=tuple(args), cwd=cwd)


class TestFormatCommand:
    def test_plain_args(self):
        assert format_command(_spec("check", "--package", "foo")) == "cargo check --package foo"

    def test_program_only(self):
        assert format_command(_spec()) == "cargo"

    def test_quotes_tokens_with_spaces_and_quotes(self):
        assert shell_escape("-D warnings") == '"-D warnings"'
        assert shell_escape('say "hi"') == '"say \\"hi\\""'
        assert shell_escape("it's") == '"it\'s"'
        assert shell_escape("plain") == "plain"


class TestRenderReport:
    """Tests for the textual report layout."""

    def test_success_with_stdout(self):
        report = render_report("cargo check", _spec("check"), CmdResult(SUCCEEDED, stdout="Finished", returncode=0))

        assert report.startswith("=== cargo check ===\n")
        assert "📁 Working directory: /work\n" in report
        assert "🔧 Command: cargo check\n" in report
        assert "✅ Command completed successfully" in report
        assert "📤 STDOUT:\nFinished\n" in report
        assert "STDERR" not in report
        assert "No output produced" not in report

    def test_failure_keeps_both_streams(self):
        res = CmdResult(FAILED, stdout="partial\n", stderr="error[E0308]: mismatched types\n", returncode=101)
        report = render_report("cargo build", _spec("build"), res)

        assert "❌ Command failed with exit code: 101" in report
        assert "📤 STDOUT:\npartial\n" in report
        assert "📤 STDERR:\nerror[E0308]: mismatched types\n" in report
        assert report.index("STDOUT") < report.index("STDERR")

    def test_no_output_marker(self):
        report = render_report("cargo clean", _spec("clean"), CmdResult(SUCCEEDED, returncode=0))
        assert "ℹ️  No output produced" in report

    def test_other_statuses(self):
        spec = _spec("run")
        assert "terminated by signal 9" in render_report("cargo run", spec, CmdResult(SIGNALED, returncode=-9))
        assert "timed out after 5 seconds" in render_report("cargo run", spec, CmdResult(TIMED_OUT, detail="5"))
        assert "could not be started: nope" in render_report("cargo run", spec, CmdResult(NOT_STARTED, detail="nope"))


class TestExecuteCommand:
    def test_nonzero_exit_is_not_raised(self):
        res = CmdResult(FAILED, stderr="boom", returncode=101)
        report = execute_command(_spec("test"), "cargo test", runner=lambda spec, timeout: res)

        assert "exit code: 101" in report
        assert "boom" in report

    def test_not_started_raises_with_report(self):
        res = CmdResult(NOT_STARTED, detail="[Errno 2] No such file or directory: 'cargo'")
        with pytest.raises(CommandStartError) as info:
            execute_command(_spec("check"), "cargo check", runner=lambda spec, timeout: res)

        assert "Failed to start 'cargo'" in str(info.value)
        assert "🔧 Command: cargo check" in info.value.report


class TestRunCmd:
    """These run a real interpreter as the child process."""

    def test_captures_streams_and_exit_code(self, tmp_path):
        code = "import sys; sys.stdout.write('out'); sys.stderr.write('err'); sys.exit(3)"
        res = run_cmd([sys.executable, "-c", code], cwd=str(tmp_path))

        assert res.status == FAILED
        assert res.returncode == 3
        assert res.stdout == "out"
        assert res.stderr == "err"

    def test_env_overlay_and_cwd(self, tmp_path):
        code = "import os; print(os.environ['CARGO_MCP_T'], os.getcwd(), 'PATH' in os.environ)"
        res = run_cmd([sys.executable, "-c", code], cwd=str(tmp_path), env={"CARGO_MCP_T": "yes"})

        assert res.ok
        value, cwd, has_path = res.stdout.split()
        assert value == "yes"
        assert cwd == str(tmp_path.resolve())
        assert has_path == "True"

    def test_invalid_utf8_is_replaced(self, tmp_path):
        code = "import sys; sys.stdout.buffer.write(b'bad \\xff byte')"
        res = run_cmd([sys.executable, "-c", code], cwd=str(tmp_path))

        assert res.ok
        assert res.stdout == "bad � byte"

    def test_missing_program(self, tmp_path):
        res = run_cmd(["definitely-not-a-real-program-xyz"], cwd=str(tmp_path))

        assert res.status == NOT_STARTED
        assert res.detail

    def test_timeout(self, tmp_path):
        res = run_cmd([sys.executable, "-c", "import time; time.sleep(10)"], cwd=str(tmp_path), timeout=0.5)

        assert res.status == TIMED_OUT
        assert res.detail == "0.5"
