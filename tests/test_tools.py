"""Tests for the cargo tools and session tools, using a recording runner."""

import pytest

from cargo_mcp.errors import PreconditionError, ToolArgumentError, UnknownToolError
from cargo_mcp.util.subprocess import CmdResult, FAILED


def call(ctx, name, **arguments):
    return ctx.tools.call(ctx, name, arguments)


class TestPreconditions:
    """Checks that happen before any subprocess is spawned."""

    def test_no_working_directory(self, ctx, runner):
        with pytest.raises(PreconditionError, match="No working directory set"):
            call(ctx, "cargo_check")
        assert runner.calls == []

    def test_not_a_rust_project(self, ctx, runner, tmp_path):
        ctx.set_working_directory(tmp_path)

        with pytest.raises(PreconditionError, match="Cargo.toml not found"):
            call(ctx, "cargo_build")
        assert runner.calls == []

    @pytest.mark.parametrize("tool", ["cargo_add", "cargo_remove"])
    def test_empty_dependencies(self, project_ctx, runner, tool):
        with pytest.raises(ToolArgumentError, match="No dependencies specified"):
            call(project_ctx, tool, dependencies=[])
        assert runner.calls == []

    @pytest.mark.parametrize("tool", ["cargo_add", "cargo_remove"])
    def test_missing_dependencies(self, project_ctx, tool):
        with pytest.raises(ToolArgumentError, match="dependencies"):
            call(project_ctx, tool)

    def test_empty_dependencies_checked_before_working_directory(self, ctx):
        with pytest.raises(ToolArgumentError, match="No dependencies specified"):
            call(ctx, "cargo_add", dependencies=[])

    def test_unknown_tool(self, ctx):
        with pytest.raises(UnknownToolError, match="cargo_frobnicate"):
            call(ctx, "cargo_frobnicate")

    def test_unknown_argument(self, project_ctx):
        with pytest.raises(ToolArgumentError, match="unknown argument"):
            call(project_ctx, "cargo_check", pakage="foo")

    def test_wrong_argument_type(self, project_ctx):
        with pytest.raises(ToolArgumentError, match="'release' must be a boolean"):
            call(project_ctx, "cargo_build", release="yes")

    def test_bad_env_value(self, project_ctx, runner):
        with pytest.raises(ToolArgumentError, match="RUSTFLAGS"):
            call(project_ctx, "cargo_check", cargo_env={"RUSTFLAGS": ["-D", "warnings"]})
        assert runner.calls == []


class TestArgumentAssembly:
    """The argv each tool hands to cargo."""

    @pytest.mark.parametrize(
        "tool, arguments, expected",
        [
            ("cargo_check", {}, ["check"]),
            ("cargo_check", {"package": "core"}, ["check", "--package", "core"]),
            ("cargo_build", {"package": "app", "release": True}, ["build", "--package", "app", "--release"]),
            ("cargo_test", {"package": "core", "test_name": "parses"}, ["test", "--package", "core", "parses"]),
            ("cargo_bench", {"bench_name": "hot", "baseline": "main"}, ["bench", "hot", "--", "--save-baseline", "main"]),
            ("cargo_bench", {}, ["bench"]),
            ("cargo_clippy", {}, ["clippy", "--", "-D", "warnings"]),
            ("cargo_clippy", {"package": "core", "fix": True}, ["clippy", "--package", "core", "--fix", "--", "-D", "warnings"]),
            ("cargo_fmt_check", {}, ["fmt", "--check"]),
            (
                "cargo_add",
                {"dependencies": ["serde", "tokio@1"], "package": "app", "dev": True, "optional": True, "features": ["derive", "rt"]},
                ["add", "--package", "app", "--dev", "--optional", "--features", "derive,rt", "serde", "tokio@1"],
            ),
            ("cargo_add", {"dependencies": ["serde"], "features": []}, ["add", "serde"]),
            ("cargo_remove", {"dependencies": ["serde"], "dev": True}, ["remove", "--dev", "serde"]),
            (
                "cargo_update",
                {"package": "app", "dry_run": True, "dependencies": ["serde", "rand"]},
                ["update", "--package", "app", "--dry-run", "--package", "serde", "--package", "rand"],
            ),
            ("cargo_clean", {"package": "app"}, ["clean", "--package", "app"]),
            (
                "cargo_run",
                {
                    "package": "app", "bin": "srv", "example": "ex", "release": True, "features": "a b",
                    "all_features": True, "no_default_features": True, "args": ["--port", "8080"],
                },
                [
                    "run", "--package", "app", "--bin", "srv", "--example", "ex", "--release", "--features", "a b",
                    "--all-features", "--no-default-features", "--", "--port", "8080",
                ],
            ),
            ("cargo_run", {"args": []}, ["run"]),
        ],
    )
    def test_argv(self, project_ctx, runner, rust_project, tool, arguments, expected):
        project_ctx.tools.call(project_ctx, tool, arguments)

        spec = runner.last
        assert spec.program == "cargo"
        assert list(spec.args) == expected
        assert spec.cwd == str(rust_project)

    def test_one_separator_for_run(self, project_ctx, runner):
        call(project_ctx, "cargo_run", release=True, args=["--", "x"])

        args = list(runner.last.args)
        assert args.index("--") > args.index("--release")
        assert args[args.index("--"):] == ["--", "--", "x"]


class TestToolchainAndEnv:
    def test_explicit_toolchain(self, project_ctx, runner):
        project_ctx.set_default_toolchain("stable")
        call(project_ctx, "cargo_check", toolchain="nightly")

        assert runner.last.argv == ["rustup", "run", "nightly", "cargo", "check"]

    def test_session_toolchain(self, project_ctx, runner):
        project_ctx.set_default_toolchain("stable")
        call(project_ctx, "cargo_test")

        assert runner.last.argv[:4] == ["rustup", "run", "stable", "cargo"]

    def test_no_toolchain(self, project_ctx, runner):
        call(project_ctx, "cargo_fmt_check")
        assert runner.last.argv == ["cargo", "fmt", "--check"]

    def test_resolution_is_per_call(self, project_ctx, runner):
        project_ctx.set_default_toolchain("beta")
        call(project_ctx, "cargo_check")
        first = runner.last

        project_ctx.set_default_toolchain("nightly")
        call(project_ctx, "cargo_check")

        assert first.args[1] == "beta"
        assert runner.last.args[1] == "nightly"

    def test_env_merge(self, project_ctx, runner):
        project_ctx.set_cargo_env({"A": "1", "KEEP": "k"})
        call(project_ctx, "cargo_build", cargo_env={"A": "2", "B": 3, "C": True})

        assert runner.last.env == {"A": "2", "KEEP": "k", "B": "3", "C": "true"}
        assert project_ctx.get_cargo_env() == {"A": "1", "KEEP": "k"}


class TestResults:
    def test_failed_command_is_a_result(self, project_ctx, runner):
        runner.result = CmdResult(FAILED, stderr="error: could not compile `demo`\n", returncode=101)

        text = call(project_ctx, "cargo_build")

        assert "❌ Command failed with exit code: 101" in text
        assert "error: could not compile `demo`" in text


class TestSessionTools:
    def test_set_working_directory(self, ctx, rust_project):
        text = call(ctx, "set_working_directory", path=str(rust_project))

        assert f"Working directory set to: {rust_project}" in text
        assert "Rust project detected" in text
        assert ctx.get_context() == rust_project

    def test_set_working_directory_canonicalizes(self, ctx, rust_project):
        call(ctx, "set_working_directory", path=str(rust_project / ".." / rust_project.name))
        assert ctx.get_context() == rust_project

    def test_set_working_directory_expands_home(self, ctx, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        call(ctx, "set_working_directory", path="~")

        assert ctx.get_context() == tmp_path.resolve()

    def test_set_working_directory_warns_without_manifest(self, ctx, tmp_path):
        text = call(ctx, "set_working_directory", path=str(tmp_path))
        assert "No Cargo.toml found" in text

    def test_set_working_directory_missing_path(self, ctx, tmp_path):
        with pytest.raises(PreconditionError, match="Could not resolve path"):
            call(ctx, "set_working_directory", path=str(tmp_path / "nope"))
        assert ctx.get_context() is None

    def test_set_working_directory_requires_path(self, ctx):
        with pytest.raises(ToolArgumentError, match="path"):
            call(ctx, "set_working_directory")

    def test_default_toolchain_set_and_clear(self, ctx):
        call(ctx, "set_default_toolchain", toolchain="nightly")
        assert ctx.get_default_toolchain() == "nightly"

        text = call(ctx, "set_default_toolchain", toolchain=None)
        assert "cleared" in text
        assert ctx.get_default_toolchain() is None

    def test_set_cargo_env_merge_and_replace(self, ctx):
        call(ctx, "set_cargo_env", cargo_env={"A": "1"})
        call(ctx, "set_cargo_env", cargo_env={"B": False})
        assert ctx.get_cargo_env() == {"A": "1", "B": "false"}

        call(ctx, "set_cargo_env", cargo_env={"C": "x"}, replace=True)
        assert ctx.get_cargo_env() == {"C": "x"}

    def test_session_info(self, project_ctx, rust_project):
        project_ctx.set_default_toolchain("stable")
        text = call(project_ctx, "get_session_info")

        assert str(rust_project) in text
        assert "Default toolchain: stable" in text
        assert "Environment: (none)" in text
