"""Shared fixtures: in-memory app context and a recording command runner."""

from pathlib import Path

import pytest

from cargo_mcp.app_context import AppContext
from cargo_mcp.util.subprocess import CmdResult, SUCCEEDED


class FakeRunner:
    """Records every CommandSpec it is asked to run and returns a canned result."""

    def __init__(self, result=None):
        self.result = result or CmdResult(SUCCEEDED, stdout="ok\n", returncode=0)
        self.calls = []

    def __call__(self, spec, timeout=None):
        self.calls.append(spec)
        return self.result

    @property
    def last(self):
        return self.calls[-1]


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def ctx(runner):
    return AppContext.in_memory(runner=runner)


@pytest.fixture
def rust_project(tmp_path):
    project = tmp_path / "crate"
    project.mkdir()
    (project / "Cargo.toml").write_text('[package]\nname = "demo"\nversion = "0.1.0"\n', encoding="utf-8")
    return project.resolve()


@pytest.fixture
def project_ctx(ctx, rust_project):
    ctx.set_working_directory(rust_project)
    return ctx
