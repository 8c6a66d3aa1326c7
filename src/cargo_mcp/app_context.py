from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Sequence

from .command.builder import PROJECT_MARKER, create_cargo_command, merge_env, resolve_toolchain
from .command.executor import Runner, default_runner, execute_command
from .config.models import Settings
from .errors import PreconditionError
from .session.models import DEFAULT_SESSION_ID, CargoSessionData, SharedContextData
from .session.store import JsonSessionStore
from .tools.builtin import register_cargo_tools
from .tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Everything a tool call needs: the two session stores, the registry and the runner.

    The cargo store holds toolchain/env defaults for this server only; the
    shared store holds the working directory and is read by sibling servers.
    """

    session_store: JsonSessionStore[CargoSessionData]
    shared_context_store: JsonSessionStore[SharedContextData]
    tools: ToolRegistry = field(default_factory=ToolRegistry)
    session_id: str = DEFAULT_SESSION_ID
    runner: Runner = default_runner
    command_timeout: Optional[float] = None

    @staticmethod
    def in_memory(runner: Runner = default_runner, session_id: str = DEFAULT_SESSION_ID) -> "AppContext":
        tools = ToolRegistry()
        register_cargo_tools(tools)
        return AppContext(
            session_store=JsonSessionStore(None, CargoSessionData.from_obj),
            shared_context_store=JsonSessionStore(None, SharedContextData.from_obj),
            tools=tools,
            session_id=session_id,
            runner=runner,
        )

    @staticmethod
    def from_settings(settings: Settings, runner: Runner = default_runner) -> "AppContext":
        tools = ToolRegistry()
        register_cargo_tools(tools)
        ctx = AppContext(
            session_store=JsonSessionStore(settings.private_store_path, CargoSessionData.from_obj),
            shared_context_store=JsonSessionStore(settings.shared_store_path, SharedContextData.from_obj),
            tools=tools,
            session_id=settings.session_id,
            runner=runner,
            command_timeout=settings.command_timeout,
        )
        if settings.default_toolchain:
            logger.info("Setting default toolchain from configuration: %s", settings.default_toolchain)
            ctx.set_default_toolchain(settings.default_toolchain)
        if settings.cargo_env:
            ctx.set_cargo_env(settings.cargo_env)
        return ctx

    def _sid(self, session_id: str | None) -> str:
        return session_id or self.session_id

    # ---- shared context (working directory) ----

    def get_context(self, session_id: str | None = None) -> Path | None:
        data = self.shared_context_store.get_or_create(self._sid(session_id))
        return Path(data.context_path) if data.context_path else None

    def set_working_directory(self, path: Path, session_id: str | None = None) -> None:
        def _set(data: SharedContextData) -> None:
            data.context_path = str(path)

        self.shared_context_store.update(self._sid(session_id), _set)

    # ---- cargo session ----

    def get_cargo_session(self, session_id: str | None = None) -> CargoSessionData:
        return self.session_store.get_or_create(self._sid(session_id))

    def get_default_toolchain(self, session_id: str | None = None) -> str | None:
        return self.get_cargo_session(session_id).default_toolchain

    def set_default_toolchain(self, toolchain: str | None, session_id: str | None = None) -> None:
        def _set(data: CargoSessionData) -> None:
            data.default_toolchain = toolchain or None

        self.session_store.update(self._sid(session_id), _set)

    def get_cargo_env(self, session_id: str | None = None) -> dict[str, str]:
        return dict(self.get_cargo_session(session_id).cargo_env)

    def set_cargo_env(self, env: Mapping[str, str], *, replace: bool = False, session_id: str | None = None) -> dict[str, str]:
        def _set(data: CargoSessionData) -> None:
            data.cargo_env = merge_env({} if replace else data.cargo_env, env)

        return dict(self.session_store.update(self._sid(session_id), _set).cargo_env)

    # ---- command execution ----

    def ensure_rust_project(self, session_id: str | None = None) -> Path:
        context = self.get_context(session_id)
        if context is None:
            raise PreconditionError("No working directory set. Use set_working_directory first.")
        if not (context / PROJECT_MARKER).exists():
            raise PreconditionError(f"Not a Rust project: {PROJECT_MARKER} not found in {context}")
        return context

    def run_cargo(
        self,
        cargo_args: Sequence[str],
        *,
        title: str,
        toolchain: str | None = None,
        cargo_env: Mapping[str, str] | None = None,
    ) -> str:
        project_path = self.ensure_rust_project()
        resolved = resolve_toolchain(toolchain, self.get_default_toolchain())
        env = merge_env(self.get_cargo_env(), cargo_env)
        spec = create_cargo_command(cargo_args, cwd=str(project_path), toolchain=resolved, env=env)
        return execute_command(spec, title, runner=self.runner, timeout=self.command_timeout)
