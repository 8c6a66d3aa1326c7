from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..session.models import DEFAULT_SESSION_ID

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def default_session_dir() -> Path:
    # Shared with sibling tool servers, so not a per-app platformdirs location.
    return Path.home() / ".ai-tools" / "sessions"


@dataclass
class Settings:
    session_dir: Path = field(default_factory=default_session_dir)
    session_id: str = DEFAULT_SESSION_ID
    default_toolchain: str | None = None
    cargo_env: dict[str, str] = field(default_factory=dict)
    command_timeout: float | None = None
    log_level: str = "WARNING"

    loaded_from: list[Path] = field(default_factory=list)

    def apply_obj(self, obj: dict[str, Any]) -> None:
        """Overlay values from a parsed config object; invalid fields are skipped."""
        sd = obj.get("session_dir")
        if isinstance(sd, str) and sd.strip():
            self.session_dir = Path(sd).expanduser()

        sid = obj.get("session_id")
        if isinstance(sid, str) and sid.strip():
            self.session_id = sid.strip()

        tc = obj.get("default_toolchain")
        if isinstance(tc, str) and tc.strip():
            self.default_toolchain = tc.strip()

        env = obj.get("cargo_env")
        if isinstance(env, dict):
            for k, v in env.items():
                if isinstance(k, str) and isinstance(v, (str, int, float, bool)):
                    self.cargo_env[k] = str(v).lower() if isinstance(v, bool) else str(v)

        to = obj.get("command_timeout")
        if isinstance(to, (int, float)) and not isinstance(to, bool) and to > 0:
            self.command_timeout = float(to)

        lvl = obj.get("log_level")
        if isinstance(lvl, str) and lvl.upper() in LOG_LEVELS:
            self.log_level = lvl.upper()

    @property
    def private_store_path(self) -> Path:
        return self.session_dir / "cargo-mcp.json"

    @property
    def shared_store_path(self) -> Path:
        return self.session_dir / "shared-context.json"
