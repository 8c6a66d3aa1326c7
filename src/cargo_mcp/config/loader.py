from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Mapping

from platformdirs import user_config_dir

from ..errors import CargoMcpError
from .models import Settings

APP_NAME = "cargo-mcp"

ENV_DEFAULT_TOOLCHAIN = "CARGO_MCP_DEFAULT_TOOLCHAIN"
ENV_SESSION_DIR = "CARGO_MCP_SESSION_DIR"
ENV_SESSION_ID = "CARGO_MCP_SESSION_ID"
ENV_LOG_LEVEL = "CARGO_MCP_LOG_LEVEL"


class ConfigError(CargoMcpError):
    pass


def _global_candidate_paths() -> list[Path]:
    cfg_dir = Path(user_config_dir(APP_NAME))
    return [cfg_dir / "cargo-mcp.json"]


def _load_json(p: Path) -> dict[str, Any] | None:
    try:
        obj = json.loads(p.read_text(encoding="utf-8"))
        if isinstance(obj, dict):
            return obj
        return None
    except Exception:
        return None


def _env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    keys = {
        ENV_DEFAULT_TOOLCHAIN: "default_toolchain",
        ENV_SESSION_DIR: "session_dir",
        ENV_SESSION_ID: "session_id",
        ENV_LOG_LEVEL: "log_level",
    }
    out: dict[str, Any] = {}
    for env_key, field_name in keys.items():
        v = environ.get(env_key)
        if v:
            out[field_name] = v
    return out


def load_settings(
    *,
    explicit_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
    use_global: bool = True,
) -> Settings:
    """Load settings.

    Merge order: global config < explicit_path < environment variables.
    CLI options are applied by the caller on top of the result.
    """
    environ = os.environ if environ is None else environ
    settings = Settings()

    if use_global:
        for p in _global_candidate_paths():
            if p.exists() and p.is_file():
                obj = _load_json(p)
                if obj is not None:
                    settings.apply_obj(obj)
                    settings.loaded_from.append(p)

    if explicit_path is not None:
        p = explicit_path.expanduser().resolve()
        # an explicitly requested file that can't be used is fatal
        if not p.is_file():
            raise ConfigError(f"Config file not found: {p}")
        obj = _load_json(p)
        if obj is None:
            raise ConfigError(f"Config file must contain a JSON object: {p}")
        settings.apply_obj(obj)
        settings.loaded_from.append(p)

    settings.apply_obj(_env_overrides(environ))
    return settings
