from __future__ import annotations
import os
import subprocess
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

SUCCEEDED = "succeeded"
FAILED = "failed"
SIGNALED = "signaled"
TIMED_OUT = "timed_out"
NOT_STARTED = "not_started"


@dataclass
class CmdResult:
    status: str
    stdout: str = ""
    stderr: str = ""
    returncode: Optional[int] = None
    # why the process never ran, or the timeout in seconds
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.status == SUCCEEDED


def _decode(data: bytes | None) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace")


def run_cmd(
    cmd: Sequence[str],
    cwd: str,
    env: Optional[Mapping[str, str]] = None,
    timeout: Optional[float] = None,
) -> CmdResult:
    full_env = None
    if env:
        full_env = {**os.environ, **env}
    try:
        p = subprocess.run(
            list(cmd),
            cwd=cwd,
            env=full_env,
            capture_output=True,
            timeout=timeout,
            shell=False,
            stdin=subprocess.DEVNULL,
        )
    except subprocess.TimeoutExpired as e:
        return CmdResult(TIMED_OUT, _decode(e.stdout), _decode(e.stderr), detail=f"{timeout:g}")
    except OSError as e:
        return CmdResult(NOT_STARTED, detail=str(e))

    if p.returncode == 0:
        status = SUCCEEDED
    elif p.returncode < 0:
        status = SIGNALED
    else:
        status = FAILED
    return CmdResult(status, _decode(p.stdout), _decode(p.stderr), returncode=p.returncode)
