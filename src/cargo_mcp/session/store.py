from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Callable, Generic, Protocol, TypeVar

from ..errors import SessionStoreError

logger = logging.getLogger(__name__)


class _Record(Protocol):
    def to_dict(self) -> dict[str, Any]: ...


R = TypeVar("R", bound=_Record)


class JsonSessionStore(Generic[R]):
    """Session id -> record mapping persisted as one JSON object.

    With ``path=None`` the store lives in memory only. File-backed stores
    re-read the file on every access so that writes from sibling processes
    are picked up. Updates are whole-record read-modify-write; the last
    writer wins.
    """

    def __init__(self, path: Path | None, factory: Callable[[Any], R]):
        self.path = path
        self._factory = factory
        self._sessions: dict[str, Any] = {}
        if path is not None:
            path.parent.mkdir(parents=True, exist_ok=True)
            self._load()

    def _load(self) -> dict[str, Any]:
        if self.path is None:
            return self._sessions
        if not self.path.exists():
            self._sessions = {}
            return self._sessions
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise SessionStoreError(f"Could not read session store {self.path}: {e}") from e
        if not text.strip():
            self._sessions = {}
            return self._sessions
        try:
            obj = json.loads(text)
        except json.JSONDecodeError as e:
            raise SessionStoreError(f"Session store {self.path} is not valid JSON: {e}") from e
        if not isinstance(obj, dict):
            raise SessionStoreError(f"Session store {self.path} must contain a JSON object")
        self._sessions = obj
        return self._sessions

    def _save(self) -> None:
        if self.path is None:
            return
        data = json.dumps(self._sessions, ensure_ascii=False, indent=2)
        try:
            fd, tmp = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=str(self.path.parent))
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(data + "\n")
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp, self.path)
            except BaseException:
                Path(tmp).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise SessionStoreError(f"Could not write session store {self.path}: {e}") from e

    def get_or_create(self, session_id: str) -> R:
        sessions = self._load()
        if session_id in sessions:
            return self._factory(sessions[session_id])
        record = self._factory(None)
        sessions[session_id] = record.to_dict()
        self._save()
        logger.debug("created session %r in %s", session_id, self.path or "<memory>")
        return record

    def update(self, session_id: str, fn: Callable[[R], None]) -> R:
        sessions = self._load()
        record = self._factory(sessions.get(session_id))
        fn(record)
        sessions[session_id] = record.to_dict()
        self._save()
        return record

    def session_ids(self) -> list[str]:
        return sorted(self._load().keys())
