from __future__ import annotations

import time
from threading import Lock
from typing import Any


class SessionRegistry:
    """
    Host-context bookkeeping: one entry per operator connection,
    pointing at the capture session currently bound to it.
    """

    def __init__(self):
        self._lock = Lock()
        self._sessions: dict[str, dict] = {}

    def register(self, connection_id: str, capture_session: Any = None) -> None:
        with self._lock:
            self._sessions[connection_id] = {
                "capture_session": capture_session,
                "created_at": time.time(),
                "updated_at": time.time(),
                "active": True,
            }

    def bind(self, connection_id: str, capture_session: Any) -> None:
        with self._lock:
            if connection_id in self._sessions:
                self._sessions[connection_id]["capture_session"] = capture_session
                self._sessions[connection_id]["updated_at"] = time.time()

    def touch(self, connection_id: str) -> None:
        with self._lock:
            if connection_id in self._sessions:
                self._sessions[connection_id]["updated_at"] = time.time()

    def mark_inactive(self, connection_id: str) -> None:
        with self._lock:
            if connection_id in self._sessions:
                self._sessions[connection_id]["active"] = False
                self._sessions[connection_id]["capture_session"] = None
                self._sessions[connection_id]["updated_at"] = time.time()

    def get(self, connection_id: str) -> dict | None:
        with self._lock:
            item = self._sessions.get(connection_id)
            return dict(item) if item else None

    def active_count(self) -> int:
        with self._lock:
            return sum(1 for item in self._sessions.values() if item.get("active"))

    def cleanup_inactive(self, ttl_sec: float) -> int:
        now_ts = time.time()
        cutoff = now_ts - max(30.0, float(ttl_sec or 900.0))
        removed = 0
        with self._lock:
            for connection_id, data in list(self._sessions.items()):
                if bool((data or {}).get("active", False)):
                    continue
                updated_at = float((data or {}).get("updated_at") or 0.0)
                if updated_at <= cutoff:
                    self._sessions.pop(connection_id, None)
                    removed += 1
        return removed


session_registry = SessionRegistry()
