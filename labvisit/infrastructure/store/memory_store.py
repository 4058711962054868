from __future__ import annotations

import time
import uuid

from labvisit.application.ports.session_store import WizardSessionStorePort
from labvisit.application.use_cases.wizard import WizardController


class MemoryWizardSessionStore(WizardSessionStorePort):
    def __init__(self, ttl_seconds: float = 2 * 60 * 60, max_sessions: int = 1000) -> None:
        self._sessions: dict[str, WizardController] = {}
        self._last_seen: dict[str, float] = {}
        self._ttl_seconds = ttl_seconds
        self._max_sessions = max_sessions

    def create(self, controller: WizardController) -> str:
        self._evict(time.monotonic())
        session_id = uuid.uuid4().hex
        self._sessions[session_id] = controller
        self._last_seen[session_id] = time.monotonic()
        return session_id

    def get(self, session_id: str) -> WizardController | None:
        controller = self._sessions.get(session_id)
        if controller is None:
            return None
        now = time.monotonic()
        if now - self._last_seen[session_id] > self._ttl_seconds:
            self.discard(session_id)
            return None
        self._last_seen[session_id] = now
        return controller

    def discard(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)
        self._last_seen.pop(session_id, None)

    def __len__(self) -> int:
        return len(self._sessions)

    def _evict(self, now: float) -> None:
        expired = [sid for sid, seen in self._last_seen.items() if now - seen > self._ttl_seconds]
        for sid in expired:
            self.discard(sid)
        # Oldest first once the store is full.
        while len(self._sessions) >= self._max_sessions:
            oldest = min(self._last_seen, key=self._last_seen.__getitem__)
            self.discard(oldest)
