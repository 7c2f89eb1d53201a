"""
In-memory browser session store.

Why: Keep the persisted client state (identity, one-shot notices, CSRF token)
server-side and opaque to the browser. The cookie carries only a random id.

Security: Session ids come from `secrets.token_urlsafe`; expired records are
dropped on read so a stale cookie behaves like a fresh visitor.

Anonymous visitors get an unsaved record from `new()`. It is only saved once
it holds state (a CSRF token, a notice or an identity), so requests that are
merely redirected leave nothing behind. Every save sweeps expired records.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import secrets
import time


DEFAULT_SESSION_TTL_SECONDS = 8 * 3600


def _now() -> int:
    return int(time.time())


@dataclass
class SessionRecord:
    session_id: str
    data: Dict[str, str] = field(default_factory=dict)
    notices: List[Dict[str, Any]] = field(default_factory=list)
    csrf_token: Optional[str] = None
    expires_at: Optional[int] = None

    def ensure_csrf_token(self) -> str:
        if not self.csrf_token:
            self.csrf_token = secrets.token_urlsafe(24)
        return self.csrf_token

    def push_notice(self, notice: Dict[str, Any]) -> None:
        self.notices.append(dict(notice))

    def pop_notices(self) -> List[Dict[str, Any]]:
        pending, self.notices = self.notices, []
        return pending

    def has_state(self) -> bool:
        return bool(self.data or self.notices or self.csrf_token)


class SessionStore:
    def __init__(self, *, ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS):
        self.ttl_seconds = ttl_seconds
        self._data: Dict[str, SessionRecord] = {}

    def new(self, *, data: Optional[Dict[str, str]] = None, ttl_seconds: Optional[int] = None) -> SessionRecord:
        """Return an unsaved record; `save()` keeps it."""
        sid = secrets.token_urlsafe(24)
        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        return SessionRecord(session_id=sid, data=dict(data or {}), expires_at=_now() + ttl)

    def save(self, rec: SessionRecord) -> SessionRecord:
        self.sweep()
        self._data[rec.session_id] = rec
        return rec

    def create(self, *, data: Optional[Dict[str, str]] = None, ttl_seconds: Optional[int] = None) -> SessionRecord:
        return self.save(self.new(data=data, ttl_seconds=ttl_seconds))

    def get(self, session_id: str) -> Optional[SessionRecord]:
        rec = self._data.get(session_id)
        if not rec:
            return None
        if rec.expires_at and rec.expires_at < _now():
            self._data.pop(session_id, None)
            return None
        return rec

    def touch(self, session_id: str) -> None:
        rec = self._data.get(session_id)
        if rec:
            rec.expires_at = _now() + self.ttl_seconds

    def sweep(self) -> int:
        """Drop expired records and return how many went."""
        now = _now()
        expired = [sid for sid, rec in self._data.items() if rec.expires_at and rec.expires_at < now]
        for sid in expired:
            del self._data[sid]
        return len(expired)

    def delete(self, session_id: str) -> None:
        self._data.pop(session_id, None)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._data

    def __len__(self) -> int:
        return len(self._data)
