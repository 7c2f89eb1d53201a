"""
Identity Holder: the authenticated student for one browser session.

Why:
    Views receive the identity as an explicit dependency instead of reading a
    global. The holder loads once from persisted storage (no store round-trip)
    and then serves reads; login/logout are the only writes.

Security:
    The student code is both username and password-equivalent. Admin rights
    come from the persisted row and gate the presentation layer only.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Protocol

from records import STUDENTS, Filter, RecordStoreError, RecordStoreProtocol, Student

from .domain import IDENTITY_STORAGE_KEY, role_for
from .stores import SessionRecord


logger = logging.getLogger("tutordesk.identity_access")


class IdentityStorage(Protocol):
    """Key/value storage for serialized client state."""

    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class SessionIdentityStorage:
    """Binds IdentityStorage to the data mapping of a browser session."""

    def __init__(self, record: SessionRecord):
        self._record = record

    def get_item(self, key: str) -> Optional[str]:
        return self._record.data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._record.data[key] = value

    def remove_item(self, key: str) -> None:
        self._record.data.pop(key, None)


class IdentityHolder:
    """Current identity plus login/logout for one browser session."""

    def __init__(self, store: RecordStoreProtocol, storage: IdentityStorage):
        self._store = store
        self._storage = storage
        self._current: Optional[Student] = None
        self._row: Optional[Dict[str, Any]] = None
        self.initializing = True

    def initialize(self) -> "IdentityHolder":
        """Load the persisted identity synchronously; corrupt data means logged out."""
        raw = self._storage.get_item(IDENTITY_STORAGE_KEY)
        if raw:
            try:
                row = json.loads(raw)
                if not isinstance(row, dict):
                    raise ValueError("identity is not an object")
                self._row = row
                self._current = Student.from_row(row)
            except ValueError:
                logger.warning("Discarding unreadable persisted identity")
                self._storage.remove_item(IDENTITY_STORAGE_KEY)
                self._row = None
                self._current = None
        self.initializing = False
        return self

    def login(self, code: str) -> bool:
        """Look up exactly one student by code and persist the full row on success."""
        if not code:
            return False
        try:
            row = self._store.maybe_single(STUDENTS, filters=[Filter.eq("student_code", code)])
        except RecordStoreError as exc:
            logger.warning("Login lookup failed: %s", exc.__class__.__name__)
            return False
        if row is None:
            logger.info("Login rejected: no unique student for submitted code")
            return False
        self._storage.set_item(IDENTITY_STORAGE_KEY, json.dumps(row, default=str))
        self._row = dict(row)
        self._current = Student.from_row(row)
        self.initializing = False
        logger.info("Login succeeded for student id=%s", self._current.id)
        return True

    def logout(self) -> None:
        self._storage.remove_item(IDENTITY_STORAGE_KEY)
        self._row = None
        self._current = None

    @property
    def current(self) -> Optional[Student]:
        return self._current

    @property
    def current_row(self) -> Optional[Dict[str, Any]]:
        return dict(self._row) if self._row is not None else None

    @property
    def is_authenticated(self) -> bool:
        return self._current is not None

    @property
    def is_admin(self) -> bool:
        return bool(self._current and self._current.is_admin)

    @property
    def role(self) -> Optional[str]:
        return role_for(self._row) if self._row is not None else None


__all__ = ["IdentityStorage", "SessionIdentityStorage", "IdentityHolder"]
