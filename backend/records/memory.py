"""
In-memory Record Store used for development and tests.

Behavior mirrors the hosted table store closely enough for the views:
generated UUID ids, server-side timestamps, ordering with NULLs first on
descending sorts, and "maybe one row" lookups that treat ambiguity as absence.
"""
from __future__ import annotations

import copy
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence
from uuid import uuid4

from .ports import MESSAGES, PROGRESS, SESSIONS, STUDENTS, TABLES, Filter, RecordStoreError, ensure_table


logger = logging.getLogger("tutordesk.records")

_CREATED_AT_TABLES = {STUDENTS, SESSIONS}


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _matches(row: Dict[str, Any], flt: Filter) -> bool:
    current = row.get(flt.column)
    if flt.op == "eq":
        return current == flt.value
    if flt.op == "not_null":
        return current is not None
    if flt.op == "in":
        return current in flt.value
    if current is None or flt.value is None:
        return False
    try:
        if flt.op == "gte":
            return current >= flt.value
        return current <= flt.value
    except TypeError:
        # Mixed types never compare in the hosted store either.
        return False


class InMemoryRecordStore:
    """Dict-backed adapter implementing RecordStoreProtocol."""

    backend_name = "memory"

    def __init__(self) -> None:
        self._tables: Dict[str, Dict[str, Dict[str, Any]]] = {name: {} for name in TABLES}

    def select(
        self,
        table: str,
        *,
        columns: str = "*",
        filters: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        ascending: bool = True,
    ) -> List[Dict[str, Any]]:
        ensure_table(table, "select")
        rows = self._matching(table, filters)
        if order_by:
            present = [r for r in rows if r.get(order_by) is not None]
            missing = [r for r in rows if r.get(order_by) is None]
            present.sort(key=lambda r: r[order_by], reverse=not ascending)
            rows = present + missing if ascending else missing + present
        return [self._project(row, columns) for row in rows]

    def maybe_single(self, table: str, *, filters: Sequence[Filter]) -> Optional[Dict[str, Any]]:
        ensure_table(table, "maybe_single")
        rows = self._matching(table, filters)
        if len(rows) > 1:
            logger.warning("Ambiguous lookup on %s: %d rows matched", table, len(rows))
            return None
        return copy.deepcopy(rows[0]) if rows else None

    def insert(self, table: str, values: Dict[str, Any]) -> Dict[str, Any]:
        ensure_table(table, "insert")
        row = copy.deepcopy(dict(values))
        row_id = str(row.get("id") or uuid4())
        if row_id in self._tables[table]:
            raise RecordStoreError(table, "insert", "duplicate id")
        row["id"] = row_id
        if table in _CREATED_AT_TABLES:
            row.setdefault("created_at", _now_iso())
        if table == PROGRESS:
            row.setdefault("updated_at", _now_iso())
        if table == MESSAGES:
            row.setdefault("timestamp", _now_iso())
        self._tables[table][row_id] = row
        return copy.deepcopy(row)

    def update(self, table: str, row_id: str, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        ensure_table(table, "update")
        row = self._tables[table].get(row_id)
        if row is None:
            return None
        changes = copy.deepcopy(dict(values))
        changes.pop("id", None)
        row.update(changes)
        if table == PROGRESS and "updated_at" not in values:
            row["updated_at"] = _now_iso()
        return copy.deepcopy(row)

    def delete(self, table: str, row_id: str) -> None:
        ensure_table(table, "delete")
        self._tables[table].pop(row_id, None)

    def _matching(self, table: str, filters: Sequence[Filter]) -> List[Dict[str, Any]]:
        return [row for row in self._tables[table].values() if all(_matches(row, f) for f in filters)]

    @staticmethod
    def _project(row: Dict[str, Any], columns: str) -> Dict[str, Any]:
        if columns.strip() == "*":
            return copy.deepcopy(row)
        wanted = [c.strip() for c in columns.split(",") if c.strip()]
        return {c: copy.deepcopy(row.get(c)) for c in wanted}


__all__ = ["InMemoryRecordStore"]
