"""
Supabase-backed Record Store.

This adapter implements RecordStoreProtocol on top of a `supabase` client
(`supabase.create_client(url, key)`). The client is duck-typed so tests can
pass a fake exposing `.table(name)` with the postgrest query builder chain:

- select(columns) / insert(values) / update(values) / delete()
- eq, gte, lte, in_, not_.is_(column, "null"), order(column, desc=...), limit(n)
- execute() -> response with `.data`

Security:
- The client is created with the static project key from configuration.
- Failures surface as RecordStoreError only; raw driver messages stay in logs.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

import httpx
from postgrest.exceptions import APIError

from .ports import PROGRESS, Filter, RecordStoreError, ensure_table


logger = logging.getLogger("tutordesk.records")


def _apply_filter(query: Any, flt: Filter) -> Any:
    if flt.op == "eq":
        return query.eq(flt.column, flt.value)
    if flt.op == "gte":
        return query.gte(flt.column, flt.value)
    if flt.op == "lte":
        return query.lte(flt.column, flt.value)
    if flt.op == "in":
        return query.in_(flt.column, list(flt.value))
    return query.not_.is_(flt.column, "null")


def _rows(response: Any) -> List[Dict[str, Any]]:
    data = getattr(response, "data", None)
    if data is None and isinstance(response, dict):
        data = response.get("data")
    if data is None:
        return []
    if isinstance(data, dict):
        return [data]
    return list(data)


class SupabaseRecordStore:
    """Record Store adapter using the official supabase client."""

    backend_name = "supabase"

    def __init__(self, client: Any):
        self._client = client

    def _run(self, table: str, operation: str, build) -> List[Dict[str, Any]]:
        ensure_table(table, operation)
        try:
            response = build(self._client.table(table)).execute()
        except APIError as exc:
            logger.error("Record store %s on %s failed: %s", operation, table, exc.__class__.__name__)
            raise RecordStoreError(table, operation, getattr(exc, "code", None) or "api_error") from exc
        except httpx.HTTPError as exc:
            logger.error("Record store %s on %s unreachable: %s", operation, table, exc.__class__.__name__)
            raise RecordStoreError(table, operation, "transport_error") from exc
        return _rows(response)

    def select(
        self,
        table: str,
        *,
        columns: str = "*",
        filters: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        ascending: bool = True,
    ) -> List[Dict[str, Any]]:
        def build(query: Any) -> Any:
            query = query.select(columns)
            for flt in filters:
                query = _apply_filter(query, flt)
            if order_by:
                query = query.order(order_by, desc=not ascending)
            return query

        return self._run(table, "select", build)

    def maybe_single(self, table: str, *, filters: Sequence[Filter]) -> Optional[Dict[str, Any]]:
        def build(query: Any) -> Any:
            query = query.select("*")
            for flt in filters:
                query = _apply_filter(query, flt)
            # Two rows are enough to detect ambiguity.
            return query.limit(2)

        rows = self._run(table, "maybe_single", build)
        if len(rows) > 1:
            logger.warning("Ambiguous lookup on %s: more than one row matched", table)
            return None
        return rows[0] if rows else None

    def insert(self, table: str, values: Dict[str, Any]) -> Dict[str, Any]:
        rows = self._run(table, "insert", lambda q: q.insert(dict(values)))
        if not rows:
            raise RecordStoreError(table, "insert", "no row returned")
        return rows[0]

    def update(self, table: str, row_id: str, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        payload = dict(values)
        payload.pop("id", None)
        if table == PROGRESS:
            payload.setdefault("updated_at", datetime.now(timezone.utc).isoformat())
        rows = self._run(table, "update", lambda q: q.update(payload).eq("id", row_id))
        return rows[0] if rows else None

    def delete(self, table: str, row_id: str) -> None:
        self._run(table, "delete", lambda q: q.delete().eq("id", row_id))


def create_supabase_record_store(url: str, key: str) -> SupabaseRecordStore:
    """Build the adapter from a project URL and API key."""
    from supabase import create_client

    return SupabaseRecordStore(create_client(url, key))


__all__ = ["SupabaseRecordStore", "create_supabase_record_store"]
