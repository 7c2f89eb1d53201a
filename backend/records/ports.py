"""
Record Store port shared by the in-memory and Supabase adapters.

Why:
    Every view talks to the same four tables through a handful of generic
    operations. Keeping the contract framework-agnostic lets tests supply the
    in-memory adapter (or a spy) while production wires Supabase.

Security:
    The store is reached with one static API key. No per-user authorization
    happens at this seam; callers gate access before issuing queries.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence

STUDENTS = "students"
SESSIONS = "sessions"
PROGRESS = "progress"
MESSAGES = "messages"

TABLES = frozenset({STUDENTS, SESSIONS, PROGRESS, MESSAGES})

FILTER_OPS = frozenset({"eq", "gte", "lte", "not_null", "in"})


class RecordStoreError(Exception):
    """Raised for any failure reaching or querying the Record Store.

    Carries the table and the operation so callers can log without echoing
    raw driver messages to users.
    """

    def __init__(self, table: str, operation: str, detail: str = "") -> None:
        self.table = table
        self.operation = operation
        self.detail = detail
        message = f"{operation} on {table} failed"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


@dataclass(frozen=True)
class Filter:
    """A single column predicate: `op` is one of eq, gte, lte, not_null, in."""

    op: str
    column: str
    value: Any = None

    def __post_init__(self) -> None:
        if self.op not in FILTER_OPS:
            raise ValueError(f"unsupported filter op: {self.op}")
        if self.op == "in" and isinstance(self.value, (str, bytes)):
            raise ValueError("'in' filter expects a collection of values")

    @classmethod
    def eq(cls, column: str, value: Any) -> "Filter":
        return cls("eq", column, value)

    @classmethod
    def gte(cls, column: str, value: Any) -> "Filter":
        return cls("gte", column, value)

    @classmethod
    def lte(cls, column: str, value: Any) -> "Filter":
        return cls("lte", column, value)

    @classmethod
    def not_null(cls, column: str) -> "Filter":
        return cls("not_null", column)

    @classmethod
    def in_(cls, column: str, values: Iterable[Any]) -> "Filter":
        return cls("in", column, tuple(values))


class RecordStoreProtocol(Protocol):
    """Generic query operations per table."""

    backend_name: str

    def select(
        self,
        table: str,
        *,
        columns: str = "*",
        filters: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        ascending: bool = True,
    ) -> List[Dict[str, Any]]: ...

    def maybe_single(self, table: str, *, filters: Sequence[Filter]) -> Optional[Dict[str, Any]]: ...

    def insert(self, table: str, values: Dict[str, Any]) -> Dict[str, Any]: ...

    def update(self, table: str, row_id: str, values: Dict[str, Any]) -> Optional[Dict[str, Any]]: ...

    def delete(self, table: str, row_id: str) -> None: ...


def ensure_table(table: str, operation: str) -> None:
    if table not in TABLES:
        raise RecordStoreError(table, operation, "unknown table")


__all__ = [
    "STUDENTS",
    "SESSIONS",
    "PROGRESS",
    "MESSAGES",
    "TABLES",
    "Filter",
    "RecordStoreError",
    "RecordStoreProtocol",
    "ensure_table",
]
