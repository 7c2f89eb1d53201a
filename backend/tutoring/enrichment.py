"""
Display-name enrichment for rows that reference a student by id.

Contract: every row gets the target key. A missing, empty or unresolvable
foreign id yields UNKNOWN_STUDENT, never a silently absent key.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Sequence

from records import STUDENTS, Filter, RecordStoreProtocol


UNKNOWN_STUDENT = "Unknown"


def attach_display_names(
    rows: Iterable[Mapping[str, Any]],
    names: Mapping[str, str],
    *,
    key: str = "student_id",
    target: str = "student_name",
) -> List[Dict[str, Any]]:
    """Return copies of `rows` annotated with `target` resolved through `names`."""
    enriched: List[Dict[str, Any]] = []
    for row in rows:
        item = dict(row)
        foreign_id = item.get(key)
        item[target] = names.get(str(foreign_id), UNKNOWN_STUDENT) if foreign_id else UNKNOWN_STUDENT
        enriched.append(item)
    return enriched


def student_names(store: RecordStoreProtocol, ids: Sequence[str] | None = None) -> Dict[str, str]:
    """Build an id -> full_name lookup; restrict to `ids` when given."""
    if ids is not None:
        wanted = sorted({str(i) for i in ids if i})
        if not wanted:
            return {}
        rows = store.select(STUDENTS, columns="id, full_name", filters=[Filter.in_("id", wanted)])
    else:
        rows = store.select(STUDENTS, columns="id, full_name")
    return {str(r.get("id")): str(r.get("full_name") or "") for r in rows if r.get("id")}


def sender_name(row: Mapping[str, Any]) -> str:
    """Name shown for a message: the linked student's name, else the typed name."""
    linked = row.get("student_name")
    if linked and linked != UNKNOWN_STUDENT:
        return str(linked)
    return str(row.get("name") or "")


__all__ = ["UNKNOWN_STUDENT", "attach_display_names", "student_names", "sender_name"]
