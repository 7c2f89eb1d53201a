"""
In-memory Record Store semantics the views rely on.

- select honors filters and ordering (NULLs first on descending sorts)
- maybe_single treats zero and ambiguous matches as absence
- server-side timestamps per table; update of a missing id returns None
- returned rows are copies (callers cannot mutate the store)
"""
import pytest

from records import MESSAGES, PROGRESS, SESSIONS, STUDENTS, Filter, RecordStoreError
from records.memory import InMemoryRecordStore


def _session(store, title, date_time, *, published=True, recorded=None):
    return store.insert(
        SESSIONS,
        {
            "title": title,
            "date_time": date_time,
            "description": "",
            "recorded_url": recorded,
            "materials_url": None,
            "is_published": published,
        },
    )


def test_insert_assigns_id_and_table_timestamps():
    store = InMemoryRecordStore()
    student = store.insert(STUDENTS, {"student_code": "A1", "full_name": "Ana"})
    progress = store.insert(PROGRESS, {"student_id": student["id"], "level": "Beginner"})
    message = store.insert(MESSAGES, {"name": "Ana", "message": "Hi"})

    assert student["id"] and student["created_at"]
    assert progress["updated_at"]
    assert message["timestamp"]


def test_select_filters_and_orders_descending_with_nulls_first():
    store = InMemoryRecordStore()
    _session(store, "old", "2024-01-01T10:00:00+00:00")
    _session(store, "new", "2024-03-01T10:00:00+00:00")
    _session(store, "undated", None)
    _session(store, "hidden", "2024-02-01T10:00:00+00:00", published=False)

    rows = store.select(
        SESSIONS, filters=[Filter.eq("is_published", True)], order_by="date_time", ascending=False
    )

    assert [r["title"] for r in rows] == ["undated", "new", "old"]


def test_select_ascending_puts_nulls_last_and_gte_skips_nulls():
    store = InMemoryRecordStore()
    _session(store, "b", "2024-02-01T10:00:00+00:00")
    _session(store, "a", "2024-01-01T10:00:00+00:00")
    _session(store, "none", None)

    ordered = store.select(SESSIONS, order_by="date_time", ascending=True)
    upcoming = store.select(SESSIONS, filters=[Filter.gte("date_time", "2024-01-15T00:00:00+00:00")])

    assert [r["title"] for r in ordered] == ["a", "b", "none"]
    assert [r["title"] for r in upcoming] == ["b"]


def test_not_null_and_in_filters():
    store = InMemoryRecordStore()
    _session(store, "with recording", "2024-01-01T10:00:00+00:00", recorded="https://v.example/1")
    s2 = _session(store, "without", "2024-01-02T10:00:00+00:00")

    recorded = store.select(SESSIONS, filters=[Filter.not_null("recorded_url")])
    by_id = store.select(SESSIONS, filters=[Filter.in_("id", [s2["id"]])])

    assert [r["title"] for r in recorded] == ["with recording"]
    assert [r["title"] for r in by_id] == ["without"]


def test_select_projects_requested_columns():
    store = InMemoryRecordStore()
    store.insert(STUDENTS, {"student_code": "A1", "full_name": "Ana", "grade": "10"})

    rows = store.select(STUDENTS, columns="id, full_name")

    assert set(rows[0]) == {"id", "full_name"}


def test_maybe_single_returns_none_for_missing_and_ambiguous():
    store = InMemoryRecordStore()
    store.insert(STUDENTS, {"student_code": "DUP", "full_name": "One"})
    store.insert(STUDENTS, {"student_code": "DUP", "full_name": "Two"})
    only = store.insert(STUDENTS, {"student_code": "ONLY", "full_name": "Three"})

    assert store.maybe_single(STUDENTS, filters=[Filter.eq("student_code", "DUP")]) is None
    assert store.maybe_single(STUDENTS, filters=[Filter.eq("student_code", "NOPE")]) is None
    assert store.maybe_single(STUDENTS, filters=[Filter.eq("student_code", "ONLY")])["id"] == only["id"]


def test_update_missing_row_returns_none_and_refreshes_progress_timestamp():
    store = InMemoryRecordStore()
    row = store.insert(PROGRESS, {"student_id": "s1", "level": "A", "updated_at": "2000-01-01T00:00:00+00:00"})

    assert store.update(PROGRESS, "missing", {"level": "B"}) is None
    updated = store.update(PROGRESS, row["id"], {"level": "B", "id": "ignored"})

    assert updated["id"] == row["id"]
    assert updated["level"] == "B"
    assert updated["updated_at"] != "2000-01-01T00:00:00+00:00"


def test_rows_are_copies():
    store = InMemoryRecordStore()
    row = store.insert(PROGRESS, {"student_id": "s1", "exam_scores": [{"date": "2024-01-01", "score": 80}]})
    row["exam_scores"].append({"date": "x", "score": 1})

    fetched = store.select(PROGRESS)[0]
    fetched["level"] = "changed"

    again = store.select(PROGRESS)[0]
    assert len(again["exam_scores"]) == 1
    assert "level" not in again


def test_delete_is_idempotent():
    store = InMemoryRecordStore()
    row = store.insert(STUDENTS, {"student_code": "A1", "full_name": "Ana"})
    store.delete(STUDENTS, row["id"])
    store.delete(STUDENTS, row["id"])

    assert store.select(STUDENTS) == []


def test_unknown_table_raises_record_store_error():
    store = InMemoryRecordStore()
    with pytest.raises(RecordStoreError) as excinfo:
        store.select("teachers")
    assert excinfo.value.operation == "select"


def test_filter_rejects_unknown_ops_and_string_in_values():
    with pytest.raises(ValueError):
        Filter("like", "full_name", "A%")
    with pytest.raises(ValueError):
        Filter("in", "id", "abc")
