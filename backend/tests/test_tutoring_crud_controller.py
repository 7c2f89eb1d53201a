"""
CRUD View Controller state machine.

- guard runs before any store call; failures mean zero queries
- submit: validation errors never mutate; success notifies and re-fetches once
- delete: requires confirmation, one delete call, one re-fetch
- store failures become generic error notices and keep the last rows
"""
from identity_access.holder import IdentityHolder, SessionIdentityStorage
from identity_access.stores import SessionStore
from records import PROGRESS, SESSIONS, STUDENTS
from tutoring import CrudViewController, ViewState
from tutoring.entities import ProgressSpec, SessionSpec, StudentSpec
from tutoring.forms import REQUIRED_FIELDS_MESSAGE

from helpers import FailingStore, SpyStore, add_student


def _identity(store, code=None):
    holder = IdentityHolder(store, SessionIdentityStorage(SessionStore().create())).initialize()
    if code:
        assert holder.login(code)
    return holder


def _admin_controller(spec, store):
    add_student(store, "ADM", "Tutor", is_admin=True)
    controller = CrudViewController(spec, store, _identity(store, "ADM"))
    store.reset_calls()
    return controller


SESSION_FORM = {
    "title": "Circles",
    "date_time": "2024-05-01T14:30",
    "description": "Arc length",
    "recorded_url": "",
    "materials_url": "",
    "is_published": "on",
}


def test_guard_without_identity_blocks_every_query():
    store = SpyStore()
    controller = CrudViewController(SessionSpec(), store, _identity(store))

    assert controller.guard() is False
    assert controller.state == ViewState.UNAUTHORIZED
    assert controller.load() == []
    assert controller.submit(SESSION_FORM) is False
    assert controller.delete("x", confirmed=True) is False
    assert store.total_calls == 0


def test_guard_blocks_non_admin_on_admin_views():
    store = SpyStore()
    add_student(store, "S1", "Ana")
    controller = CrudViewController(SessionSpec(), store, _identity(store, "S1"))
    store.reset_calls()

    assert controller.guard() is False
    controller.load()
    assert store.total_calls == 0


def test_student_views_allow_non_admins():
    store = SpyStore()
    add_student(store, "S1", "Ana")
    controller = CrudViewController(SessionSpec(), store, _identity(store, "S1"), admin_only=False)

    assert controller.guard() is True


def test_load_sets_empty_or_populated_state():
    store = SpyStore()
    controller = _admin_controller(SessionSpec(), store)
    controller.guard()

    controller.load()
    assert controller.state == ViewState.EMPTY
    assert controller.loading is False

    store.insert(SESSIONS, {"title": "T", "date_time": "2024-01-01T00:00:00+00:00", "is_published": True})
    controller.load()
    assert controller.state == ViewState.POPULATED


def test_invalid_submit_keeps_dialog_open_and_never_mutates():
    store = SpyStore()
    controller = _admin_controller(SessionSpec(), store)
    controller.guard()
    controller.open_create()

    ok = controller.submit(dict(SESSION_FORM, title=""))

    assert ok is False
    assert controller.state == ViewState.DIALOG_OPEN
    assert controller.error == REQUIRED_FIELDS_MESSAGE
    assert controller.form["description"] == "Arc length"
    assert store.calls["insert"] == 0 and store.calls["update"] == 0
    assert controller.notices[-1].level == "error"


def test_create_notifies_closes_dialog_and_refetches_once():
    store = SpyStore()
    controller = _admin_controller(SessionSpec(), store)
    controller.guard()
    controller.open_create()

    assert controller.submit(SESSION_FORM) is True

    assert store.calls[("insert", SESSIONS)] == 1
    assert store.calls[("select", SESSIONS)] == 1
    assert controller.state == ViewState.POPULATED
    assert controller.editing_id is None
    assert controller.notices[-1].message == "Session created successfully"
    assert controller.rows[0]["is_published"] is True


def test_update_of_missing_row_reports_not_found():
    store = SpyStore()
    controller = _admin_controller(SessionSpec(), store)
    controller.guard()

    assert controller.submit(SESSION_FORM, editing_id="missing") is False
    assert controller.error == "Session not found"


def test_progress_update_never_changes_student_id():
    store = SpyStore()
    controller = _admin_controller(ProgressSpec(), store)
    ana = add_student(store, "S1", "Ana")
    row = store.insert(PROGRESS, {"student_id": ana["id"], "level": "A", "exam_scores": []})
    controller.guard()

    form = {"student_id": "someone-else", "sessions_completed": "2", "sessions_remaining": "1", "level": "B", "exam_scores": "[]"}
    assert controller.submit(form, editing_id=row["id"]) is True

    stored = store.select(PROGRESS)[0]
    assert stored["student_id"] == ana["id"]
    assert stored["level"] == "B"


def test_delete_requires_confirmation_and_refetches_once():
    store = SpyStore()
    controller = _admin_controller(StudentSpec(), store)
    victim = add_student(store, "S1", "Ana")
    controller.guard()
    store.reset_calls()

    assert controller.delete(victim["id"], confirmed=False) is False
    assert store.total_calls == 0

    assert controller.delete(victim["id"], confirmed=True) is True
    assert store.calls[("delete", STUDENTS)] == 1
    assert store.calls[("select", STUDENTS)] == 1
    assert [r["student_code"] for r in controller.rows] == ["ADM"]
    assert controller.notices[-1].message == "Student deleted successfully"


def test_store_failure_on_load_keeps_previous_rows():
    store = FailingStore()
    controller = _admin_controller(SessionSpec(), store)
    store.insert(SESSIONS, {"title": "T", "date_time": "2024-01-01T00:00:00+00:00"})
    controller.guard()
    controller.load()

    store.failing = {"select"}
    controller.load()

    assert len(controller.rows) == 1
    assert controller.loading is False
    assert controller.notices[-1].message == "Failed to load sessions"


def test_store_failure_on_save_is_generic():
    store = FailingStore()
    controller = _admin_controller(SessionSpec(), store)
    controller.guard()
    store.failing = {"insert"}

    assert controller.submit(SESSION_FORM) is False
    assert controller.error == "Failed to save session"
    assert "simulated" not in controller.error


def test_open_edit_uses_loaded_rows_then_falls_back_to_lookup():
    store = SpyStore()
    controller = _admin_controller(SessionSpec(), store)
    row = store.insert(SESSIONS, {"title": "T", "date_time": "2024-01-01T00:00:00+00:00", "description": "D"})
    controller.guard()

    assert controller.open_edit(row["id"]) is True
    assert store.calls["maybe_single"] == 1
    assert controller.form["title"] == "T"

    controller.load()
    store.reset_calls()
    assert controller.open_edit(row["id"]) is True
    assert store.total_calls == 0

    assert controller.open_edit("missing") is False
    assert controller.notices[-1].message == "Session not found"


def test_close_dialog_resets_form():
    store = SpyStore()
    controller = _admin_controller(SessionSpec(), store)
    controller.guard()
    controller.open_create()
    controller.form["title"] = "draft"

    controller.close_dialog()

    assert controller.form == SessionSpec().blank_form()
    assert controller.state == ViewState.EMPTY
