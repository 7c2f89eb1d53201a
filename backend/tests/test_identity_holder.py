"""
Identity Holder and browser session store.

- login looks up exactly one student by code and persists the whole row
- unknown, ambiguous and failing lookups leave the holder logged out
- initialize restores the identity; unreadable data means logged out
- logout removes the persisted entry
"""
import json

from identity_access.domain import IDENTITY_STORAGE_KEY, ROLE_ADMIN, ROLE_STUDENT
from identity_access.holder import IdentityHolder, SessionIdentityStorage
from identity_access.stores import SessionStore
from records import STUDENTS
from records.memory import InMemoryRecordStore

from helpers import FailingStore, add_student


def _holder(store, record=None):
    record = record or SessionStore().create()
    return IdentityHolder(store, SessionIdentityStorage(record)).initialize(), record


def test_login_persists_full_row_and_exposes_identity():
    store = InMemoryRecordStore()
    row = add_student(store, "SAT1", "Lena Park", email="lena@example.org")
    holder, record = _holder(store)

    assert holder.login("SAT1") is True

    persisted = json.loads(record.data[IDENTITY_STORAGE_KEY])
    assert persisted["id"] == row["id"]
    assert persisted["student_code"] == "SAT1"
    assert holder.is_authenticated
    assert holder.current.full_name == "Lena Park"
    assert holder.role == ROLE_STUDENT
    assert holder.is_admin is False


def test_admin_flag_maps_to_admin_role():
    store = InMemoryRecordStore()
    add_student(store, "ADM", "Tutor", is_admin=True)
    holder, _ = _holder(store)

    holder.login("ADM")

    assert holder.is_admin
    assert holder.role == ROLE_ADMIN


def test_unknown_code_fails_without_persisting():
    holder, record = _holder(InMemoryRecordStore())

    assert holder.login("NOPE") is False
    assert IDENTITY_STORAGE_KEY not in record.data
    assert holder.current is None


def test_ambiguous_code_is_treated_as_invalid():
    store = InMemoryRecordStore()
    add_student(store, "DUP", "One")
    add_student(store, "DUP", "Two")
    holder, _ = _holder(store)

    assert holder.login("DUP") is False


def test_store_failure_is_a_failed_login():
    store = FailingStore(failing={"maybe_single"})
    holder, record = _holder(store)

    assert holder.login("ANY") is False
    assert record.data == {}


def test_empty_code_never_queries_the_store():
    store = FailingStore()
    holder, _ = _holder(store)

    assert holder.login("") is False
    assert store.total_calls == 0


def test_initialize_restores_persisted_identity_without_store_calls():
    store = FailingStore()
    record = SessionStore().create(data={IDENTITY_STORAGE_KEY: json.dumps({"id": "s1", "full_name": "Ana", "is_admin": True})})

    holder, _ = _holder(store, record)

    assert holder.initializing is False
    assert holder.current.id == "s1"
    assert holder.is_admin
    assert store.total_calls == 0


def test_initialize_discards_corrupt_identity():
    record = SessionStore().create(data={IDENTITY_STORAGE_KEY: "{not json"})

    holder, _ = _holder(InMemoryRecordStore(), record)

    assert holder.is_authenticated is False
    assert IDENTITY_STORAGE_KEY not in record.data


def test_initialize_discards_non_object_identity():
    record = SessionStore().create(data={IDENTITY_STORAGE_KEY: json.dumps(["a", "b"])})

    holder, _ = _holder(InMemoryRecordStore(), record)

    assert holder.current is None
    assert IDENTITY_STORAGE_KEY not in record.data


def test_logout_removes_persisted_identity():
    store = InMemoryRecordStore()
    add_student(store, "SAT1", "Lena")
    holder, record = _holder(store)
    holder.login("SAT1")

    holder.logout()

    assert holder.current is None
    assert IDENTITY_STORAGE_KEY not in record.data


def test_login_snapshot_does_not_follow_later_store_changes():
    store = InMemoryRecordStore()
    row = add_student(store, "SAT1", "Lena")
    holder, record = _holder(store)
    holder.login("SAT1")

    store.update(STUDENTS, row["id"], {"full_name": "Renamed"})
    restored, _ = _holder(store, record)

    assert restored.current.full_name == "Lena"


def test_session_store_expires_and_deletes(monkeypatch):
    import identity_access.stores as stores

    now = [1_000]
    monkeypatch.setattr(stores, "_now", lambda: now[0])
    sessions = SessionStore(ttl_seconds=10)
    rec = sessions.create()

    assert sessions.get(rec.session_id) is rec
    now[0] += 11
    assert sessions.get(rec.session_id) is None
    assert len(sessions) == 0


def test_new_records_are_unsaved_and_save_sweeps_expired(monkeypatch):
    import identity_access.stores as stores

    now = [1_000]
    monkeypatch.setattr(stores, "_now", lambda: now[0])
    sessions = SessionStore(ttl_seconds=10)
    stale = sessions.create()
    pending = sessions.new()

    assert pending.session_id not in sessions
    assert not pending.has_state()
    now[0] += 11
    pending.ensure_csrf_token()
    sessions.save(sessions.new())

    assert stale.session_id not in sessions
    assert len(sessions) == 1


def test_session_record_notices_are_one_shot_and_csrf_is_stable():
    rec = SessionStore().create()
    rec.push_notice({"level": "success", "title": "Success", "message": "Saved"})

    token = rec.ensure_csrf_token()

    assert rec.ensure_csrf_token() == token
    assert rec.pop_notices() == [{"level": "success", "title": "Success", "message": "Saved"}]
    assert rec.pop_notices() == []
