"""
Student pages: dashboard, recorded sessions, materials, progress, contact.
"""
from datetime import datetime, timedelta, timezone

import pytest

import main  # type: ignore
import storage_wiring  # type: ignore
from records import MESSAGES, PROGRESS, SESSIONS

from helpers import FailingStore, add_student, client_for, csrf_for, login


pytestmark = pytest.mark.anyio("asyncio")


def _iso(days: int) -> str:
    return (datetime.now(timezone.utc) + timedelta(days=days)).replace(microsecond=0).isoformat()


def _session(store, title, days, *, published=True, recorded=None, materials=None):
    return store.insert(
        SESSIONS,
        {
            "title": title,
            "date_time": _iso(days),
            "description": f"{title} description",
            "recorded_url": recorded,
            "materials_url": materials,
            "is_published": published,
        },
    )


async def test_dashboard_lists_published_upcoming_sessions(record_store):
    add_student(record_store, "SAT1", "Lena Park")
    _session(record_store, "Next week", 7)
    _session(record_store, "Tomorrow", 1)
    _session(record_store, "Yesterday", -1)
    _session(record_store, "Hidden draft", 2, published=False)

    async with client_for(main.app) as client:
        await login(client, "SAT1")
        r = await client.get("/dashboard")

    assert r.status_code == 200
    assert "Upcoming Sessions" in r.text
    assert r.text.index("Tomorrow") < r.text.index("Next week")
    assert "Yesterday" not in r.text
    assert "Hidden draft" not in r.text
    assert "/admin/sessions/" not in r.text


async def test_dashboard_empty_state(record_store):
    add_student(record_store, "SAT1", "Lena Park")
    async with client_for(main.app) as client:
        await login(client, "SAT1")
        r = await client.get("/dashboard")
    assert "No upcoming sessions available at this time." in r.text


async def test_admin_dashboard_links_sessions_to_edit(record_store):
    add_student(record_store, "ADM", "Tutor", is_admin=True)
    session = _session(record_store, "Tomorrow", 1)
    async with client_for(main.app) as client:
        await login(client, "ADM")
        r = await client.get("/dashboard")
    assert f'href="/admin/sessions/{session["id"]}/edit"' in r.text


async def test_recorded_sessions_open_in_new_context(record_store):
    add_student(record_store, "SAT1", "Lena Park")
    _session(record_store, "Recorded", -3, recorded="https://videos.example/1")
    _session(record_store, "Not recorded", -2)

    async with client_for(main.app) as client:
        await login(client, "SAT1")
        r = await client.get("/recorded-sessions")

    assert "Recorded" in r.text and "Not recorded" not in r.text
    assert 'href="https://videos.example/1"' in r.text
    assert 'target="_blank"' in r.text
    assert "View Session" in r.text


async def test_materials_page_and_empty_state(record_store):
    add_student(record_store, "SAT1", "Lena Park")
    async with client_for(main.app) as client:
        await login(client, "SAT1")
        empty = await client.get("/materials")
        _session(record_store, "With notes", -3, materials="https://files.example/n.pdf")
        full = await client.get("/materials")

    assert "No session materials available at this time." in empty.text
    assert "Download Materials" in full.text
    assert 'href="https://files.example/n.pdf"' in full.text


async def test_progress_page_shows_average_and_exam_table(record_store):
    student = add_student(record_store, "SAT1", "Lena Park")
    record_store.insert(
        PROGRESS,
        {
            "student_id": student["id"],
            "sessions_completed": 6,
            "sessions_remaining": 4,
            "level": "Intermediate",
            "exam_scores": [{"date": "2024-01-15", "score": 85}, {"date": "2024-02-20", "score": 91}],
        },
    )
    async with client_for(main.app) as client:
        await login(client, "SAT1")
        r = await client.get("/progress")

    assert "Intermediate" in r.text
    assert "4 remaining" in r.text
    assert '<p class="stat-value">88</p>' in r.text
    assert "Based on 2 exams" in r.text
    assert "Jan 15, 2024" in r.text


async def test_progress_page_without_data(record_store):
    add_student(record_store, "SAT1", "Lena Park")
    async with client_for(main.app) as client:
        await login(client, "SAT1")
        r = await client.get("/progress")
    assert "No progress data available yet." in r.text


async def test_contact_form_prefills_and_sends_message(record_store):
    student = add_student(record_store, "SAT1", "Lena Park", email="lena@example.org")
    async with client_for(main.app) as client:
        await login(client, "SAT1")
        page = await client.get("/contact")
        token = await csrf_for(client, "/contact")
        r = await client.post(
            "/contact",
            data={"csrf_token": token, "name": "Lena Park", "email": "lena@example.org", "message": "When is the next test?"},
            follow_redirects=False,
        )
        after = await client.get("/contact")

    assert 'value="Lena Park"' in page.text
    assert 'value="lena@example.org"' in page.text
    assert r.status_code == 303
    assert r.headers["location"] == "/contact"
    assert "Your message has been sent successfully!" in after.text
    (message,) = record_store.select(MESSAGES)
    assert message["student_id"] == student["id"]
    assert message["message"] == "When is the next test?"


async def test_contact_requires_message(record_store):
    add_student(record_store, "SAT1", "Lena Park")
    async with client_for(main.app) as client:
        await login(client, "SAT1")
        token = await csrf_for(client, "/contact")
        r = await client.post("/contact", data={"csrf_token": token, "name": "Lena", "message": "  "})

    assert r.status_code == 400
    assert "Please fill in all required fields" in r.text
    assert record_store.select(MESSAGES) == []


async def test_store_outage_shows_generic_toast_not_error_page():
    store = FailingStore()
    add_student(store, "SAT1", "Lena Park")
    storage_wiring.set_record_store(store)
    async with client_for(main.app) as client:
        await login(client, "SAT1")
        store.failing = {"select"}
        r = await client.get("/recorded-sessions")

    assert r.status_code == 200
    assert "Failed to load recorded sessions" in r.text
    assert "simulated outage" not in r.text


async def test_progress_page_survives_non_list_exam_scores(record_store):
    student = add_student(record_store, "SAT1", "Lena Park")
    record_store.insert(
        PROGRESS,
        {"student_id": student["id"], "sessions_completed": 2, "sessions_remaining": 1, "level": "Beginner", "exam_scores": 5},
    )
    async with client_for(main.app) as client:
        await login(client, "SAT1")
        r = await client.get("/progress")

    assert r.status_code == 200
    assert "Beginner" in r.text
    assert "Based on 0 exams" in r.text
    assert "Individual Exam Scores" not in r.text
