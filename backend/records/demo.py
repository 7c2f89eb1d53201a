"""
Demo data for local development.

Creates one admin, two students, a handful of sessions (past, upcoming,
unpublished) and progress rows so every view has something to show.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

from .ports import PROGRESS, SESSIONS, STUDENTS, Filter, RecordStoreProtocol


DEMO_STUDENTS: List[Dict[str, Any]] = [
    {"student_code": "ADMIN001", "full_name": "Admin Tutor", "grade": "Staff", "age": 30, "email": None, "is_admin": True},
    {"student_code": "SAT2024A", "full_name": "Lena Park", "grade": "11", "age": 16, "email": "lena@example.org", "is_admin": False},
    {"student_code": "SAT2024B", "full_name": "Omar Haddad", "grade": "12", "age": 17, "email": None, "is_admin": False},
]


def _sessions(now: datetime) -> List[Dict[str, Any]]:
    def at(days: int, hour: int) -> str:
        moment = (now + timedelta(days=days)).replace(hour=hour, minute=0, second=0, microsecond=0)
        return moment.isoformat()

    return [
        {
            "title": "Linear Equations Review",
            "date_time": at(-14, 16),
            "description": "Slope-intercept form and systems of equations.",
            "recorded_url": "https://videos.example.org/linear-equations",
            "materials_url": "https://files.example.org/linear-equations.pdf",
            "is_published": True,
        },
        {
            "title": "Quadratics and Parabolas",
            "date_time": at(-7, 16),
            "description": "Factoring, vertex form and the discriminant.",
            "recorded_url": "https://videos.example.org/quadratics",
            "materials_url": None,
            "is_published": True,
        },
        {
            "title": "Geometry: Circles",
            "date_time": at(3, 16),
            "description": "Arc length, sector area and circle equations.",
            "recorded_url": None,
            "materials_url": "https://files.example.org/circles.pdf",
            "is_published": True,
        },
        {
            "title": "Practice Test Walkthrough",
            "date_time": at(10, 15),
            "description": "Full math section, timed, with review.",
            "recorded_url": None,
            "materials_url": None,
            "is_published": False,
        },
    ]


def seed_demo(store: RecordStoreProtocol, *, now: datetime | None = None) -> Dict[str, int]:
    """Insert demo rows; students whose code already exists are skipped."""
    moment = now or datetime.now(timezone.utc)
    counts = {STUDENTS: 0, SESSIONS: 0, PROGRESS: 0}
    created: Dict[str, str] = {}
    for student in DEMO_STUDENTS:
        existing = store.select(STUDENTS, filters=[Filter.eq("student_code", student["student_code"])])
        if existing:
            continue
        row = store.insert(STUDENTS, dict(student))
        created[student["student_code"]] = row["id"]
        counts[STUDENTS] += 1

    if counts[STUDENTS]:
        for session in _sessions(moment):
            store.insert(SESSIONS, session)
            counts[SESSIONS] += 1

    scores = {
        "SAT2024A": (6, 4, "Intermediate", [{"date": "2024-01-15", "score": 85}, {"date": "2024-02-20", "score": 91}]),
        "SAT2024B": (3, 7, "Beginner", [{"date": "2024-02-01", "score": 72}]),
    }
    for code, (completed, remaining, level, exam_scores) in scores.items():
        student_id = created.get(code)
        if not student_id:
            continue
        store.insert(
            PROGRESS,
            {
                "student_id": student_id,
                "sessions_completed": completed,
                "sessions_remaining": remaining,
                "level": level,
                "exam_scores": exam_scores,
            },
        )
        counts[PROGRESS] += 1
    return counts


__all__ = ["DEMO_STUDENTS", "seed_demo"]
