"""
Student-facing views expressed as read-only entity specs.

They run through the same CrudViewController (with `admin_only=False`) so the
guard, loading and error semantics match the admin views. The contact form is
the one student view that writes: it inserts a message tied to the identity.

Session visibility keys on `is_published` only.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from records import MESSAGES, PROGRESS, SESSIONS, Filter, RecordStoreProtocol, Student

from . import forms
from .entities import EntitySpec, FormData


def utc_now_iso(now: Optional[datetime] = None) -> str:
    moment = now or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).replace(microsecond=0).isoformat()


class ReadOnlySpec(EntitySpec):
    def blank_form(self) -> FormData:
        return {}

    def form_from_row(self, row: Mapping[str, Any]) -> FormData:
        return {}


class UpcomingSessionsSpec(ReadOnlySpec):
    """Published sessions from now on, soonest first."""

    key = "dashboard"
    table = SESSIONS
    singular = "Session"
    plural = "Upcoming sessions"

    def __init__(self, now: Optional[datetime] = None):
        self.now = now

    def fetch(self, store: RecordStoreProtocol) -> List[Dict[str, Any]]:
        return store.select(
            SESSIONS,
            filters=[Filter.eq("is_published", True), Filter.gte("date_time", utc_now_iso(self.now))],
            order_by="date_time",
            ascending=True,
        )


class RecordedSessionsSpec(ReadOnlySpec):
    key = "recorded-sessions"
    table = SESSIONS
    singular = "Recorded session"
    plural = "Recorded sessions"

    def fetch(self, store: RecordStoreProtocol) -> List[Dict[str, Any]]:
        return store.select(
            SESSIONS,
            filters=[Filter.eq("is_published", True), Filter.not_null("recorded_url")],
            order_by="date_time",
            ascending=False,
        )


class MaterialsSpec(ReadOnlySpec):
    key = "materials"
    table = SESSIONS
    singular = "Material"
    plural = "Materials"

    def fetch(self, store: RecordStoreProtocol) -> List[Dict[str, Any]]:
        return store.select(
            SESSIONS,
            filters=[Filter.eq("is_published", True), Filter.not_null("materials_url")],
            order_by="date_time",
            ascending=False,
        )


class OwnProgressSpec(ReadOnlySpec):
    """The identity's progress row; zero or ambiguous matches mean "no data yet"."""

    key = "progress"
    table = PROGRESS
    singular = "Progress"
    plural = "Progress"

    def __init__(self, student_id: str):
        self.student_id = student_id

    def fetch(self, store: RecordStoreProtocol) -> List[Dict[str, Any]]:
        row = store.maybe_single(PROGRESS, filters=[Filter.eq("student_id", self.student_id)])
        return [row] if row else []


class ContactMessageSpec(EntitySpec):
    """Message form prefilled from the identity; nothing is listed back."""

    key = "contact"
    table = MESSAGES
    singular = "Message"
    plural = "Messages"
    required = ("name", "message")

    def __init__(self, student: Optional[Student]):
        self.student = student

    def blank_form(self) -> FormData:
        return {
            "name": self.student.full_name if self.student else "",
            "email": (self.student.email or "") if self.student else "",
            "message": "",
        }

    def form_from_row(self, row: Mapping[str, Any]) -> FormData:
        return self.blank_form()

    def parse_form(self, form: Mapping[str, Any]) -> Dict[str, Any]:
        forms.require(form, self.required)
        return {
            "name": forms.text(form, "name"),
            "email": forms.optional_text(form, "email"),
            "message": forms.text(form, "message"),
            "student_id": self.student.id if self.student else None,
        }

    def fetch(self, store: RecordStoreProtocol) -> List[Dict[str, Any]]:
        return []

    def success_message(self, action: str) -> str:
        return "Your message has been sent successfully!"

    def failure_message(self, action: str) -> str:
        return "Failed to send message. Please try again."


__all__ = [
    "utc_now_iso",
    "ReadOnlySpec",
    "UpcomingSessionsSpec",
    "RecordedSessionsSpec",
    "MaterialsSpec",
    "OwnProgressSpec",
    "ContactMessageSpec",
]
