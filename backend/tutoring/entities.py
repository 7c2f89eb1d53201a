"""
Entity specifications for the admin CRUD views.

Each spec describes one table: list ordering, blank form defaults, how a row
becomes editable strings, how a submitted form becomes a payload, and the
optional enrichment and choice lists a view needs. The controller in
`tutoring.crud` stays generic and delegates all entity knowledge here.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Tuple

from records import MESSAGES, PROGRESS, SESSIONS, STUDENTS, RecordStoreProtocol

from . import forms
from .enrichment import attach_display_names, student_names


FormData = Dict[str, str]


class EntitySpec:
    """Base class; subclasses set the class attributes and form conversions."""

    key: str = ""
    table: str = ""
    singular: str = ""
    plural: str = ""
    order_by: str = "created_at"
    ascending: bool = True
    required: Tuple[str, ...] = ()
    # Fields the edit form shows disabled; updates never change them.
    locked_on_edit: Tuple[str, ...] = ()
    delete_prompt: str = ""

    def blank_form(self) -> FormData:
        raise NotImplementedError

    def form_from_row(self, row: Mapping[str, Any]) -> FormData:
        raise NotImplementedError

    def parse_form(self, form: Mapping[str, Any]) -> Dict[str, Any]:
        """Return a store payload or raise forms.FormValidationError."""
        raise NotImplementedError

    def fetch(self, store: RecordStoreProtocol) -> List[Dict[str, Any]]:
        rows = store.select(self.table, order_by=self.order_by, ascending=self.ascending)
        return self.enrich(rows, store)

    def enrich(self, rows: List[Dict[str, Any]], store: RecordStoreProtocol) -> List[Dict[str, Any]]:
        return rows

    def load_choices(self, store: RecordStoreProtocol) -> Dict[str, List[Dict[str, Any]]]:
        return {}

    def success_message(self, action: str) -> str:
        return f"{self.singular} {action} successfully"

    def failure_message(self, action: str) -> str:
        return f"Failed to {action} {self.singular.lower()}"


class StudentSpec(EntitySpec):
    key = "students"
    table = STUDENTS
    singular = "Student"
    plural = "Students"
    order_by = "full_name"
    ascending = True
    required = ("student_code", "full_name", "grade", "age")
    delete_prompt = "Are you sure you want to delete this student? This will also delete their progress data."

    def blank_form(self) -> FormData:
        return {"student_code": "", "full_name": "", "grade": "", "age": "", "email": "", "is_admin": ""}

    def form_from_row(self, row: Mapping[str, Any]) -> FormData:
        return {
            "student_code": str(row.get("student_code") or ""),
            "full_name": str(row.get("full_name") or ""),
            "grade": str(row.get("grade") or ""),
            "age": "" if row.get("age") is None else str(row.get("age")),
            "email": str(row.get("email") or ""),
            "is_admin": forms.CHECKBOX_ON if row.get("is_admin") else "",
        }

    def parse_form(self, form: Mapping[str, Any]) -> Dict[str, Any]:
        forms.require(form, self.required)
        age = forms.parse_age(forms.text(form, "age"))
        return {
            "student_code": forms.text(form, "student_code"),
            "full_name": forms.text(form, "full_name"),
            "grade": forms.text(form, "grade"),
            "age": age,
            "email": forms.optional_text(form, "email"),
            "is_admin": forms.checkbox(form, "is_admin"),
        }


class SessionSpec(EntitySpec):
    key = "sessions"
    table = SESSIONS
    singular = "Session"
    plural = "Sessions"
    order_by = "date_time"
    ascending = False
    required = ("title", "date_time", "description")
    delete_prompt = "Are you sure you want to delete this session?"

    def blank_form(self) -> FormData:
        return {
            "title": "",
            "date_time": "",
            "description": "",
            "recorded_url": "",
            "materials_url": "",
            "is_published": "",
        }

    def form_from_row(self, row: Mapping[str, Any]) -> FormData:
        return {
            "title": str(row.get("title") or ""),
            "date_time": forms.to_datetime_local(row.get("date_time")),
            "description": str(row.get("description") or ""),
            "recorded_url": str(row.get("recorded_url") or ""),
            "materials_url": str(row.get("materials_url") or ""),
            "is_published": forms.CHECKBOX_ON if row.get("is_published") else "",
        }

    def parse_form(self, form: Mapping[str, Any]) -> Dict[str, Any]:
        forms.require(form, self.required)
        return {
            "title": forms.text(form, "title"),
            "date_time": forms.parse_datetime_local(forms.text(form, "date_time")),
            "description": forms.text(form, "description"),
            "recorded_url": forms.optional_text(form, "recorded_url"),
            "materials_url": forms.optional_text(form, "materials_url"),
            "is_published": forms.checkbox(form, "is_published"),
        }


class ProgressSpec(EntitySpec):
    key = "progress"
    table = PROGRESS
    singular = "Progress"
    plural = "Progress"
    order_by = "updated_at"
    ascending = False
    required = ("student_id", "level")
    locked_on_edit = ("student_id",)
    delete_prompt = "Are you sure you want to delete this progress record?"

    def blank_form(self) -> FormData:
        return {
            "student_id": "",
            "sessions_completed": "0",
            "sessions_remaining": "0",
            "level": "",
            "exam_scores": "[]",
        }

    def form_from_row(self, row: Mapping[str, Any]) -> FormData:
        return {
            "student_id": str(row.get("student_id") or ""),
            "sessions_completed": str(row.get("sessions_completed") or 0),
            "sessions_remaining": str(row.get("sessions_remaining") or 0),
            "level": str(row.get("level") or ""),
            "exam_scores": forms.pretty_json(row.get("exam_scores")),
        }

    def parse_form(self, form: Mapping[str, Any]) -> Dict[str, Any]:
        forms.require(form, self.required)
        return {
            "student_id": forms.text(form, "student_id"),
            "sessions_completed": forms.int_or_zero(form.get("sessions_completed")),
            "sessions_remaining": forms.int_or_zero(form.get("sessions_remaining")),
            "level": forms.text(form, "level"),
            "exam_scores": forms.parse_json_text(str(form.get("exam_scores") or "")),
        }

    def enrich(self, rows: List[Dict[str, Any]], store: RecordStoreProtocol) -> List[Dict[str, Any]]:
        return attach_display_names(rows, student_names(store))

    def load_choices(self, store: RecordStoreProtocol) -> Dict[str, List[Dict[str, Any]]]:
        return {"students": store.select(STUDENTS, order_by="full_name", ascending=True)}


class MessageSpec(EntitySpec):
    key = "messages"
    table = MESSAGES
    singular = "Message"
    plural = "Messages"
    order_by = "timestamp"
    ascending = False
    required = ("name", "message")
    delete_prompt = "Are you sure you want to delete this message?"

    def blank_form(self) -> FormData:
        return {"name": "", "email": "", "message": "", "student_id": ""}

    def form_from_row(self, row: Mapping[str, Any]) -> FormData:
        return {
            "name": str(row.get("name") or ""),
            "email": str(row.get("email") or ""),
            "message": str(row.get("message") or ""),
            "student_id": str(row.get("student_id") or ""),
        }

    def parse_form(self, form: Mapping[str, Any]) -> Dict[str, Any]:
        forms.require(form, self.required)
        return {
            "name": forms.text(form, "name"),
            "email": forms.optional_text(form, "email"),
            "message": forms.text(form, "message"),
            "student_id": forms.optional_text(form, "student_id"),
        }

    def enrich(self, rows: List[Dict[str, Any]], store: RecordStoreProtocol) -> List[Dict[str, Any]]:
        ids = [str(r["student_id"]) for r in rows if r.get("student_id")]
        return attach_display_names(rows, student_names(store, ids))

    def load_choices(self, store: RecordStoreProtocol) -> Dict[str, List[Dict[str, Any]]]:
        return {"students": store.select(STUDENTS, order_by="full_name", ascending=True)}


ENTITY_SPECS: Dict[str, EntitySpec] = {
    spec.key: spec for spec in (StudentSpec(), SessionSpec(), ProgressSpec(), MessageSpec())
}


__all__ = ["EntitySpec", "StudentSpec", "SessionSpec", "ProgressSpec", "MessageSpec", "ENTITY_SPECS"]
