"""
Create/edit form for the admin CRUD views and the contact page.

Field layouts are data: (name, label, kind, required, help). The form is
seeded with editable strings prepared by the entity spec, so the same
component renders blank create dialogs, edit dialogs and re-rendered
submissions that failed validation.
"""

from typing import Any, Dict, List, Mapping, NamedTuple, Optional

from ..base import Component
from .fields import CheckboxField, SelectField, TextAreaField, TextInputField
from .submit import SubmitButton


class FieldSpec(NamedTuple):
    name: str
    label: str
    kind: str = "text"
    required: bool = False
    help_text: Optional[str] = None


FIELD_LAYOUTS: Dict[str, List[FieldSpec]] = {
    "students": [
        FieldSpec("student_code", "Student Code", required=True),
        FieldSpec("full_name", "Full Name", required=True),
        FieldSpec("grade", "Grade", required=True),
        FieldSpec("age", "Age", "number", required=True),
        FieldSpec("email", "Email (optional)", "email"),
        FieldSpec("is_admin", "Admin access", "checkbox"),
    ],
    "sessions": [
        FieldSpec("title", "Title", required=True),
        FieldSpec("date_time", "Date & Time (UTC)", "datetime-local", required=True),
        FieldSpec("description", "Description", "textarea", required=True),
        FieldSpec("recorded_url", "Recorded Session URL (optional)", "url"),
        FieldSpec("materials_url", "Materials URL (optional)", "url"),
        FieldSpec("is_published", "Published", "checkbox"),
    ],
    "progress": [
        FieldSpec("student_id", "Student", "student", required=True),
        FieldSpec("sessions_completed", "Sessions Completed", "number"),
        FieldSpec("sessions_remaining", "Sessions Remaining", "number"),
        FieldSpec("level", "Level", required=True),
        FieldSpec(
            "exam_scores",
            "Exam Scores (JSON)",
            "json",
            help_text='Format: [{"date": "2024-01-15", "score": 85}]',
        ),
    ],
    "messages": [
        FieldSpec("name", "Name", required=True),
        FieldSpec("email", "Email (optional)", "email"),
        FieldSpec("message", "Message", "textarea", required=True),
        FieldSpec("student_id", "Linked student (optional)", "student"),
    ],
    "contact": [
        FieldSpec("name", "Name", required=True),
        FieldSpec("email", "Email (optional)", "email"),
        FieldSpec("message", "Message", "textarea", required=True),
    ],
}


class EntityForm(Component):
    """Render the dialog form for one entity."""

    def __init__(
        self,
        entity: str,
        *,
        action: str,
        values: Mapping[str, str],
        csrf_token: str,
        submit_label: str,
        error: Optional[str] = None,
        choices: Optional[Mapping[str, List[Dict[str, Any]]]] = None,
        locked: tuple = (),
        cancel_href: Optional[str] = None,
    ) -> None:
        self.entity = entity
        self.action = action
        self.values = dict(values)
        self.csrf_token = csrf_token
        self.submit_label = submit_label
        self.error = error
        self.choices = choices or {}
        self.locked = set(locked)
        self.cancel_href = cancel_href

    def render(self) -> str:
        rendered = [self._render_field(field) for field in FIELD_LAYOUTS[self.entity]]
        error_html = f'<div class="form-error form-error--summary" role="alert">{self.escape(self.error)}</div>' if self.error else ""
        cancel_html = (
            f'<a class="btn btn-secondary" href="{self.escape(self.cancel_href)}">Cancel</a>' if self.cancel_href else ""
        )
        return f"""
        <form method="post" action="{self.escape(self.action)}" class="entity-form entity-form--{self.escape(self.entity)}">
            <input type="hidden" name="csrf_token" value="{self.escape(self.csrf_token)}">
            {error_html}
            {self.join(rendered)}
            <div class="form-actions">
                {SubmitButton(self.submit_label).render()}
                {cancel_html}
            </div>
        </form>
        """

    def _render_field(self, field: FieldSpec) -> str:
        value = self.values.get(field.name, "")
        if field.kind == "checkbox":
            return CheckboxField(field.name, field.label).render(checked=bool(value))
        if field.kind == "student":
            return self._render_student_select(field, value)
        widget_args = {"required": field.required, "help_text": field.help_text}
        if field.kind == "textarea":
            return TextAreaField(field.name, field.label, **widget_args).render(value=value, rows=5, class_="form-input")
        if field.kind == "json":
            return TextAreaField(field.name, field.label, **widget_args).render(
                value=value, rows=8, class_="form-input form-input--mono", spellcheck="false"
            )
        if field.kind == "number":
            extra = {"min": "1", "max": "100"} if field.name == "age" else {"min": "0"}
            return TextInputField(field.name, field.label, **widget_args).render(
                value=value, input_type="number", class_="form-input", **extra
            )
        if field.kind == "url":
            # URL shape is not validated; keep a plain text input.
            return TextInputField(field.name, field.label, **widget_args).render(
                value=value, input_type="text", inputmode="url", class_="form-input"
            )
        return TextInputField(field.name, field.label, **widget_args).render(
            value=value, input_type=field.kind, class_="form-input"
        )

    def _render_student_select(self, field: FieldSpec, value: str) -> str:
        students = self.choices.get("students", [])
        options = [(str(s.get("id")), f'{s.get("full_name", "")} ({s.get("student_code", "")})') for s in students]
        disabled = field.name in self.locked
        empty_label = "Select a student" if field.required else "Not linked"
        select_html = SelectField(field.name, field.label, required=field.required).render(
            options=options, value=value, empty_label=empty_label, disabled=disabled
        )
        if disabled:
            select_html += f'<input type="hidden" name="{self.escape(field.name)}" value="{self.escape(value)}">'
        return select_html
