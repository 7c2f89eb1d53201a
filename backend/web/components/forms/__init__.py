"""
Form components for Tutordesk.

Basic building blocks (fields, submit button) plus the login, entity and
delete confirmation forms built from them.
"""

from .fields import FormField, TextAreaField, TextInputField, CheckboxField, SelectField
from .submit import SubmitButton
from .login_form import LoginForm
from .entity_form import EntityForm, FieldSpec, FIELD_LAYOUTS
from .confirm_form import DeleteConfirmForm

__all__ = [
    "FormField",
    "TextAreaField",
    "TextInputField",
    "CheckboxField",
    "SelectField",
    "SubmitButton",
    "LoginForm",
    "EntityForm",
    "FieldSpec",
    "FIELD_LAYOUTS",
    "DeleteConfirmForm",
]
