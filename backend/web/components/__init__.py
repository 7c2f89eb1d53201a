# Tutordesk component system
# Pure Python components for server-rendered HTML

from .base import Component
from .layout import Layout
from .navigation import Navigation
from .breadcrumbs import Breadcrumbs
from .toast import Toasts
from .tables import DataTable
from .cards import SessionCard, CardLink, ProgressSummary, MessageCard
from .forms import (
    FormField,
    TextAreaField,
    TextInputField,
    CheckboxField,
    SelectField,
    SubmitButton,
    LoginForm,
    EntityForm,
    DeleteConfirmForm,
)

__all__ = [
    "Component",
    "Layout",
    "Navigation",
    "Breadcrumbs",
    "Toasts",
    "DataTable",
    "SessionCard",
    "CardLink",
    "ProgressSummary",
    "MessageCard",
    "FormField",
    "TextAreaField",
    "TextInputField",
    "CheckboxField",
    "SelectField",
    "SubmitButton",
    "LoginForm",
    "EntityForm",
    "DeleteConfirmForm",
]
