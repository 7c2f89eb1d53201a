"""Tutoring views: CRUD controller, entity specs, enrichment and progress statistics."""

from .crud import CrudViewController, Notice, ViewState
from .entities import ENTITY_SPECS, EntitySpec, MessageSpec, ProgressSpec, SessionSpec, StudentSpec
from .enrichment import UNKNOWN_STUDENT, attach_display_names, sender_name
from .forms import FormValidationError
from .progress import average_score, exam_score_entries

__all__ = [
    "CrudViewController",
    "Notice",
    "ViewState",
    "ENTITY_SPECS",
    "EntitySpec",
    "StudentSpec",
    "SessionSpec",
    "ProgressSpec",
    "MessageSpec",
    "UNKNOWN_STUDENT",
    "attach_display_names",
    "sender_name",
    "FormValidationError",
    "average_score",
    "exam_score_entries",
]
