"""
Data model for the four Record Store tables.

Rows stay plain mappings at the store seam; these dataclasses give views and
the identity holder typed access without coupling adapters to them.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Mapping, Optional


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def _as_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _opt_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


@dataclass
class Student:
    id: str
    student_code: str
    full_name: str
    grade: str
    age: int
    email: Optional[str] = None
    is_admin: bool = False
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Student":
        return cls(
            id=str(row.get("id") or ""),
            student_code=str(row.get("student_code") or ""),
            full_name=str(row.get("full_name") or ""),
            grade=str(row.get("grade") or ""),
            age=_as_int(row.get("age")),
            email=_opt_str(row.get("email")),
            is_admin=_as_bool(row.get("is_admin", False)),
            created_at=_opt_str(row.get("created_at")),
        )

    def to_row(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Session:
    id: str
    title: str
    date_time: str
    description: str
    recorded_url: Optional[str] = None
    materials_url: Optional[str] = None
    is_published: bool = False
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Session":
        return cls(
            id=str(row.get("id") or ""),
            title=str(row.get("title") or ""),
            date_time=str(row.get("date_time") or ""),
            description=str(row.get("description") or ""),
            recorded_url=_opt_str(row.get("recorded_url")),
            materials_url=_opt_str(row.get("materials_url")),
            is_published=_as_bool(row.get("is_published", False)),
            created_at=_opt_str(row.get("created_at")),
        )


@dataclass(frozen=True)
class ExamScore:
    date: str
    score: float


@dataclass
class Progress:
    id: str
    student_id: str
    sessions_completed: int = 0
    sessions_remaining: int = 0
    level: str = ""
    exam_scores: List[Any] = field(default_factory=list)
    updated_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Progress":
        scores = row.get("exam_scores")
        return cls(
            id=str(row.get("id") or ""),
            student_id=str(row.get("student_id") or ""),
            sessions_completed=_as_int(row.get("sessions_completed")),
            sessions_remaining=_as_int(row.get("sessions_remaining")),
            level=str(row.get("level") or ""),
            # exam_scores is free-form JSON; keep whatever list the store holds.
            exam_scores=list(scores) if isinstance(scores, list) else [],
            updated_at=_opt_str(row.get("updated_at")),
        )


@dataclass
class Message:
    id: str
    name: str
    message: str
    email: Optional[str] = None
    student_id: Optional[str] = None
    timestamp: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Message":
        return cls(
            id=str(row.get("id") or ""),
            name=str(row.get("name") or ""),
            message=str(row.get("message") or ""),
            email=_opt_str(row.get("email")),
            student_id=_opt_str(row.get("student_id")),
            timestamp=_opt_str(row.get("timestamp")),
        )


__all__ = ["Student", "Session", "ExamScore", "Progress", "Message"]
