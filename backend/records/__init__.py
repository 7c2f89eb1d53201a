"""Record Store: table-oriented persistence for students, sessions, progress and messages."""

from .ports import (
    MESSAGES,
    PROGRESS,
    SESSIONS,
    STUDENTS,
    TABLES,
    Filter,
    RecordStoreError,
    RecordStoreProtocol,
)
from .models import ExamScore, Message, Progress, Session, Student

__all__ = [
    "MESSAGES",
    "PROGRESS",
    "SESSIONS",
    "STUDENTS",
    "TABLES",
    "Filter",
    "RecordStoreError",
    "RecordStoreProtocol",
    "ExamScore",
    "Message",
    "Progress",
    "Session",
    "Student",
]
