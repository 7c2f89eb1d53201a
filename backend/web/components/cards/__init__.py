"""
Card components for Tutordesk.

Session cards back the dashboard, recorded sessions and materials lists;
the progress summary and message card back the progress and admin views.
"""

from .session import SessionCard, CardLink
from .progress import ProgressSummary
from .message import MessageCard

__all__ = ["SessionCard", "CardLink", "ProgressSummary", "MessageCard"]
