"""MessageCard component for the admin message list."""

from typing import Any, Mapping, Optional

from tutoring.enrichment import sender_name

from ..base import Component
from ..formatting import format_datetime


class MessageCard(Component):
    """Sender (linked student name or typed name), timestamp, email and body."""

    def __init__(self, message: Mapping[str, Any], *, edit_href: Optional[str] = None, delete_href: Optional[str] = None):
        self.message = message
        self.edit_href = edit_href
        self.delete_href = delete_href

    def render(self) -> str:
        meta = format_datetime(self.message.get("timestamp"))
        if self.message.get("email"):
            meta = f"{meta} • {self.message.get('email')}"
        actions = []
        if self.edit_href:
            actions.append(f'<a class="btn btn-secondary btn-sm" href="{self.escape(self.edit_href)}">Edit</a>')
        if self.delete_href:
            actions.append(f'<a class="btn btn-danger btn-sm" href="{self.escape(self.delete_href)}">Delete</a>')
        actions_html = f'<div class="card-actions">{"".join(actions)}</div>' if actions else ""
        return (
            f'<article class="card message-card" data-message-id="{self.escape(self.message.get("id"))}">'
            '<header class="card-header">'
            f'<h3 class="card-title">{self.escape(sender_name(self.message))}</h3>'
            f"{actions_html}"
            "</header>"
            f'<p class="card-meta">{self.escape(meta)}</p>'
            f'<p class="card-body message-body">{self.escape(self.message.get("message"))}</p>'
            "</article>"
        )
