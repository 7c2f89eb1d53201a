"""
SessionCard component.

One tutoring session: title, date, description and an optional action link.
External resources (recordings, materials) open in a new browsing context.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..base import Component
from ..formatting import format_datetime


@dataclass
class CardLink:
    """Action link rendered in the card footer."""

    label: str
    href: str
    external: bool = False


class SessionCard(Component):
    def __init__(self, session: Mapping[str, Any], *, link: Optional[CardLink] = None, edit_href: Optional[str] = None):
        self.session = session
        self.link = link
        self.edit_href = edit_href

    def render(self) -> str:
        title = self.escape(self.session.get("title"))
        when = self.escape(format_datetime(self.session.get("date_time")))
        description = self.escape(self.session.get("description"))
        edit_html = (
            f'<a class="card-edit" href="{self.escape(self.edit_href)}" aria-label="Edit session {title}">Edit</a>'
            if self.edit_href
            else ""
        )
        return (
            f'<article class="card session-card" data-session-id="{self.escape(self.session.get("id"))}">'
            '<header class="card-header">'
            f'<h3 class="card-title">{title}</h3>'
            f"{edit_html}"
            "</header>"
            f'<p class="card-meta"><time datetime="{self.escape(self.session.get("date_time"))}">{when}</time></p>'
            f'<p class="card-body">{description}</p>'
            f"{self._render_link()}"
            "</article>"
        )

    def _render_link(self) -> str:
        if not self.link:
            return ""
        attrs = self.attributes(
            href=self.link.href,
            class_="btn btn-primary",
            target="_blank" if self.link.external else None,
            rel="noopener noreferrer" if self.link.external else None,
        )
        return f'<footer class="card-footer"><a {attrs}>{self.escape(self.link.label)}</a></footer>'
