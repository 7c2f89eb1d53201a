"""One-shot notification toasts rendered by the layout."""

from typing import Any, Dict, Iterable, List

from .base import Component


class Toasts(Component):
    """Render pending notices as a polite live region.

    Each notice is a mapping with `level` (success|error), `title` and
    `message`. Error toasts use role="alert" so screen readers announce them.
    """

    def __init__(self, notices: Iterable[Dict[str, Any]] | None = None):
        self.notices: List[Dict[str, Any]] = list(notices or [])

    def render(self) -> str:
        if not self.notices:
            return ""
        items = []
        for notice in self.notices:
            level = "error" if notice.get("level") == "error" else "success"
            role = "alert" if level == "error" else "status"
            items.append(
                f'<div class="{self.classes("toast", f"toast--{level}")}" role="{role}" data-toast>'
                f'<p class="toast-title">{self.escape(notice.get("title"))}</p>'
                f'<p class="toast-message">{self.escape(notice.get("message"))}</p>'
                f'<button type="button" class="toast-close" data-action="toast-close" aria-label="Dismiss">×</button>'
                "</div>"
            )
        return f'<div class="toast-region" aria-live="polite">{"".join(items)}</div>'
