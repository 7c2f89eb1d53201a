"""
Breadcrumb component for Tutordesk.

Builds a trail from the request path using the shared route registry.
"""

from typing import Dict, List, Optional, Tuple

from .base import Component
from .navigation import ROUTE_MAP, ROUTE_PATTERNS


class Breadcrumbs(Component):
    """Server-rendered breadcrumb trail; hidden on top-level pages."""

    def __init__(self, current_path: str = "/"):
        self.current_path = current_path or "/"

    def render(self) -> str:
        crumbs = self.build_crumbs()
        if len(crumbs) <= 2:
            return ""

        items = []
        last_index = len(crumbs) - 1
        for index, (href, label) in enumerate(crumbs):
            escaped_label = self.escape(label)
            if index == last_index:
                items.append(f'<li class="breadcrumb-item" aria-current="page">{escaped_label}</li>')
            else:
                items.append(
                    f'<li class="breadcrumb-item"><a href="{self.escape(href)}" class="breadcrumb-link">{escaped_label}</a></li>'
                )

        return f"""<nav class="breadcrumb" aria-label="Breadcrumb">
    <ol>
        {''.join(items)}
    </ol>
</nav>"""

    def build_crumbs(self) -> List[Tuple[str, str]]:
        """Return (href, label) pairs from Home down to the current page."""
        path = self._sanitize_path(self.current_path)
        crumbs: List[Tuple[str, str]] = [("/", self._label_for_path("/") or "Home")]
        if path == "/":
            return crumbs

        current = ""
        for segment in (s for s in path.strip("/").split("/") if s):
            current = f"{current}/{segment}"
            match = self._match_route(current)
            if match and match[1].get("skip"):
                continue
            crumbs.append((current, self._label_for_path(current) or self._humanize(segment)))
        return crumbs

    def _label_for_path(self, path: str) -> str:
        match = self._match_route(path)
        if not match:
            return ""
        return match[1].get("label", "")

    @staticmethod
    def _sanitize_path(path: str) -> str:
        clean = path.split("?")[0].split("#")[0].rstrip("/")
        return clean or "/"

    @staticmethod
    def _humanize(segment: str) -> str:
        cleaned = segment.replace("-", " ").replace("_", " ")
        words = [word.capitalize() for word in cleaned.split() if word]
        return " ".join(words) if words else segment

    def _match_route(self, path: str) -> Optional[Tuple[str, Dict[str, str], Dict[str, str]]]:
        """Return (pattern, meta, params) for the best matching route."""
        for pattern in ROUTE_PATTERNS:
            params = self._extract_params(pattern, path)
            if params is not None:
                return pattern, ROUTE_MAP[pattern], params
        return None

    @staticmethod
    def _extract_params(pattern: str, path: str) -> Optional[Dict[str, str]]:
        pattern_parts = [p for p in pattern.strip("/").split("/") if p]
        path_parts = [p for p in path.strip("/").split("/") if p]
        if len(pattern_parts) != len(path_parts):
            return None

        params: Dict[str, str] = {}
        for pattern_part, path_part in zip(pattern_parts, path_parts):
            if pattern_part.startswith(":"):
                params[pattern_part[1:]] = path_part
            elif pattern_part != path_part:
                return None
        return params
