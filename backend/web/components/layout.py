"""
Layout component for Tutordesk.

Wraps every page: header with branding and identity summary, sidebar
navigation, breadcrumbs, toasts and the main content column.
"""

from typing import Any, Dict, Iterable, Optional

from .base import Component
from .breadcrumbs import Breadcrumbs
from .navigation import Navigation
from .toast import Toasts


class Layout(Component):
    """Main layout component that assembles the complete page."""

    def __init__(
        self,
        title: str,
        content: str,
        user: Optional[Dict[str, Any]] = None,
        show_nav: bool = True,
        current_path: str = "/",
        *,
        brand: str = "Tutordesk",
        notices: Optional[Iterable[Dict[str, Any]]] = None,
        csrf_token: Optional[str] = None,
    ):
        """
        Args:
            title: Page title (will be escaped)
            content: Main content HTML (pre-rendered components)
            user: Identity summary: name, grade, age, is_admin (optional)
            show_nav: Whether to show sidebar and breadcrumbs
            current_path: Current URL path for active navigation highlighting
            brand: Product name for header and <title>
            notices: One-shot toasts to show on this render
            csrf_token: Token for the logout form
        """
        self.title = title
        self.content = content
        self.user = user
        self.show_nav = show_nav and bool(user)
        self.current_path = current_path
        self.brand = brand
        self.notices = list(notices or [])
        self.csrf_token = csrf_token

    def render(self) -> str:
        nav_html = (
            Navigation(self.user, self.current_path, brand=self.brand, csrf_token=self.csrf_token).render()
            if self.show_nav
            else ""
        )
        breadcrumb_html = Breadcrumbs(self.current_path).render() if self.show_nav else ""
        body_class = self.classes("app", with_sidebar=self.show_nav)

        return f"""<!DOCTYPE html>
<html lang="en">
<head>
    {self._render_head()}
</head>
<body class="{body_class}">
    <a href="#main-content" class="skip-link">Skip to main content</a>

    {self._render_header()}

    {nav_html}

    {Toasts(self.notices).render()}

    <main id="main-content" class="main-content" role="main">
        {breadcrumb_html}
        {self.content}
    </main>
</body>
</html>"""

    def _render_head(self) -> str:
        return f"""
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <meta name="description" content="{self.escape(self.brand)} student dashboard">
    <meta name="theme-color" content="#2563eb">

    <title>{self.escape(self.title)} - {self.escape(self.brand)}</title>

    <link rel="manifest" href="/manifest.json">
    <link rel="stylesheet" href="/static/css/tutordesk.css?v=1">

    <script src="/static/js/tutordesk.js?v=1" defer></script>
    """

    def _render_header(self) -> str:
        summary = ""
        if self.user:
            summary = f"""
        <div class="header-identity">
            <p class="header-name">{self.escape(self.user.get("name"))}</p>
            <p class="header-meta">Grade {self.escape(self.user.get("grade"))} • Age {self.escape(self.user.get("age"))}</p>
        </div>"""
        return f"""
    <header class="app-header" role="banner">
        <span class="header-brand">{self.escape(self.brand)}</span>{summary}
    </header>"""
