"""
Navigation component for Tutordesk.

Collapsible sidebar whose entries depend on the identity's admin flag. Admins
get an "Admin Area" group whose children link to the four CRUD views.
"""

from typing import Any, Dict, List, Optional, Set, Tuple

from .base import Component

# ---------------------------------------------------------------------------
# Route registry (shared with breadcrumbs)
# ---------------------------------------------------------------------------

RouteMeta = Dict[str, str]

ROUTE_MAP: Dict[str, RouteMeta] = {
    "/": {"label": "Home"},
    "/login": {"label": "Login"},
    "/dashboard": {"label": "Dashboard"},
    "/recorded-sessions": {"label": "Recorded Sessions"},
    "/materials": {"label": "Sessions Materials"},
    "/progress": {"label": "Student Progress"},
    "/contact": {"label": "Contact Us"},
    "/admin": {"label": "Admin Area"},
    "/admin/students": {"label": "Students"},
    "/admin/sessions": {"label": "Sessions"},
    "/admin/progress": {"label": "Progress"},
    "/admin/messages": {"label": "Messages"},
    "/admin/:entity/new": {"label": "New"},
    # Row ids have no page of their own; the trail goes straight to the action.
    "/admin/:entity/:row_id": {"label": "", "skip": "1"},
    "/admin/:entity/:row_id/edit": {"label": "Edit"},
    "/admin/:entity/:row_id/delete": {"label": "Delete"},
}

ROUTE_PATTERNS: List[str] = sorted(
    ROUTE_MAP.keys(),
    # Deeper patterns first; literal segments beat placeholders at equal depth.
    key=lambda pattern: (pattern.count("/"), -pattern.count(":")),
    reverse=True,
)

NavChild = Tuple[str, str, str]
NavItem = Tuple[str, str, str, Optional[List[NavChild]]]

STUDENT_ITEMS: List[NavItem] = [
    ("/dashboard", "Dashboard", "🏠", None),
    ("/recorded-sessions", "Recorded Sessions", "🎥", None),
    ("/materials", "Sessions Materials", "📄", None),
    ("/progress", "Student Progress", "📈", None),
    ("/contact", "Contact Us", "✉️", None),
]

ADMIN_ITEM: NavItem = (
    "/admin",
    "Admin Area",
    "🛡️",
    [
        ("/admin/students", "Students", "👥"),
        ("/admin/sessions", "Sessions", "🗓️"),
        ("/admin/progress", "Progress", "📊"),
        ("/admin/messages", "Messages", "💬"),
    ],
)


class Navigation(Component):
    """Sidebar navigation with toggle button, role-aware entries and logout."""

    def __init__(
        self,
        user: Optional[Dict[str, Any]] = None,
        current_path: str = "/",
        *,
        brand: str = "Tutordesk",
        csrf_token: Optional[str] = None,
    ):
        """
        Args:
            user: Identity summary with 'name' and 'is_admin' keys (optional)
            current_path: The current URL path for active link highlighting
            brand: Product name shown in the sidebar header
            csrf_token: Token for the logout form (POST)
        """
        self.user = user
        self.current_path = current_path or "/"
        self.brand = brand
        self.csrf_token = csrf_token
        self._active_href: str = ""
        self._active_parents: Set[str] = set()

    def render(self) -> str:
        if not self.user:
            return ""

        nav_tree = self.nav_tree()
        self._active_href = self._determine_active_href(nav_tree)
        self._active_parents = self._determine_active_parents(nav_tree, self._active_href)

        links = [self._render_nav_item(item) for item in nav_tree]
        links.append(self._render_logout())

        return f"""
    <button class="sidebar-toggle" data-action="sidebar-toggle" aria-label="Toggle navigation" aria-controls="sidebar" aria-expanded="true">
        <span class="sidebar-toggle-icon" aria-hidden="true">☰</span>
    </button>

    <aside class="sidebar" id="sidebar" aria-label="Sidebar">
        <nav class="sidebar-nav" role="navigation" aria-label="Main navigation">
            <div class="sidebar-header">
                <span class="sidebar-title">{self.escape(self.brand)}</span>
            </div>

            <div class="sidebar-items">
                {''.join(links)}
            </div>
        </nav>
    </aside>

    <div class="sidebar-overlay" data-action="sidebar-close"></div>"""

    def nav_tree(self) -> List[NavItem]:
        """Return the entries visible to the current identity (admin group last)."""
        items = list(STUDENT_ITEMS)
        if self.user and self.user.get("is_admin"):
            items.append(ADMIN_ITEM)
        return items

    def _determine_active_href(self, nav_tree: List[NavItem]) -> str:
        """Pick the single active href using best prefix match across items and children."""
        path = self.current_path
        best = ""
        best_len = 0
        for href, _text, _icon, children in nav_tree:
            candidates = [href] + [child[0] for child in (children or [])]
            for candidate in candidates:
                if candidate == path:
                    return candidate
                if path.startswith(candidate + "/") and len(candidate) > best_len:
                    best, best_len = candidate, len(candidate)
        return best

    @staticmethod
    def _determine_active_parents(nav_tree: List[NavItem], active_href: str) -> Set[str]:
        parents: Set[str] = set()
        for href, _text, _icon, children in nav_tree:
            if any(child[0] == active_href for child in (children or [])):
                parents.add(href)
        return parents

    def _render_nav_item(self, item: NavItem) -> str:
        href, text, icon, children = item
        is_current = href == self._active_href
        parent_link = self._create_nav_link(href, text, icon, is_active=is_current or href in self._active_parents, aria_current=is_current)
        if not children:
            return parent_link

        child_links = [
            self._create_nav_link(ch_href, ch_text, ch_icon, is_active=ch_href == self._active_href, aria_current=ch_href == self._active_href)
            for ch_href, ch_text, ch_icon in children
        ]
        return f"""
        <div class="sidebar-group">
            {parent_link}
            <div class="sidebar-subitems">
                {''.join(child_links)}
            </div>
        </div>"""

    def _create_nav_link(self, href: str, text: str, icon: str = "", *, is_active: bool = False, aria_current: bool = False) -> str:
        icon_html = f'<span class="nav-icon" aria-hidden="true">{icon}</span>' if icon else ""
        attrs = self.attributes(
            href=href,
            class_=self.classes("sidebar-link", active=is_active),
            data_tooltip=text,
            aria_current="page" if aria_current else None,
        )
        return f"""
        <a {attrs}>
            {icon_html}
            <span class="nav-text">{self.escape(text)}</span>
        </a>"""

    def _render_logout(self) -> str:
        """Logout posts to /logout so a cross-site link cannot sign the student out."""
        token = self.escape(self.csrf_token or "")
        return f"""
        <form method="post" action="/logout" class="sidebar-logout-form">
            <input type="hidden" name="csrf_token" value="{token}">
            <button type="submit" class="sidebar-link sidebar-logout" data-tooltip="Logout">
                <span class="nav-icon" aria-hidden="true">🚪</span>
                <span class="nav-text">Logout</span>
            </button>
        </form>"""
