"""
Identity domain constants and simple helpers.

Why:
- Centralize role names so the navigation shell and route guards agree.
- The only capability in this system is the `is_admin` flag on a student row.
"""

from __future__ import annotations

from typing import Any, Mapping

ROLE_STUDENT = "student"
ROLE_ADMIN = "admin"

# Keep roles minimal and explicit. Immutable to prevent accidental mutation.
ALLOWED_ROLES = frozenset({ROLE_STUDENT, ROLE_ADMIN})

# Fixed key under which the identity is persisted in the browser session.
IDENTITY_STORAGE_KEY = "student"


def role_for(row: Mapping[str, Any] | None) -> str:
    """Return the display role for a student row (admin wins)."""
    if row and bool(row.get("is_admin")):
        return ROLE_ADMIN
    return ROLE_STUDENT


__all__ = ["ALLOWED_ROLES", "ROLE_STUDENT", "ROLE_ADMIN", "IDENTITY_STORAGE_KEY", "role_for"]
