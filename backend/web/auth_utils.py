"""
Shared cookie policy for the browser session cookie.

Why:
    The session middleware (main) and the login/logout routes both set the
    cookie. Keeping the flags in one pure helper keeps them consistent.
"""

from __future__ import annotations


def cookie_opts(environment: str) -> dict:
    """Return hardened cookie flags (dev = prod).

    Returns a mapping with keys:
      - httponly: True (scripts never read the session id)
      - secure: True
      - samesite: "lax" (top-level navigations keep the session; cross-site
        POSTs do not carry it)
    """
    return {"httponly": True, "secure": True, "samesite": "lax"}
