"""
Shared web security helpers for the HTML routes.

Every POST form carries a synchronizer token bound to the browser session,
and the request must come from our own origin when the browser says where it
came from. Both checks live here so routes cannot drift apart.
"""
from __future__ import annotations

import hmac
import os
from typing import Optional
from urllib.parse import urlparse

from fastapi import Request


def _default_port(scheme: str) -> int:
    return 443 if scheme == "https" else 80


def _parse_origin(url: str) -> tuple[str, str, int]:
    p = urlparse(url)
    if not p.scheme or not p.hostname:
        raise ValueError("invalid_origin")
    scheme = p.scheme.lower()
    return scheme, p.hostname.lower(), int(p.port or _default_port(scheme))


def _server_origin(request: Request) -> tuple[str, str, int]:
    """Origin of this server; X-Forwarded-* only counts when TUTORDESK_TRUST_PROXY=true."""
    trust_proxy = (os.getenv("TUTORDESK_TRUST_PROXY", "false") or "").lower() == "true"
    scheme = (request.url.scheme or "http").lower()
    host = (request.url.hostname or "").lower()
    port = int(request.url.port or _default_port(scheme))
    if not trust_proxy:
        return scheme, host, port

    xf_proto = (request.headers.get("x-forwarded-proto") or "").split(",")[0].strip().lower()
    xf_host = (request.headers.get("x-forwarded-host") or "").split(",")[0].strip()
    if xf_proto:
        scheme = xf_proto
        port = _default_port(scheme)
    if xf_host:
        if ":" in xf_host:
            host_only, port_str = xf_host.rsplit(":", 1)
            host = host_only.lower()
            port = int(port_str) if port_str.isdigit() else _default_port(scheme)
        else:
            host = xf_host.lower()
            port = _default_port(scheme)
    xf_port = (request.headers.get("x-forwarded-port") or "").split(",")[0].strip()
    if xf_port.isdigit():
        port = int(xf_port)
    return scheme, host, port


def _is_same_origin(request: Request) -> bool:
    """Verify same-origin using the Origin header, else Referer.

    Requests without either header are allowed so non-browser clients work;
    the CSRF token still applies to them.
    """
    claimed = request.headers.get("origin") or request.headers.get("referer")
    if not claimed:
        return True
    try:
        return _parse_origin(claimed) == _server_origin(request)
    except ValueError:
        return False


def csrf_token_for(request: Request) -> str:
    """Return (creating on first use) the CSRF token of the current browser session."""
    record = getattr(request.state, "browser_session", None)
    if record is None:
        return ""
    return record.ensure_csrf_token()


def validate_csrf(request: Request, form_value: Optional[str]) -> bool:
    record = getattr(request.state, "browser_session", None)
    if record is None or not form_value or not record.csrf_token:
        return False
    if not _is_same_origin(request):
        return False
    return hmac.compare_digest(record.csrf_token, str(form_value))
