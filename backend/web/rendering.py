"""
Page rendering helpers shared by main and the routers.

The session middleware leaves three things on `request.state`:
`browser_session` (SessionRecord), `identity` (IdentityHolder) and `user`
(a small dict for the layout). These helpers turn them into responses.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

from fastapi import Request
from fastapi.responses import HTMLResponse

from components import Layout

try:
    import config as _cfg  # type: ignore
except ImportError:  # pragma: no cover - package layout
    from backend.web import config as _cfg  # type: ignore

from routes.security import csrf_token_for


def user_context(identity: Any) -> Optional[Dict[str, Any]]:
    """Read-only identity summary for the header and sidebar."""
    student = getattr(identity, "current", None)
    if student is None:
        return None
    return {
        "id": student.id,
        "name": student.full_name,
        "grade": student.grade,
        "age": student.age,
        "email": student.email,
        "is_admin": student.is_admin,
        "role": identity.role,
    }


def push_notices(request: Request, notices: Iterable[Any]) -> None:
    """Queue notices (Notice objects or dicts) as one-shot toasts for the next render."""
    record = getattr(request.state, "browser_session", None)
    if record is None:
        return
    for notice in notices:
        record.push_notice(notice.to_dict() if hasattr(notice, "to_dict") else dict(notice))


def layout_response(
    request: Request,
    *,
    title: str,
    content: str,
    status_code: int = 200,
    show_nav: bool = True,
    headers: dict[str, str] | None = None,
) -> HTMLResponse:
    """Render the Layout around `content` and drain pending toasts.

    Personalized pages get `Cache-Control: private, no-store` unless the caller
    overrides it.
    """
    record = getattr(request.state, "browser_session", None)
    notices = record.pop_notices() if record is not None else []
    user = getattr(request.state, "user", None)
    layout = Layout(
        title=title,
        content=content,
        user=user,
        show_nav=show_nav,
        current_path=request.url.path,
        brand=_cfg.brand_name(),
        notices=notices,
        csrf_token=csrf_token_for(request) if user else None,
    )
    response = HTMLResponse(content=layout.render(), status_code=status_code)
    if user and not (headers and "Cache-Control" in headers):
        response.headers["Cache-Control"] = "private, no-store"
    if headers:
        for key, value in headers.items():
            response.headers[key] = value
    return response


def csrf_error_response() -> HTMLResponse:
    return HTMLResponse(content="CSRF Error", status_code=403, headers={"Cache-Control": "private, no-store"})
