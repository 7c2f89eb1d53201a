"""
Authentication routes (router-only module).

Login exchanges a student code for an identity bound to a fresh browser
session. The old session is dropped on success so a pre-login session id can
never be reused after authentication. Logout clears the identity and rotates
the session as well.

The session middleware in `main` owns the session store and sets the cookie
whenever `request.state.browser_session` differs from the incoming one.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from components import LoginForm
from identity_access.holder import IdentityHolder, SessionIdentityStorage
from rendering import csrf_error_response, layout_response, push_notices, user_context
from routes.security import csrf_token_for, validate_csrf
from storage_wiring import get_record_store
from tutoring import Notice

try:
    import config as _cfg  # type: ignore
except ImportError:  # pragma: no cover - package layout
    from backend.web import config as _cfg  # type: ignore


auth_router = APIRouter(tags=["Auth"])
logger = logging.getLogger("tutordesk.web.auth")

EMPTY_CODE_MESSAGE = "Please enter your student code"
INVALID_CODE_TITLE = "Invalid Code"
INVALID_CODE_MESSAGE = "The student code you entered is not valid. Please try again."
LOGIN_SUCCESS_MESSAGE = "Login successful!"


def _login_page(request: Request, *, error: str | None = None, code: str = "", status_code: int = 200) -> HTMLResponse:
    form = LoginForm(csrf_token_for(request), brand=_cfg.brand_name(), error=error, code=code)
    content = f'<div class="login-page">{form.render()}</div>'
    return layout_response(
        request,
        title="Login",
        content=content,
        status_code=status_code,
        show_nav=False,
        headers={"Cache-Control": "private, no-store"},
    )


@auth_router.get("/login", response_class=HTMLResponse)
async def login_page(request: Request):
    identity = getattr(request.state, "identity", None)
    if identity is not None and identity.is_authenticated:
        return RedirectResponse(url="/dashboard", status_code=302)
    return _login_page(request)


@auth_router.post("/login", response_class=HTMLResponse)
async def login_submit(request: Request):
    form = await request.form()
    if not validate_csrf(request, form.get("csrf_token")):
        return csrf_error_response()

    code = str(form.get("student_code", "") or "").strip()
    if not code:
        return _login_page(request, error=EMPTY_CODE_MESSAGE, status_code=400)

    store_sessions = request.state.session_store
    previous = request.state.browser_session
    fresh = store_sessions.new()
    identity = IdentityHolder(get_record_store(), SessionIdentityStorage(fresh)).initialize()
    if not identity.login(code):
        push_notices(request, [Notice.error(INVALID_CODE_MESSAGE, title=INVALID_CODE_TITLE)])
        return _login_page(request, error=INVALID_CODE_MESSAGE, code=code, status_code=400)

    store_sessions.delete(previous.session_id)
    store_sessions.save(fresh)
    request.state.browser_session = fresh
    request.state.identity = identity
    request.state.user = user_context(identity)
    push_notices(request, [Notice.success(LOGIN_SUCCESS_MESSAGE)])
    logger.info("Student signed in (role=%s)", identity.role)
    return RedirectResponse(url="/dashboard", status_code=303, headers={"Cache-Control": "private, no-store"})


def _rotate_logged_out(request: Request) -> None:
    identity = getattr(request.state, "identity", None)
    if identity is not None:
        identity.logout()
    store_sessions = request.state.session_store
    store_sessions.delete(request.state.browser_session.session_id)
    request.state.browser_session = store_sessions.new()
    request.state.user = None


@auth_router.get("/logout")
async def logout_get(request: Request):
    """Convenience logout for plain links; rotates the session like the POST form."""
    _rotate_logged_out(request)
    return RedirectResponse(url="/login", status_code=302, headers={"Cache-Control": "private, no-store"})


@auth_router.post("/logout")
async def logout_submit(request: Request):
    form = await request.form()
    if not validate_csrf(request, form.get("csrf_token")):
        return csrf_error_response()
    _rotate_logged_out(request)
    return RedirectResponse(url="/login", status_code=303, headers={"Cache-Control": "private, no-store"})
