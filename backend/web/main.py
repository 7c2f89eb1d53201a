"Tutordesk web app"
from __future__ import annotations

from pathlib import Path
import logging
import os
import sys as _sys

from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse, Response
from fastapi.staticfiles import StaticFiles

from identity_access.holder import IdentityHolder, SessionIdentityStorage
from identity_access.stores import SessionStore

try:
    from .auth_utils import cookie_opts
except ImportError:
    from auth_utils import cookie_opts

# Ensure both import styles reference the same module instance.
if __name__ == "main":
    _sys.modules.setdefault("backend.web.main", _sys.modules[__name__])
elif __name__ == "backend.web.main":
    _sys.modules["main"] = _sys.modules[__name__]


def _should_load_dotenv() -> bool:
    """Decide if we should load a local .env file.

    - Never load under pytest to avoid contaminating test env.
    - Allow explicit opt-out via TUTORDESK_ENABLE_DOTENV (default true
      outside pytest).
    """
    if "pytest" in _sys.modules or os.getenv("PYTEST_CURRENT_TEST"):
        return False
    flag = (os.getenv("TUTORDESK_ENABLE_DOTENV", "true") or "").strip().lower()
    return flag in ("1", "true", "yes")


from dotenv import load_dotenv

if _should_load_dotenv():
    load_dotenv()

# Production safety checks (fail-fast on insecure config).
try:
    import config as _cfg  # type: ignore
except ImportError:  # pragma: no cover - package layout
    from backend.web import config as _cfg  # type: ignore

_cfg.ensure_secure_config_on_startup()

from rendering import user_context
from storage_wiring import get_record_store

# --- App Setup ------------------------------------------------------------------

logger = logging.getLogger("tutordesk.web")
SESSION_COOKIE_NAME = "tutordesk_session"
SESSION_STORE = SessionStore(ttl_seconds=_cfg.session_ttl_seconds())

app = FastAPI(title="Tutordesk", description="Student dashboard for a tutoring service", version="0.1.0")

# --- Static Files & Routers -----------------------------------------------------

static_dir = Path(__file__).parent / "static"
app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")

from routes.admin import admin_router
from routes.auth import auth_router
from routes.operations import operations_router
from routes.student import student_router

# Build the record store early so a broken production configuration fails at
# startup instead of on the first request.
get_record_store()

# --- Session & Auth Middleware --------------------------------------------------

_STATELESS_PREFIXES = ("/static/",)
_STATELESS_PATHS = ("/health", "/sw.js", "/manifest.json", "/favicon.ico")
_PUBLIC_PATHS = ("/", "/login", "/logout")


def _is_stateless_path(path: str) -> bool:
    return path.startswith(_STATELESS_PREFIXES) or path in _STATELESS_PATHS


def _set_session_cookie(response: Response, value: str) -> None:
    opts = cookie_opts(_cfg.environment())
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=value,
        httponly=opts["httponly"],
        secure=opts["secure"],
        samesite=opts["samesite"],
        path="/",
        max_age=SESSION_STORE.ttl_seconds if _cfg.is_prod_like() else None,
    )


@app.middleware("http")
async def auth_enforcement(request: Request, call_next):
    path = request.url.path
    if _is_stateless_path(path):
        return await call_next(request)

    sid = request.cookies.get(SESSION_COOKIE_NAME)
    rec = SESSION_STORE.get(sid) if sid else None
    if rec is None:
        rec = SESSION_STORE.new()
    else:
        SESSION_STORE.touch(rec.session_id)

    identity = IdentityHolder(get_record_store(), SessionIdentityStorage(rec)).initialize()
    request.state.session_store = SESSION_STORE
    request.state.browser_session = rec
    request.state.identity = identity
    request.state.user = user_context(identity)

    if not identity.is_authenticated and path not in _PUBLIC_PATHS:
        response = RedirectResponse(url="/login", status_code=302)
        response.headers["Cache-Control"] = "private, no-store"
    else:
        response = await call_next(request)

    # Unsaved records are kept only once the request put state into them.
    current = request.state.browser_session
    if current.session_id not in SESSION_STORE and current.has_state():
        SESSION_STORE.save(current)
    # Login and logout rotate the session; always hand the browser the current id.
    if current.session_id in SESSION_STORE:
        if current.session_id != sid:
            _set_session_cookie(response, current.session_id)
    elif sid:
        response.delete_cookie(SESSION_COOKIE_NAME, path="/")
    return response


# --- Security Headers Middleware ----------------------------------------------

@app.middleware("http")
async def security_headers(request: Request, call_next):
    response = await call_next(request)
    if _cfg.is_prod_like():
        # Harden CSP in production: no inline scripts or styles.
        csp = (
            "default-src 'self'; script-src 'self'; style-src 'self'; "
            "img-src 'self' data:; font-src 'self' data:; connect-src 'self'; "
            "worker-src 'self'; manifest-src 'self'; frame-ancestors 'self';"
        )
    else:
        csp = (
            "default-src 'self'; script-src 'self' 'unsafe-inline'; style-src 'self' 'unsafe-inline'; "
            "img-src 'self' data:; font-src 'self' data:; connect-src 'self'; "
            "worker-src 'self'; manifest-src 'self'; frame-ancestors 'self';"
        )
    response.headers.setdefault("Content-Security-Policy", csp)
    response.headers.setdefault("X-Frame-Options", "SAMEORIGIN")
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    # Same-origin checks fall back to Referer; keep it origin-only cross-site.
    response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
    if _cfg.is_prod_like():
        response.headers.setdefault("Cross-Origin-Opener-Policy", "same-origin")
    response.headers.setdefault("Permissions-Policy", "geolocation=(), microphone=(), camera=()")
    # HSTS: always on (dev = prod)
    response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
    return response


# --- Routes ---------------------------------------------------------------------

app.include_router(auth_router)
app.include_router(student_router)
app.include_router(admin_router)
app.include_router(operations_router)


@app.get("/")
async def index(request: Request):
    identity = request.state.identity
    target = "/dashboard" if identity.is_authenticated else "/login"
    return RedirectResponse(url=target, status_code=302, headers={"Cache-Control": "private, no-store"})
