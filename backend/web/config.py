"""
Configuration and startup security checks for Tutordesk.

Why: The Record Store is reached with a static project key and the app keeps
identities in server-side sessions. A production deployment must not run on
the in-memory store (data loss on restart) or talk to the store over plain
HTTP. This module reads environment variables and provides a single guard.

Permissions: The caller needs no special privileges. The guard raises
`SystemExit` on fatal misconfiguration.
"""
from __future__ import annotations

import os


DEFAULT_BRAND_NAME = "Digital Math for SAT"
DEFAULT_SESSION_TTL_SECONDS = 8 * 3600
RECORD_STORE_BACKENDS = ("auto", "memory", "supabase")

_PLACEHOLDER_KEYS = {"", "DUMMY_DO_NOT_USE", "CHANGE_ME", "YOUR_SUPABASE_KEY"}


def _is_prod_like(env: str) -> bool:
    env_l = (env or "").lower()
    return env_l in {"prod", "production", "stage", "staging"}


def environment() -> str:
    return (os.getenv("TUTORDESK_ENV", "dev") or "dev").strip().lower()


def is_prod_like() -> bool:
    return _is_prod_like(environment())


def brand_name() -> str:
    return (os.getenv("TUTORDESK_BRAND_NAME") or "").strip() or DEFAULT_BRAND_NAME


def session_ttl_seconds() -> int:
    raw = (os.getenv("SESSION_TTL_SECONDS") or "").strip()
    try:
        value = int(raw)
    except ValueError:
        return DEFAULT_SESSION_TTL_SECONDS
    return value if value > 0 else DEFAULT_SESSION_TTL_SECONDS


def supabase_settings() -> tuple[str, str]:
    url = (os.getenv("SUPABASE_URL") or "").strip()
    key = (os.getenv("SUPABASE_KEY") or "").strip()
    return url, key


def record_store_backend() -> str:
    """Resolve the configured backend; `auto` picks Supabase when URL and key are set."""
    requested = (os.getenv("RECORD_STORE_BACKEND", "auto") or "auto").strip().lower()
    if requested not in RECORD_STORE_BACKENDS:
        raise SystemExit(
            f"Refusing to start: RECORD_STORE_BACKEND must be one of {', '.join(RECORD_STORE_BACKENDS)}."
        )
    if requested != "auto":
        return requested
    url, key = supabase_settings()
    return "supabase" if url and key else "memory"


def ensure_secure_config_on_startup() -> None:
    """Fail fast on insecure production configuration.

    Checks in prod-like environments (prod/production/stage/staging):
    - The Record Store must be Supabase, never the in-memory store.
    - SUPABASE_URL must use https.
    - SUPABASE_KEY must be set and not a known placeholder.
    """
    if not is_prod_like():
        return  # dev/test remain permissive

    backend = record_store_backend()
    if backend != "supabase":
        raise SystemExit(
            "Refusing to start: the in-memory record store is not allowed in production. Configure SUPABASE_URL and SUPABASE_KEY."
        )

    url, key = supabase_settings()
    if not url.lower().startswith("https://"):
        raise SystemExit("Refusing to start: SUPABASE_URL must use https in production.")

    if key.upper() in _PLACEHOLDER_KEYS:
        raise SystemExit("Refusing to start: SUPABASE_KEY is unset or a placeholder in production.")
