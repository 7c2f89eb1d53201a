"""
Record Store wiring for the web app.

Why:
    Routes and the session middleware need one shared Record Store. This
    module builds it from configuration on first use and lets tests swap it
    (`set_record_store`) the same way they swap any other adapter.

Security:
    SUPABASE_URL and SUPABASE_KEY stay server-side; browsers never see them.
"""
from __future__ import annotations

import logging
import os

from records.memory import InMemoryRecordStore
from records.ports import RecordStoreProtocol

try:
    import config as _cfg  # type: ignore
except ImportError:  # pragma: no cover - package layout
    from backend.web import config as _cfg  # type: ignore


logger = logging.getLogger("tutordesk.web")

_STORE: RecordStoreProtocol | None = None


def _demo_data_enabled() -> bool:
    return (os.getenv("TUTORDESK_DEMO_DATA", "false") or "").strip().lower() in ("1", "true", "yes")


def build_record_store() -> RecordStoreProtocol:
    """Build the configured Record Store.

    Behavior:
        - `supabase`: create the client; in prod-like environments a failure
          aborts startup, elsewhere it degrades to the in-memory store with a
          warning.
        - `memory`: a fresh in-memory store, optionally seeded with demo data
          when TUTORDESK_DEMO_DATA=true.
    """
    backend = _cfg.record_store_backend()
    if backend == "supabase":
        url, key = _cfg.supabase_settings()
        try:
            from records.supabase_store import create_supabase_record_store

            if not url or not key:
                raise ValueError("SUPABASE_URL and SUPABASE_KEY are required")
            store = create_supabase_record_store(url, key)
        except Exception as exc:
            if _cfg.is_prod_like():
                raise SystemExit(f"Refusing to start: Supabase record store unavailable ({exc.__class__.__name__}).")
            logger.warning("Supabase record store wiring failed: %s: %s", exc.__class__.__name__, exc)
        else:
            logger.info("Record store wired: supabase")
            return store

    store = InMemoryRecordStore()
    if _demo_data_enabled():
        from records.demo import seed_demo

        seed_demo(store)
        logger.info("Record store wired: memory (demo data)")
    else:
        logger.info("Record store wired: memory")
    return store


def get_record_store() -> RecordStoreProtocol:
    global _STORE
    if _STORE is None:
        _STORE = build_record_store()
    return _STORE


def set_record_store(store: RecordStoreProtocol | None) -> None:
    """Allow tests (and the seed CLI) to provide a store; None rebuilds lazily."""
    global _STORE
    _STORE = store


__all__ = ["build_record_store", "get_record_store", "set_record_store"]
