"""
Pytest configuration for backend tests.

Why: Force AnyIO to use the asyncio backend, make `backend/` and
`backend/web` importable the way the app image does, and give every test a
fresh session store and an empty in-memory record store.
"""
import importlib
import sys
from pathlib import Path

import pytest

# Ensure modules in backend/ and backend/web are importable across tests
REPO_ROOT = Path(__file__).resolve().parents[2]
BACKEND_DIR = REPO_ROOT / "backend"
WEB_DIR = BACKEND_DIR / "web"
TESTS_DIR = BACKEND_DIR / "tests"
for p in (str(REPO_ROOT), str(BACKEND_DIR), str(WEB_DIR), str(TESTS_DIR)):
    if p not in sys.path:
        sys.path.insert(0, p)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def _clear_env_toggles(monkeypatch: pytest.MonkeyPatch):
    """Start every test in dev mode with no Supabase or demo configuration.

    Individual tests opt into prod semantics or a backend explicitly.
    """
    for var in (
        "TUTORDESK_ENV",
        "TUTORDESK_TRUST_PROXY",
        "TUTORDESK_DEMO_DATA",
        "TUTORDESK_BRAND_NAME",
        "RECORD_STORE_BACKEND",
        "SUPABASE_URL",
        "SUPABASE_KEY",
        "SESSION_TTL_SECONDS",
    ):
        monkeypatch.delenv(var, raising=False)
    yield


@pytest.fixture
def record_store():
    """The in-memory record store wired into the app for this test."""
    from records.memory import InMemoryRecordStore

    return InMemoryRecordStore()


@pytest.fixture(autouse=True)
def _reset_app_state(monkeypatch: pytest.MonkeyPatch, record_store):
    """Give `main` a fresh SESSION_STORE and the per-test record store.

    Both module aliases (`main`, `backend.web.main`) share one instance so
    tests importing either see the same state.
    """
    try:
        import main  # type: ignore
        from identity_access.stores import SessionStore  # type: ignore
        import storage_wiring  # type: ignore
    except ImportError:
        yield
        return

    shared_session = SessionStore()
    monkeypatch.setattr(main, "SESSION_STORE", shared_session, raising=False)
    alias = sys.modules.get("backend.web.main")
    if alias is not None and alias is not main:
        monkeypatch.setattr(alias, "SESSION_STORE", shared_session, raising=False)
    storage_wiring.set_record_store(record_store)
    yield
    storage_wiring.set_record_store(None)
