"""
Security config guard and record-store wiring.

Production-like environments refuse the in-memory store, plain-http
Supabase URLs and placeholder keys; development stays permissive.
"""
from __future__ import annotations

import pytest

import config as cfg  # type: ignore
import storage_wiring  # type: ignore


def test_dev_allows_memory_store(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("TUTORDESK_ENV", "dev")
    cfg.ensure_secure_config_on_startup()
    assert cfg.record_store_backend() == "memory"


@pytest.mark.parametrize("env", ["prod", "production", "stage", "staging"])
def test_prod_like_refuses_memory_store(monkeypatch: pytest.MonkeyPatch, env: str):
    monkeypatch.setenv("TUTORDESK_ENV", env)
    with pytest.raises(SystemExit):
        cfg.ensure_secure_config_on_startup()


def test_prod_refuses_plain_http_url(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("TUTORDESK_ENV", "prod")
    monkeypatch.setenv("SUPABASE_URL", "http://db.example.org")
    monkeypatch.setenv("SUPABASE_KEY", "real-key")
    with pytest.raises(SystemExit):
        cfg.ensure_secure_config_on_startup()


def test_prod_refuses_placeholder_key(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("TUTORDESK_ENV", "prod")
    monkeypatch.setenv("SUPABASE_URL", "https://db.example.org")
    monkeypatch.setenv("SUPABASE_KEY", "CHANGE_ME")
    with pytest.raises(SystemExit):
        cfg.ensure_secure_config_on_startup()


def test_prod_accepts_https_supabase(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("TUTORDESK_ENV", "prod")
    monkeypatch.setenv("SUPABASE_URL", "https://db.example.org")
    monkeypatch.setenv("SUPABASE_KEY", "real-key")
    cfg.ensure_secure_config_on_startup()
    assert cfg.record_store_backend() == "supabase"


def test_invalid_backend_name_aborts(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("RECORD_STORE_BACKEND", "mysql")
    with pytest.raises(SystemExit):
        cfg.record_store_backend()


def test_brand_and_ttl_defaults(monkeypatch: pytest.MonkeyPatch):
    assert cfg.brand_name() == "Digital Math for SAT"
    monkeypatch.setenv("TUTORDESK_BRAND_NAME", "Tutor Co")
    monkeypatch.setenv("SESSION_TTL_SECONDS", "nonsense")
    assert cfg.brand_name() == "Tutor Co"
    assert cfg.session_ttl_seconds() == 8 * 3600


def test_wiring_builds_memory_store_with_demo_data(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("TUTORDESK_DEMO_DATA", "true")

    store = storage_wiring.build_record_store()

    assert store.backend_name == "memory"
    codes = {row["student_code"] for row in store.select("students")}
    assert {"ADMIN001", "SAT2024A", "SAT2024B"} <= codes


def test_wiring_falls_back_to_memory_in_dev_when_supabase_fails(monkeypatch: pytest.MonkeyPatch):
    import records.supabase_store as supabase_store

    def boom(url, key):
        raise RuntimeError("cannot reach project")

    monkeypatch.setattr(supabase_store, "create_supabase_record_store", boom)
    monkeypatch.setenv("RECORD_STORE_BACKEND", "supabase")
    monkeypatch.setenv("SUPABASE_URL", "https://db.example.org")
    monkeypatch.setenv("SUPABASE_KEY", "real-key")

    assert storage_wiring.build_record_store().backend_name == "memory"

    monkeypatch.setenv("TUTORDESK_ENV", "prod")
    with pytest.raises(SystemExit):
        storage_wiring.build_record_store()


def test_wiring_uses_supabase_when_configured(monkeypatch: pytest.MonkeyPatch):
    import records.supabase_store as supabase_store

    created = {}

    def fake_create(url, key):
        created["args"] = (url, key)
        return supabase_store.SupabaseRecordStore(client=object())

    monkeypatch.setattr(supabase_store, "create_supabase_record_store", fake_create)
    monkeypatch.setenv("SUPABASE_URL", "https://db.example.org")
    monkeypatch.setenv("SUPABASE_KEY", "real-key")

    store = storage_wiring.build_record_store()

    assert store.backend_name == "supabase"
    assert created["args"] == ("https://db.example.org", "real-key")
