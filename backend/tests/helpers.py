"""Shared test doubles and web helpers."""
from __future__ import annotations

import re
from collections import Counter
from typing import Any, Dict, Iterable, Optional

import httpx
from httpx import ASGITransport

from records import STUDENTS, RecordStoreError
from records.memory import InMemoryRecordStore


CSRF_RE = re.compile(r'name="csrf_token" value="([^"]+)"')
BASE_URL = "https://test"


class SpyStore(InMemoryRecordStore):
    """In-memory store that counts calls per operation and table."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: Counter = Counter()

    def _count(self, operation: str, table: str) -> None:
        self.calls[(operation, table)] += 1
        self.calls[operation] += 1

    def select(self, table, **kwargs):
        self._count("select", table)
        return super().select(table, **kwargs)

    def maybe_single(self, table, **kwargs):
        self._count("maybe_single", table)
        return super().maybe_single(table, **kwargs)

    def insert(self, table, values):
        self._count("insert", table)
        return super().insert(table, values)

    def update(self, table, row_id, values):
        self._count("update", table)
        return super().update(table, row_id, values)

    def delete(self, table, row_id):
        self._count("delete", table)
        return super().delete(table, row_id)

    def reset_calls(self) -> None:
        self.calls.clear()

    @property
    def total_calls(self) -> int:
        return sum(v for k, v in self.calls.items() if isinstance(k, str))


class FailingStore(SpyStore):
    """Spy store whose listed operations raise RecordStoreError."""

    def __init__(self, failing: Iterable[str] = ()) -> None:
        super().__init__()
        self.failing = set(failing)

    def _count(self, operation: str, table: str) -> None:
        super()._count(operation, table)
        if operation in self.failing:
            raise RecordStoreError(table, operation, "simulated outage")


def add_student(
    store: InMemoryRecordStore,
    code: str,
    name: str,
    *,
    is_admin: bool = False,
    grade: str = "11",
    age: int = 16,
    email: Optional[str] = None,
) -> Dict[str, Any]:
    return store.insert(
        STUDENTS,
        {
            "student_code": code,
            "full_name": name,
            "grade": grade,
            "age": age,
            "email": email,
            "is_admin": is_admin,
        },
    )


def client_for(app) -> httpx.AsyncClient:
    # https so the Secure session cookie is sent back.
    return httpx.AsyncClient(transport=ASGITransport(app=app), base_url=BASE_URL)


def csrf_from(html: str) -> str:
    match = CSRF_RE.search(html)
    assert match, "page has no csrf_token field"
    return match.group(1)


async def login(client: httpx.AsyncClient, code: str) -> httpx.Response:
    page = await client.get("/login")
    token = csrf_from(page.text)
    return await client.post(
        "/login", data={"csrf_token": token, "student_code": code}, follow_redirects=False
    )


async def csrf_for(client: httpx.AsyncClient, path: str = "/dashboard") -> str:
    """Fetch a logged-in page and return its CSRF token (the logout form carries one)."""
    page = await client.get(path)
    return csrf_from(page.text)
