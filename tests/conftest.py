from __future__ import annotations

import os
import sqlite3
import sys
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest


def pytest_configure():
    # Ensure project root is on sys.path for absolute imports like 'services.matcher'
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))
    # Set test environment knobs
    os.environ.setdefault("RUN_ENV", "test")


@pytest.fixture(autouse=True)
def _fresh_settings():
    # Settings are cached; tests monkeypatch env between calls
    from config.settings import get_settings
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class InMemoryFounderStore:
    """Dict-backed FounderStorePort with the same matching semantics as FoundersRepo."""

    def __init__(self) -> None:
        self.rows: List[Any] = []
        self.fail_on: Dict[str, Exception] = {}

    def _check(self, op: str) -> None:
        if op in self.fail_on:
            raise self.fail_on[op]

    def find_by_profile_identifier(self, normalized_value: str):
        self._check("find_by_profile_identifier")
        needle = normalized_value.lower()
        return next((p for p in self.rows if p.linkedin and needle in p.linkedin.lower()), None)

    def find_by_email(self, lowercased_email: str):
        self._check("find_by_email")
        return next((p for p in self.rows if p.email and p.email.lower() == lowercased_email.lower()), None)

    def find_candidates_by_name_prefix(self, first_token: str):
        self._check("find_candidates_by_name_prefix")
        return [p for p in self.rows if first_token in p.normalized_name]

    def get(self, person_id: str):
        return next((p for p in self.rows if p.id == person_id), None)

    def create(self, fields: Dict[str, Any]):
        self._check("create")
        from models import StoredPerson
        from services.normalize import normalize_name
        data = {k: v for k, v in fields.items() if v is not None}
        if data.get("email"):
            data["email"] = data["email"].lower()
        person = StoredPerson(id=uuid.uuid4().hex, normalized_name=normalize_name(data["name"]), **data)
        self.rows.append(person)
        return person

    def update(self, person_id: str, fields: Dict[str, Any]):
        self._check("update")
        from services.normalize import normalize_name
        current = self.get(person_id)
        if current is None:
            from services.errors import StoreError
            raise StoreError(f"Founder {person_id} not found")
        changes = {k: v for k, v in fields.items() if v is not None}
        if changes.get("email"):
            changes["email"] = changes["email"].lower()
        if "name" in changes:
            changes["normalized_name"] = normalize_name(changes["name"])
        updated = current.model_copy(update=changes)
        self.rows[self.rows.index(current)] = updated
        return updated


class InMemoryCompanies:
    def __init__(self, names: Optional[List[str]] = None) -> None:
        self.companies = {uuid.uuid4().hex: n for n in (names or [])}
        self.links: Dict[tuple, Dict[str, Any]] = {}
        self.fail_links = False

    def find_company_by_exact_name(self, name: str):
        from models import CompanyRef
        for cid, cname in self.companies.items():
            if cname.lower() == name.strip().lower():
                return CompanyRef(id=cid, name=cname)
        return None

    def link_person_to_company(self, person_id: str, company_id: str, role: str, is_primary: bool) -> bool:
        if self.fail_links:
            return False
        self.links[(person_id, company_id)] = {"role": role, "is_primary": is_primary}
        return True


@pytest.fixture
def store() -> InMemoryFounderStore:
    return InMemoryFounderStore()


@pytest.fixture
def companies() -> InMemoryCompanies:
    return InMemoryCompanies(["Acme Robotics", "TechCorp Inc"])


@pytest.fixture
def db(tmp_path):
    from db import schema
    conn = sqlite3.connect(str(tmp_path / "t.db"))
    try:
        schema.bootstrap(conn)
        yield conn
    finally:
        conn.close()
