from __future__ import annotations

import pytest

from db.connection import get_connection
from db import schema
from db.repos.companies_repo import CompaniesRepo
from db.repos.founders_repo import FoundersRepo
from services.errors import StoreError


def test_create_derives_normalized_name_and_lowercases_email(db):
    repo = FoundersRepo(db)
    p = repo.create({"name": " Amy  Lee ", "email": "Amy@X.com", "skills": ["AI", "Robotics"], "source": "manual"})

    assert p.name == "Amy  Lee"
    assert p.normalized_name == "amy lee"
    assert p.email == "amy@x.com"
    assert p.skills == ["AI", "Robotics"]
    assert p.source == "manual"
    assert p.pipeline_stage == "Screening"
    assert len(p.id) == 32


def test_create_requires_a_name(db):
    with pytest.raises(StoreError):
        FoundersRepo(db).create({"name": "   ", "email": "x@y.com"})
    with pytest.raises(StoreError):
        FoundersRepo(db).create({"email": "x@y.com"})


def test_create_accepts_names_without_latin_letters(db):
    repo = FoundersRepo(db)
    p = repo.create({"name": "王小明", "email": "wang@x.com"})

    assert p.name == "王小明"
    assert p.normalized_name == ""
    assert repo.find_by_email("wang@x.com").id == p.id
    assert repo.find_candidates_by_name_prefix("wa") == []


def test_connection_creates_directory_and_bootstraps(tmp_path):
    conn = get_connection(tmp_path / "nested" / "dir" / "f.db", bootstrap=True)
    try:
        assert conn.execute("PRAGMA foreign_keys").fetchone()[0] == 1
        assert conn.execute("PRAGMA journal_mode").fetchone()[0] == "wal"
        assert FoundersRepo(conn).count() == 0
    finally:
        conn.close()
    assert (tmp_path / "nested" / "dir" / "f.db").exists()


def test_in_memory_connection_skips_wal():
    conn = get_connection(":memory:", bootstrap=True)
    try:
        assert conn.execute("PRAGMA journal_mode").fetchone()[0] == "memory"
        assert FoundersRepo(conn).create({"name": "Amy Lee"}).normalized_name == "amy lee"
    finally:
        conn.close()


def test_update_keeps_unspecified_fields_and_syncs_normalized_name(db):
    repo = FoundersRepo(db)
    p = repo.create({"name": "Amy Lee", "title": "CEO", "location": "Berlin"})

    updated = repo.update(p.id, {"title": "CTO", "location": None})
    assert (updated.title, updated.location) == ("CTO", "Berlin")

    renamed = repo.update(p.id, {"name": "Amy B. Lee"})
    assert renamed.normalized_name == "amy b lee"


def test_update_unknown_id_raises(db):
    with pytest.raises(StoreError):
        FoundersRepo(db).update("missing", {"title": "CTO"})


def test_profile_identifier_is_a_case_insensitive_substring_match(db):
    repo = FoundersRepo(db)
    jane = repo.create({"name": "Jane Doe", "linkedin": "https://www.LinkedIn.com/in/JaneDoe/"})

    assert repo.find_by_profile_identifier("janedoe").id == jane.id
    assert repo.find_by_profile_identifier("johndoe") is None
    assert repo.find_by_profile_identifier("") is None


def test_find_by_email(db):
    repo = FoundersRepo(db)
    amy = repo.create({"name": "Amy Lee", "email": "amy@x.com"})

    assert repo.find_by_email("AMY@x.com").id == amy.id
    assert repo.find_by_email("bob@x.com") is None


def test_name_candidates_come_back_in_insert_order(db):
    repo = FoundersRepo(db)
    repo.create({"name": "Jon Smith"})
    repo.create({"name": "Bob Chen"})
    repo.create({"name": "John Smith"})

    names = [p.name for p in repo.find_candidates_by_name_prefix("jo")]

    assert names == ["Jon Smith", "John Smith"]


def test_closed_connection_surfaces_as_store_error(tmp_path):
    conn = get_connection(str(tmp_path / "closed.db"))
    schema.bootstrap(conn)
    repo = FoundersRepo(conn)
    conn.close()

    with pytest.raises(StoreError):
        repo.find_by_email("amy@x.com")


def test_company_lookup_is_case_insensitive_and_upsert_is_stable(db):
    repo = CompaniesRepo(db)
    a = repo.upsert_company("Acme Robotics")
    b = repo.upsert_company("  acme ROBOTICS ")

    assert a == b
    assert repo.find_company_by_exact_name("ACME robotics").id == a
    assert repo.find_company_by_exact_name("Acme") is None


def test_link_is_created_then_updated(db):
    founders = FoundersRepo(db)
    companies = CompaniesRepo(db)
    p = founders.create({"name": "Amy Lee"})
    cid = companies.upsert_company("Acme Robotics")

    assert companies.link_person_to_company(p.id, cid, "Founder", False) is True
    assert companies.link_person_to_company(p.id, cid, "CEO", True) is True

    links = companies.links_for_person(p.id)
    assert links == [
        {"company_id": cid, "company_name": "Acme Robotics", "role": "CEO", "is_primary": True, "is_active": True}
    ]


def test_link_failure_returns_false(tmp_path):
    conn = get_connection(str(tmp_path / "fk.db"))
    try:
        schema.bootstrap(conn)
        cid = CompaniesRepo(conn).upsert_company("Acme Robotics")
        # Foreign keys are on: the founder does not exist
        assert CompaniesRepo(conn).link_person_to_company("ghost", cid, "Founder", True) is False
    finally:
        conn.close()
