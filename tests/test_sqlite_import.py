from __future__ import annotations

import json

from db.repos.companies_repo import CompaniesRepo
from db.repos.founders_repo import FoundersRepo
from pipelines.import_founders import check_duplicates, import_founders


ROWS = [
    {"name": "John Smith", "email": "john@techcorp.com", "company_name": "TechCorp Inc", "role": "CEO"},
    {"name": "Jon Smith", "linkedin": "https://linkedin.com/in/jonsmith"},
    {"name": "Priya Patel", "linkedin": "https://www.linkedin.com/in/priyapatel/", "skills": "AI, Product"},
    {"email": "nobody@x.com"},
]


def test_import_into_sqlite_merges_and_links(db):
    CompaniesRepo(db).upsert_company("TechCorp Inc")

    outcome = import_founders(db, ROWS)

    assert (outcome.created, outcome.merged, outcome.linked) == (2, 1, 1)
    assert [e.row_index for e in outcome.errors] == [3]
    repo = FoundersRepo(db)
    assert repo.count() == 2
    john = repo.find_by_email("john@techcorp.com")
    # "Jon Smith" merged into John and contributed the LinkedIn profile
    assert john.linkedin == "https://linkedin.com/in/jonsmith"
    assert john.name == "John Smith"
    links = CompaniesRepo(db).links_for_person(john.id)
    assert [(l["company_name"], l["role"], l["is_primary"]) for l in links] == [("TechCorp Inc", "CEO", True)]


def test_second_import_is_idempotent(db):
    import_founders(db, ROWS)

    again = import_founders(db, ROWS)

    assert again.created == 0
    assert again.merged == 3
    assert FoundersRepo(db).count() == 2


def test_check_duplicates_does_not_write(db):
    import_founders(db, ROWS[:1])

    candidates = check_duplicates(db, ROWS)

    assert [c.match_type for c in candidates] == ["exact_email", "name_match", "none", "none"]
    assert FoundersRepo(db).count() == 1
    # Candidates serialize for callers collecting manual decisions
    assert json.loads(json.dumps(candidates[1].model_dump()))["confidence"] == 90


def test_env_threshold_applies(db, monkeypatch):
    monkeypatch.setenv("NAME_MATCH_THRESHOLD", "95")

    outcome = import_founders(db, ROWS[:2])

    assert outcome.created == 2
    assert outcome.merged == 0
