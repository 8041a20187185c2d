from __future__ import annotations

import pytest

from models import PersonRecord
from services.matcher import MatchFinder


def test_linkedin_url_variants_match_exactly(store):
    jane = store.create({"name": "Jane Doe", "linkedin": "linkedin.com/in/janedoe"})
    finder = MatchFinder(store, name_threshold=85)

    found = finder.find_match(PersonRecord(name="J. Doe", linkedin="https://www.linkedin.com/in/janedoe/"))

    assert found.match_type == "exact_linkedin"
    assert found.confidence == 100
    assert found.existing.id == jane.id
    assert found.is_certain


def test_exact_identifier_beats_better_name_match(store):
    store.create({"name": "John Smith", "email": "john@smith.io"})
    jon = store.create({"name": "Jon Smith", "linkedin": "https://linkedin.com/in/jonsmith"})
    finder = MatchFinder(store, name_threshold=85)

    found = finder.find_match(PersonRecord(name="John Smith", linkedin="linkedin.com/in/jonsmith"))

    assert found.match_type == "exact_linkedin"
    assert found.existing.id == jon.id


def test_email_match_is_case_insensitive(store):
    amy = store.create({"name": "Amy Lee", "email": "amy@x.com"})
    finder = MatchFinder(store, name_threshold=85)

    found = finder.find_match(PersonRecord(name="Someone", email=" AMY@X.com "))

    assert found.match_type == "exact_email"
    assert found.confidence == 100
    assert found.existing.id == amy.id


def test_unknown_linkedin_falls_through_to_email(store):
    amy = store.create({"name": "Amy Lee", "email": "amy@x.com"})
    finder = MatchFinder(store, name_threshold=85)

    found = finder.find_match(PersonRecord(name="Amy Lee", email="amy@x.com", linkedin="linkedin.com/in/nobody"))

    assert found.match_type == "exact_email"
    assert found.existing.id == amy.id


def test_fuzzy_name_match_reports_similarity(store):
    jon = store.create({"name": "Jon Smith"})
    finder = MatchFinder(store, name_threshold=85)

    found = finder.find_match(PersonRecord(name="John Smith"), row_index=4)

    assert found.match_type == "name_match"
    assert found.confidence == 90
    assert found.existing.id == jon.id
    assert found.row_index == 4
    assert found.submitted_name == "John Smith"
    assert not found.is_certain


def test_below_threshold_is_no_match(store):
    store.create({"name": "Amy Lee"})
    finder = MatchFinder(store, name_threshold=85)

    found = finder.find_match(PersonRecord(name="A. Lee"))

    assert found.match_type == "none"
    assert found.confidence == 0
    assert found.existing is None
    assert not found.is_match


def test_threshold_is_caller_controlled(store):
    store.create({"name": "Amy Lee"})

    found = MatchFinder(store, name_threshold=70).find_match(PersonRecord(name="A. Lee"))

    assert found.match_type == "name_match"
    assert found.confidence == 71


def test_find_by_name_sorts_best_first(store):
    store.create({"name": "Jon Smith"})
    store.create({"name": "John Smith"})
    store.create({"name": "Johan Smith"})
    finder = MatchFinder(store, name_threshold=85)

    matches = finder.find_by_name("John Smith", threshold=80)

    assert [(p.name, s) for p, s in matches] == [("John Smith", 100), ("Johan Smith", 91), ("Jon Smith", 90)]


def test_ties_keep_store_order(store):
    first = store.create({"name": "Jane Roe"})
    store.create({"name": "jane roe!"})
    finder = MatchFinder(store, name_threshold=85)

    found = finder.find_match(PersonRecord(name="Jane Roe"))

    assert found.existing.id == first.id
    assert found.confidence == 100


def test_nicknames_are_missed_by_prefilter(store):
    store.create({"name": "William Gates"})
    finder = MatchFinder(store, name_threshold=50)

    assert finder.find_match(PersonRecord(name="Bill Gates")).match_type == "none"


def test_empty_store_and_empty_name(store):
    finder = MatchFinder(store, name_threshold=85)
    assert finder.find_match(PersonRecord(name="Nobody Here")).match_type == "none"
    assert finder.find_by_name("") == []


def test_find_duplicates_returns_only_matches(store):
    store.create({"name": "Amy Lee", "email": "amy@x.com"})
    finder = MatchFinder(store, name_threshold=85)

    found = finder.find_duplicates([
        PersonRecord(name="Bob Chen"),
        PersonRecord(name="Amy L", email="amy@x.com"),
    ])

    assert [(c.row_index, c.match_type) for c in found] == [(1, "exact_email")]


def test_threshold_must_be_a_percentage(store):
    with pytest.raises(ValueError):
        MatchFinder(store, name_threshold=101)
