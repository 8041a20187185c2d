from __future__ import annotations

import logging
from typing import Iterable, List, Tuple

from models import MatchCandidate, PersonRecord, StoredPerson
from ports.repos import FounderStorePort
from services.normalize import (
    name_prefix_key,
    normalize_email,
    normalize_name,
    normalize_profile_identifier,
)
from services.similarity import name_similarity


class MatchFinder:
    """Tiered founder lookup: LinkedIn, then email, then fuzzy name.

    The first tier that finds someone wins. Name similarity is never allowed
    to override an identifier match.

    The name tier only scores founders whose normalized name contains the
    first `prefix_length` letters of the incoming first name. Nicknames
    ("Bill" vs "William") never reach scoring.
    """

    def __init__(self, store: FounderStorePort, name_threshold: int, prefix_length: int = 2) -> None:
        if not 0 <= name_threshold <= 100:
            raise ValueError("name_threshold must be between 0 and 100")
        self.store = store
        self.name_threshold = name_threshold
        self.prefix_length = max(1, prefix_length)

    def find_by_linkedin(self, url: str | None) -> StoredPerson | None:
        normalized = normalize_profile_identifier(url)
        if not normalized:
            return None
        return self.store.find_by_profile_identifier(normalized)

    def find_by_email(self, email: str | None) -> StoredPerson | None:
        normalized = normalize_email(email)
        if not normalized:
            return None
        return self.store.find_by_email(normalized)

    def find_by_name(self, name: str | None, threshold: int | None = None) -> List[Tuple[StoredPerson, int]]:
        """All founders scoring at or above threshold, best first.

        Equal scores keep the store's order (sort is stable).
        """
        normalized = normalize_name(name)
        if not normalized:
            return []
        limit = self.name_threshold if threshold is None else threshold
        key = name_prefix_key(normalized, self.prefix_length)
        scored = [
            (person, name_similarity(name, person.name))
            for person in self.store.find_candidates_by_name_prefix(key)
        ]
        matches = [(person, score) for person, score in scored if score >= limit]
        matches.sort(key=lambda pair: pair[1], reverse=True)
        return matches

    def find_match(self, record: PersonRecord, row_index: int = 0) -> MatchCandidate:
        if record.linkedin:
            person = self.find_by_linkedin(record.linkedin)
            if person:
                return MatchCandidate(
                    row_index=row_index,
                    submitted_name=record.name,
                    existing=person,
                    match_type="exact_linkedin",
                    confidence=100,
                )

        if record.email:
            person = self.find_by_email(record.email)
            if person:
                return MatchCandidate(
                    row_index=row_index,
                    submitted_name=record.name,
                    existing=person,
                    match_type="exact_email",
                    confidence=100,
                )

        matches = self.find_by_name(record.name)
        if matches:
            person, score = matches[0]
            if len(matches) > 1:
                logging.debug(
                    f"{len(matches)} name candidates for {record.name!r}; taking {person.name!r} ({score})",
                    extra={"step": "match", "row": row_index},
                )
            return MatchCandidate(
                row_index=row_index,
                submitted_name=record.name,
                existing=person,
                match_type="name_match",
                confidence=score,
            )

        return MatchCandidate(row_index=row_index, submitted_name=record.name)

    def find_duplicates(self, records: Iterable[PersonRecord]) -> List[MatchCandidate]:
        """Matched rows only, for the manual duplicate review."""
        found: List[MatchCandidate] = []
        for i, record in enumerate(records):
            candidate = self.find_match(record, row_index=i)
            if candidate.is_match:
                found.append(candidate)
        return found
