from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol

from models import CompanyRef, StoredPerson


class FounderStorePort(Protocol):
    def find_by_profile_identifier(self, normalized_value: str) -> Optional[StoredPerson]:
        """Founder whose stored LinkedIn value contains `normalized_value` (case-insensitive)."""
        ...

    def find_by_email(self, lowercased_email: str) -> Optional[StoredPerson]:
        ...

    def find_candidates_by_name_prefix(self, first_token: str) -> List[StoredPerson]:
        """Founders whose normalized name contains `first_token`, in store order."""
        ...

    def create(self, fields: Dict[str, Any]) -> StoredPerson:
        ...

    def update(self, person_id: str, fields: Dict[str, Any]) -> StoredPerson:
        ...

    def get(self, person_id: str) -> Optional[StoredPerson]:
        ...


class CompanyLookupPort(Protocol):
    def find_company_by_exact_name(self, name: str) -> Optional[CompanyRef]:
        ...

    def link_person_to_company(self, person_id: str, company_id: str, role: str, is_primary: bool) -> bool:
        ...
