from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from models.stored_person import StoredPerson


MatchType = Literal["exact_linkedin", "exact_email", "name_match", "none"]


class MatchCandidate(BaseModel):
    """Result of running the tiered lookup for one incoming row."""

    row_index: int
    submitted_name: str | None = None
    existing: StoredPerson | None = None
    match_type: MatchType = "none"
    confidence: int = Field(default=0, ge=0, le=100)

    model_config = ConfigDict(frozen=True)

    @property
    def is_match(self) -> bool:
        return self.existing is not None and self.match_type != "none"

    @property
    def is_certain(self) -> bool:
        return self.is_match and self.confidence == 100
