from __future__ import annotations

from pydantic import BaseModel, Field

from models.match_candidate import MatchCandidate


class RowError(BaseModel):
    row_index: int
    submitted_name: str | None = None
    message: str

    def __str__(self) -> str:
        return f"Row {self.row_index + 1} ({self.submitted_name or '?'}): {self.message}"


class BatchOutcome(BaseModel):
    """Aggregated result of one import call."""

    created: int = 0
    merged: int = 0
    skipped: int = 0
    linked: int = 0
    errors: list[RowError] = Field(default_factory=list)
    # Rows that matched an existing founder, kept for manual review
    candidates: list[MatchCandidate] = Field(default_factory=list)

    @property
    def duplicates_found(self) -> int:
        return self.merged + self.skipped

    @property
    def processed(self) -> int:
        return self.created + self.merged + self.skipped

    def add_error(self, row_index: int, submitted_name: str | None, message: str) -> RowError:
        err = RowError(row_index=row_index, submitted_name=submitted_name, message=message)
        self.errors.append(err)
        return err
