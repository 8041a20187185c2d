from __future__ import annotations

from typing import Any, Iterable, List

from pydantic import ValidationError as PydanticValidationError

from models import MatchCandidate, PersonRecord
from pipelines.runner import RunContext
from ports.repos import FounderStorePort
from services.matcher import MatchFinder


class PreviewDuplicates:
    """Dry-run of the import lookup: one MatchCandidate per row, nothing written.

    Unlike an import, rows in the same payload cannot match each other here
    because nothing is committed.
    """

    def __init__(self, store: FounderStorePort, name_threshold: int, prefix_length: int = 2) -> None:
        self.finder = MatchFinder(store, name_threshold=name_threshold, prefix_length=prefix_length)

    def preview(self, records: Iterable[Any]) -> List[MatchCandidate]:
        candidates: List[MatchCandidate] = []
        for i, raw in enumerate(records):
            try:
                record = raw if isinstance(raw, PersonRecord) else PersonRecord.model_validate(dict(raw))
            except (PydanticValidationError, TypeError, ValueError):
                # The import will report this row; nothing to match against
                candidates.append(MatchCandidate(row_index=i))
                continue
            candidates.append(self.finder.find_match(record, row_index=i))
        return candidates

    def run(self, ctx: RunContext) -> RunContext:
        candidates = self.preview(ctx.people or [])
        ctx.candidates = candidates
        ctx.meta["total_rows"] = len(candidates)
        ctx.meta["duplicates_found"] = sum(1 for c in candidates if c.is_match)
        return ctx
