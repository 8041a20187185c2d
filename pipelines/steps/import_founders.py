from __future__ import annotations

import logging
import time
from itertools import islice
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from models import BatchOutcome, MatchCandidate, PersonRecord
from pipelines.runner import RunContext
from ports.repos import CompanyLookupPort, FounderStorePort
from services.errors import ValidationError
from services.matcher import MatchFinder
from services.resolution import Action, CreateNew, Skip, UpdateExisting, parse_decision, resolve
from utils.decision_log import log_decision


def _chunks(rows: Iterable[Any], size: int) -> Iterator[Tuple[int, List[Any]]]:
    """Yield (start_index, rows) slices without materializing the whole input."""
    it = iter(rows)
    start = 0
    while True:
        chunk = list(islice(it, size))
        if not chunk:
            return
        yield start, chunk
        start += len(chunk)


def _submitted_name(raw: Any) -> Optional[str]:
    if isinstance(raw, PersonRecord):
        return raw.name
    if isinstance(raw, Mapping):
        value = raw.get("name")
        return str(value) if value is not None else None
    return None


def coerce_decisions(decisions: Optional[Mapping[Any, Any]]) -> Dict[int, Any]:
    """Accept {row_index: decision} with int or numeric-string keys (JSON payloads).

    Keys that are not row indexes are dropped with a warning; those rows fall
    back to the default decision.
    """
    coerced: Dict[int, Any] = {}
    for key, value in (decisions or {}).items():
        try:
            coerced[int(key)] = value
        except (TypeError, ValueError):
            logging.warning(
                f"Ignoring decision {value!r}: key {key!r} is not a row index",
                extra={"step": "import_founders", "status": "bad_decision_key"},
            )
    return coerced


class ImportFounders:
    """Batch importer: match, resolve and persist founder rows one at a time.

    Rows run strictly in order and every write is committed before the next
    lookup, so a later row can match a founder created earlier in the same
    batch. A failing row is recorded in the outcome and never stops the batch.
    """

    def __init__(
        self,
        store: FounderStorePort,
        companies: CompanyLookupPort,
        name_threshold: int,
        chunk_size: int = 50,
        prefix_length: int = 2,
        primary_link: bool = True,
        source: str = "csv_upload",
        pipeline_stage: str = "Screening",
        default_role: str = "Founder",
        on_processed: Optional[Callable[[int], None]] = None,
    ) -> None:
        if chunk_size < 1:
            raise ValueError("chunk_size must be at least 1")
        self.store = store
        self.companies = companies
        self.finder = MatchFinder(store, name_threshold=name_threshold, prefix_length=prefix_length)
        self.chunk_size = chunk_size
        self.primary_link = primary_link
        self.source = source
        self.pipeline_stage = pipeline_stage
        self.default_role = default_role
        self.on_processed = on_processed

    @staticmethod
    def _coerce(raw: Any) -> PersonRecord:
        if isinstance(raw, PersonRecord):
            return raw
        if not isinstance(raw, Mapping):
            raise ValidationError(f"Row must be an object, got {type(raw).__name__}")
        try:
            return PersonRecord.model_validate(dict(raw))
        except PydanticValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(p) for p in first.get("loc", ())) or "row"
            raise ValidationError(f"Invalid {field}: {first.get('msg')}") from e

    @staticmethod
    def _validate(record: PersonRecord) -> None:
        # Names without Latin letters are valid; they only skip the fuzzy name tier
        if not record.name:
            raise ValidationError("Name is required")

    def _apply(self, action: Action, record: PersonRecord, outcome: BatchOutcome) -> Optional[str]:
        """Execute the action; returns the founder id to link, None for skips."""
        if isinstance(action, Skip):
            outcome.skipped += 1
            return None
        fields = record.to_fields()
        if isinstance(action, UpdateExisting):
            # The stored display name is the identity being merged into
            fields.pop("name", None)
            person = self.store.update(action.person_id, fields)
            outcome.merged += 1
            return person.id
        fields["source"] = self.source
        fields["pipeline_stage"] = self.pipeline_stage
        person = self.store.create(fields)
        outcome.created += 1
        return person.id

    def _link_company(self, row_index: int, person_id: str, record: PersonRecord, outcome: BatchOutcome) -> None:
        company = self.companies.find_company_by_exact_name(record.company_name or "")
        if company is None:
            logging.info(
                f"No company named {record.company_name!r}; founder left unlinked",
                extra={"step": "link_company", "status": "not_found", "row": row_index},
            )
            return
        role = record.role or self.default_role
        if self.companies.link_person_to_company(person_id, company.id, role, self.primary_link):
            outcome.linked += 1

    def process_row(self, row_index: int, raw: Any, raw_decision: Any, outcome: BatchOutcome) -> None:
        submitted = _submitted_name(raw)
        candidate: Optional[MatchCandidate] = None
        action: Optional[Action] = None
        try:
            record = self._coerce(raw)
            self._validate(record)
            decision = parse_decision(raw_decision)
            candidate = self.finder.find_match(record, row_index=row_index)
            action = resolve(candidate, decision, record)
            person_id = self._apply(action, record, outcome)
        except Exception as e:
            err = outcome.add_error(row_index, submitted, str(e))
            logging.warning(
                str(err),
                extra={"step": "import_founders", "status": "error", "row": row_index, "error": type(e).__name__},
            )
            log_decision(
                row_index=row_index,
                submitted_name=submitted,
                match_type=candidate.match_type if candidate else "none",
                confidence=candidate.confidence if candidate else 0,
                action=action.name if action else "error",
                status="error",
                error=str(e),
            )
            return

        if candidate.is_match:
            outcome.candidates.append(candidate)
        log_decision(
            row_index=row_index,
            submitted_name=submitted,
            match_type=candidate.match_type,
            confidence=candidate.confidence,
            action=action.name,
            person_id=person_id or (action.person_id if isinstance(action, Skip) else None),
        )

        if person_id and record.company_name:
            # The founder write stays committed even if linking fails
            try:
                self._link_company(row_index, person_id, record, outcome)
            except Exception as e:
                err = outcome.add_error(row_index, submitted, f"Company link failed: {e}")
                logging.warning(
                    str(err),
                    extra={"step": "link_company", "status": "error", "row": row_index, "error": type(e).__name__},
                )

    def import_batch(self, records: Iterable[Any], decisions: Optional[Mapping[Any, Any]] = None) -> BatchOutcome:
        decision_map = coerce_decisions(decisions)
        outcome = BatchOutcome()
        started = time.monotonic()
        processed = 0
        for start, chunk in _chunks(records, self.chunk_size):
            logging.debug(
                f"Importing rows {start + 1}-{start + len(chunk)}",
                extra={"step": "import_founders", "status": "chunk"},
            )
            for offset, raw in enumerate(chunk):
                row_index = start + offset
                self.process_row(row_index, raw, decision_map.get(row_index), outcome)
                processed += 1
                if self.on_processed:
                    try:
                        self.on_processed(processed)
                    except Exception as e:
                        # Progress callbacks never abort the batch
                        logging.debug(
                            f"Progress callback failed: {e}",
                            extra={"step": "import_founders", "status": "callback_error"},
                        )
        duration_ms = int((time.monotonic() - started) * 1000)
        logging.info(
            f"Founder import finished: {outcome.created} created, {outcome.merged} merged, "
            f"{outcome.skipped} skipped, {outcome.linked} linked, {len(outcome.errors)} errors",
            extra={"step": "import_founders", "status": "ok", "duration_ms": duration_ms},
        )
        return outcome

    def run(self, ctx: RunContext) -> RunContext:
        outcome = self.import_batch(ctx.people or [], ctx.decisions)
        ctx.outcome = outcome
        ctx.candidates = list(outcome.candidates)
        ctx.meta["created"] = outcome.created
        ctx.meta["merged"] = outcome.merged
        ctx.meta["skipped"] = outcome.skipped
        ctx.meta["linked"] = outcome.linked
        ctx.meta["errors"] = len(outcome.errors)
        return ctx
