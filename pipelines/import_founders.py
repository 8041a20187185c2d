from __future__ import annotations

import sqlite3
from typing import Any, Iterable, List, Mapping, Optional

from config.settings import Settings, get_settings
from db.repos.companies_repo import CompaniesRepo
from db.repos.founders_repo import FoundersRepo
from models import BatchOutcome, MatchCandidate
from pipelines.runner import Pipeline, RunContext
from pipelines.steps.import_founders import ImportFounders
from pipelines.steps.preview_duplicates import PreviewDuplicates
from pipelines.steps.validate_founders import ValidateFounders


def import_founders(
    conn: sqlite3.Connection,
    records: Iterable[Any],
    decisions: Optional[Mapping[Any, Any]] = None,
    *,
    name_threshold: Optional[int] = None,
    chunk_size: Optional[int] = None,
    primary_link: bool = True,
    settings: Optional[Settings] = None,
) -> BatchOutcome:
    """Run the cleaning + import pipeline against a SQLite founder store."""
    settings = settings or get_settings()
    importer = ImportFounders(
        FoundersRepo(conn),
        CompaniesRepo(conn),
        name_threshold=settings.name_match_threshold if name_threshold is None else name_threshold,
        chunk_size=chunk_size or settings.import_chunk_size,
        prefix_length=settings.name_prefix_length,
        primary_link=primary_link,
        source=settings.import_source,
        pipeline_stage=settings.import_pipeline_stage,
        default_role=settings.default_founder_role,
    )
    ctx = RunContext(people=list(records), decisions=dict(decisions or {}))
    ctx = Pipeline([ValidateFounders(), importer]).run(ctx)
    return ctx.outcome  # type: ignore[return-value]


def check_duplicates(
    conn: sqlite3.Connection,
    records: Iterable[Any],
    *,
    name_threshold: Optional[int] = None,
    settings: Optional[Settings] = None,
) -> List[MatchCandidate]:
    """One MatchCandidate per row, without writing anything."""
    settings = settings or get_settings()
    preview = PreviewDuplicates(
        FoundersRepo(conn),
        name_threshold=settings.name_match_threshold if name_threshold is None else name_threshold,
        prefix_length=settings.name_prefix_length,
    )
    ctx = RunContext(people=list(records))
    ctx = Pipeline([ValidateFounders(), preview]).run(ctx)
    return list(ctx.candidates)
