from __future__ import annotations

from typing import List, Optional

from models import BatchOutcome, MatchCandidate


def print_summary(outcome: BatchOutcome, total_rows: Optional[int] = None, elapsed_s: Optional[float] = None) -> None:
    """Print summary of one founder import."""
    print("\n" + "=" * 60)
    print("FOUNDER IMPORT - SUMMARY")
    print("=" * 60)
    if total_rows is not None:
        print(f"Rows Submitted: {total_rows}")
    print(f"Created: {outcome.created}")
    print(f"Merged: {outcome.merged}")
    print(f"Skipped: {outcome.skipped}")
    print(f"Duplicates Found: {outcome.duplicates_found}")
    print(f"Company Links: {outcome.linked}")
    print(f"Errors: {len(outcome.errors)}")
    for err in outcome.errors:
        print(f"  {err}")
    review = [c for c in outcome.candidates if not c.is_certain]
    if review:
        print()
        print("Fuzzy matches worth a manual check:")
        for c in review:
            print(f"  {_describe(c)}")
    if elapsed_s is not None:
        print(f"Elapsed: {elapsed_s:.1f}s")
    print("=" * 60)


def _describe(c: MatchCandidate) -> str:
    existing = c.existing
    target = f"{existing.name} [{existing.id}]" if existing else "-"
    return f"Row {c.row_index + 1} ({c.submitted_name or '?'}) -> {target} {c.match_type} {c.confidence}%"


def print_duplicates(candidates: List[MatchCandidate]) -> None:
    """Print the duplicate preview: one line per row that matched something."""
    matched = [c for c in candidates if c.is_match]
    print(f"Rows checked: {len(candidates)}, duplicates found: {len(matched)}")
    for c in matched:
        print(f"  {_describe(c)}")
