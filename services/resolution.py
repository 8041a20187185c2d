from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Optional, Union, get_args

from models import MatchCandidate, PersonRecord
from services.errors import ValidationError


Decision = Literal["merge", "new", "skip"]

DEFAULT_DECISION: Decision = "merge"


@dataclass(frozen=True)
class CreateNew:
    name: str = "create"


@dataclass(frozen=True)
class UpdateExisting:
    person_id: str
    name: str = "update"


@dataclass(frozen=True)
class Skip:
    person_id: str
    name: str = "skip"


Action = Union[CreateNew, UpdateExisting, Skip]


def parse_decision(value: Any) -> Optional[Decision]:
    """Validate a caller-supplied decision. None and "" mean no decision."""
    if value is None:
        return None
    text = str(value).strip().lower()
    if not text:
        return None
    if text not in get_args(Decision):
        raise ValidationError(f"Unknown duplicate decision: {value!r} (expected merge, new or skip)")
    return text  # type: ignore[return-value]


def resolve(
    candidate: MatchCandidate,
    decision: Optional[Decision] = None,
    record: Optional[PersonRecord] = None,
) -> Action:
    """Map a match result plus an optional human decision to an action.

    Without a match the only possible action is to create, whatever the
    decision says. With a match and no decision, merge.
    """
    if not candidate.is_match or candidate.existing is None:
        return CreateNew()

    chosen = decision or DEFAULT_DECISION
    if chosen == "new":
        return CreateNew()
    if chosen == "skip":
        return Skip(candidate.existing.id)
    return UpdateExisting(candidate.existing.id)
