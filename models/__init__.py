from .person_record import PersonRecord
from .stored_person import StoredPerson
from .company_record import CompanyRef
from .match_candidate import MatchCandidate, MatchType
from .batch_outcome import BatchOutcome, RowError

__all__ = [
    "PersonRecord",
    "StoredPerson",
    "CompanyRef",
    "MatchCandidate",
    "MatchType",
    "BatchOutcome",
    "RowError",
]
