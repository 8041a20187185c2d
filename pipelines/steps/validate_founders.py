from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Mapping

from models import PersonRecord
from pipelines.runner import RunContext


_EMAIL_RE = re.compile(r"^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")

# Alternate spellings seen in exported spreadsheets and form payloads
_KEY_ALIASES = {
    "full_name": "name",
    "founder_name": "name",
    "contact_name": "name",
    "linkedin_url": "linkedin",
    "linkedin_profile": "linkedin",
    "linkedIn": "linkedin",
    "company": "company_name",
    "companyName": "company_name",
    "position": "title",
}


class ValidateFounders:
    """Light cleaning of raw founder rows before import.

    Rows are never dropped here: a row without a usable name stays in place so
    the importer can report it against its original row index.
    """

    def clean_row(self, row: Any) -> Any:
        if isinstance(row, PersonRecord) or not isinstance(row, Mapping):
            return row
        cleaned: Dict[str, Any] = {}
        for key, value in row.items():
            target = _KEY_ALIASES.get(key, key)
            if isinstance(value, str):
                value = re.sub(r"\s+", " ", value).strip()
            # First non-empty value wins when aliases collide
            if cleaned.get(target) in (None, ""):
                cleaned[target] = value
        return cleaned

    def warnings_for(self, row: Any) -> List[str]:
        warnings: List[str] = []
        email = row.email if isinstance(row, PersonRecord) else (row.get("email") if isinstance(row, Mapping) else None)
        if email and not _EMAIL_RE.match(str(email).strip()):
            warnings.append("Email format looks invalid")
        return warnings

    def run(self, ctx: RunContext) -> RunContext:
        cleaned = [self.clean_row(p) for p in (ctx.people or [])]
        flagged = 0
        for i, row in enumerate(cleaned):
            warnings = self.warnings_for(row)
            if warnings:
                flagged += 1
                logging.warning(f"Row {i + 1} has warnings: {warnings}", extra={"step": "validate_founders", "row": i})
        ctx.people = cleaned
        ctx.meta["validation_warnings"] = flagged
        return ctx
