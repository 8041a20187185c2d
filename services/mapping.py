from __future__ import annotations

import csv
import io
import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple


# field -> header fragments, checked in order; first matching header wins
_HEADER_PATTERNS: List[Tuple[str, Tuple[str, ...]]] = [
    ("name", ("founder name", "full name", "name", "founder", "person")),
    ("email", ("email", "e-mail", "mail")),
    ("linkedin", ("linkedin", "linked in")),
    ("title", ("job title", "title", "position", "designation")),
    ("education", ("education", "degree", "school", "university", "college")),
    ("experience", ("experience", "background", "work history", "previous")),
    ("bio", ("bio", "about", "summary", "description")),
    ("location", ("location", "city", "country", "address", "based in")),
    ("twitter", ("twitter", "x.com")),
    ("github", ("github", "git hub")),
    ("website", ("website", "personal site", "url", "web")),
    ("skills", ("skills", "expertise", "specialties", "tags")),
    ("company_name", ("company", "startup", "organization", "firm")),
    ("role", ("role", "founder type", "position type")),
]

TEMPLATE_HEADERS = [
    "Name", "Email", "LinkedIn URL", "Title", "Education", "Experience", "Bio",
    "Location", "Skills", "Company Name", "Role", "Twitter", "GitHub", "Website",
]

_TEMPLATE_SAMPLE = [
    "John Smith", "john@example.com", "https://linkedin.com/in/johnsmith", "CEO",
    "Stanford MBA 2015", "Ex-Google PM, 5 years", "Serial entrepreneur with 2 exits",
    "San Francisco, CA", "AI, Product Management, Strategy", "TechCorp Inc", "Co-Founder",
    "https://twitter.com/johnsmith", "https://github.com/johnsmith", "https://johnsmith.com",
]


def _header_allowed(field: str, header: str) -> bool:
    if field == "name":
        return "company" not in header
    if field == "website":
        return "linkedin" not in header and not header.endswith(("twitter url", "github url"))
    if field == "role":
        return "revenue" not in header
    return True


def suggest_mapping(headers: Sequence[str]) -> Dict[str, str]:
    """Guess which CSV header feeds which founder field. Each header is used once."""
    normalized = [h.lower().strip() for h in headers]
    mapping: Dict[str, str] = {}
    used: set[int] = set()
    for field, patterns in _HEADER_PATTERNS:
        for i, header in enumerate(normalized):
            if i in used or not _header_allowed(field, header):
                continue
            if any(p in header for p in patterns):
                mapping[field] = headers[i]
                used.add(i)
                break
    return mapping


def parse_csv_text(text: str) -> Tuple[List[str], List[List[str]]]:
    """Split CSV text into headers and non-blank rows (quoted commas/newlines allowed)."""
    reader = csv.reader(io.StringIO(text))
    rows = [[cell.strip() for cell in row] for row in reader if any(cell.strip() for cell in row)]
    if not rows:
        return [], []
    return rows[0], rows[1:]


def map_rows(headers: Sequence[str], rows: Sequence[Sequence[str]], mapping: Dict[str, str]) -> List[Dict[str, Any]]:
    """Turn CSV rows into founder dicts using a field -> header mapping.

    Rows without a name value are kept so the importer can report them.
    """
    index = {h: i for i, h in enumerate(headers)}
    records: List[Dict[str, Any]] = []
    for row in rows:
        record: Dict[str, Any] = {}
        for field, header in mapping.items():
            i = index.get(header)
            if i is None or i >= len(row):
                continue
            value = row[i].strip()
            if value:
                record[field] = value
        records.append(record)
    return records


def parse_founders_csv(text: str, mapping: Optional[Dict[str, str]] = None) -> List[Dict[str, Any]]:
    headers, rows = parse_csv_text(text)
    if not headers:
        return []
    mapping = mapping or suggest_mapping(headers)
    if "name" not in mapping:
        raise ValueError("Could not find a name column in the CSV header")
    return map_rows(headers, rows, mapping)


def load_founder_rows(path: str | Path, mapping: Optional[Dict[str, str]] = None) -> List[Dict[str, Any]]:
    """Read founder rows from a .csv file or a JSON array / {"founders": [...]} object."""
    p = Path(path)
    text = p.read_text(encoding="utf-8-sig")
    if p.suffix.lower() == ".csv":
        return parse_founders_csv(text, mapping)
    data = json.loads(text)
    if isinstance(data, dict):
        data = data.get("founders") or data.get("profiles") or []
    if not isinstance(data, list):
        raise ValueError("JSON input must be an array of founders or an object with a 'founders' array")
    return data


def csv_template() -> str:
    out = io.StringIO()
    writer = csv.writer(out, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(TEMPLATE_HEADERS)
    writer.writerow(_TEMPLATE_SAMPLE)
    return out.getvalue()
