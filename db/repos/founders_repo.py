from __future__ import annotations

import json
import sqlite3
import uuid
from typing import Any, Dict, List, Optional, Tuple

from models import StoredPerson
from services.errors import StoreError
from services.normalize import normalize_email, normalize_name


_COLUMNS = (
    "id", "name", "normalized_name", "email", "linkedin", "title", "bio", "location",
    "education", "experience", "skills_json", "twitter", "github", "website",
    "source", "pipeline_stage", "created_at", "updated_at",
)

# Columns a caller may write through create/update
_WRITABLE = (
    "name", "email", "linkedin", "title", "bio", "location", "education",
    "experience", "skills", "twitter", "github", "website", "source", "pipeline_stage",
)

_SELECT = f"SELECT {', '.join(_COLUMNS)} FROM founders"


def _row_to_person(row: Tuple) -> StoredPerson:
    data = dict(zip(_COLUMNS, row))
    try:
        data["skills"] = json.loads(data.pop("skills_json") or "[]")
    except ValueError:
        data["skills"] = []
    return StoredPerson(**data)


def _column_values(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Whitelist fields and map them to column values."""
    values: Dict[str, Any] = {}
    for key in _WRITABLE:
        if key not in fields or fields[key] is None:
            continue
        value = fields[key]
        if key == "skills":
            values["skills_json"] = json.dumps(list(value), ensure_ascii=False)
        elif key == "email":
            values["email"] = normalize_email(value)
        elif key == "name":
            name = str(value).strip()
            values["name"] = name
            values["normalized_name"] = normalize_name(name)
        else:
            values[key] = value
    return values


class FoundersRepo:
    """SQLite implementation of the founder store port."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def _fetch_one(self, where: str, params: Tuple) -> Optional[StoredPerson]:
        try:
            cur = self.conn.cursor()
            cur.execute(f"{_SELECT} WHERE {where} ORDER BY rowid LIMIT 1", params)
            row = cur.fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Founder lookup failed: {e}") from e
        return _row_to_person(row) if row else None

    def get(self, person_id: str) -> Optional[StoredPerson]:
        return self._fetch_one("id = ?", (person_id,))

    def find_by_profile_identifier(self, normalized_value: str) -> Optional[StoredPerson]:
        """Substring match so values stored with a scheme/host prefix still hit."""
        if not normalized_value:
            return None
        return self._fetch_one(
            "linkedin IS NOT NULL AND instr(lower(linkedin), ?) > 0",
            (normalized_value.lower(),),
        )

    def find_by_email(self, lowercased_email: str) -> Optional[StoredPerson]:
        email = normalize_email(lowercased_email)
        if not email:
            return None
        return self._fetch_one("lower(email) = ?", (email,))

    def find_candidates_by_name_prefix(self, first_token: str) -> List[StoredPerson]:
        if not first_token:
            return []
        try:
            cur = self.conn.cursor()
            cur.execute(
                f"{_SELECT} WHERE instr(normalized_name, ?) > 0 ORDER BY rowid",
                (first_token.lower(),),
            )
            rows = cur.fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"Founder name lookup failed: {e}") from e
        return [_row_to_person(r) for r in rows]

    def create(self, fields: Dict[str, Any]) -> StoredPerson:
        values = _column_values(fields)
        if not values.get("name"):
            raise StoreError("Cannot create a founder without a name")
        values["id"] = uuid.uuid4().hex
        columns = list(values.keys())
        sql = (
            f"INSERT INTO founders ({', '.join(columns)}) "
            f"VALUES ({', '.join('?' for _ in columns)})"
        )
        try:
            self.conn.execute(sql, tuple(values[c] for c in columns))
            self.conn.commit()
        except sqlite3.Error as e:
            self.conn.rollback()
            raise StoreError(f"Founder insert failed: {e}") from e
        created = self.get(values["id"])
        if created is None:
            raise StoreError("Founder insert did not persist")
        return created

    def update(self, person_id: str, fields: Dict[str, Any]) -> StoredPerson:
        """Overwrite the given non-null fields; everything else is kept."""
        values = _column_values(fields)
        if "name" in values and not values["name"]:
            raise StoreError("Cannot rename a founder to an empty name")
        assignments = [f"{col} = ?" for col in values]
        assignments.append("updated_at = datetime('now')")
        sql = f"UPDATE founders SET {', '.join(assignments)} WHERE id = ?"
        try:
            cur = self.conn.execute(sql, (*values.values(), person_id))
            if cur.rowcount == 0:
                raise StoreError(f"Founder {person_id} not found")
            self.conn.commit()
        except sqlite3.Error as e:
            self.conn.rollback()
            raise StoreError(f"Founder update failed: {e}") from e
        updated = self.get(person_id)
        if updated is None:
            raise StoreError(f"Founder {person_id} not found")
        return updated

    def count(self) -> int:
        cur = self.conn.cursor()
        cur.execute("SELECT COUNT(*) FROM founders")
        return int(cur.fetchone()[0])
