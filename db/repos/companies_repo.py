from __future__ import annotations

import logging
import sqlite3
import uuid
from typing import Any, Dict, List, Optional

from models import CompanyRef
from services.errors import StoreError


class CompaniesRepo:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def upsert_company(self, name: str) -> str:
        """Return the id of the company with this name (case-insensitive), inserting it if missing."""
        clean = (name or "").strip()
        if not clean:
            raise StoreError("Company name is required")
        existing = self.find_company_by_exact_name(clean)
        if existing:
            return existing.id
        company_id = uuid.uuid4().hex
        try:
            self.conn.execute("INSERT INTO companies (id, name) VALUES (?, ?)", (company_id, clean))
            self.conn.commit()
        except sqlite3.Error as e:
            self.conn.rollback()
            raise StoreError(f"Company insert failed: {e}") from e
        return company_id

    def find_company_by_exact_name(self, name: str) -> Optional[CompanyRef]:
        clean = (name or "").strip()
        if not clean:
            return None
        try:
            cur = self.conn.cursor()
            cur.execute(
                "SELECT id, name FROM companies WHERE lower(name) = lower(?) ORDER BY rowid LIMIT 1",
                (clean,),
            )
            row = cur.fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Company lookup failed: {e}") from e
        return CompanyRef(id=row[0], name=row[1]) if row else None

    def link_person_to_company(self, person_id: str, company_id: str, role: str = "Founder", is_primary: bool = False) -> bool:
        """Create the founder/company link, or refresh role and primary flag if it exists.

        Returns False instead of raising when the write fails.
        """
        try:
            cur = self.conn.cursor()
            cur.execute(
                "SELECT id FROM founder_companies WHERE founder_id = ? AND company_id = ?",
                (person_id, company_id),
            )
            row = cur.fetchone()
            if row:
                cur.execute(
                    "UPDATE founder_companies SET role = ?, is_primary = ?, is_active = 1 WHERE id = ?",
                    (role, 1 if is_primary else 0, row[0]),
                )
            else:
                cur.execute(
                    "INSERT INTO founder_companies (founder_id, company_id, role, is_primary, is_active) "
                    "VALUES (?, ?, ?, ?, 1)",
                    (person_id, company_id, role, 1 if is_primary else 0),
                )
            self.conn.commit()
            return True
        except sqlite3.Error as e:
            self.conn.rollback()
            logging.error(
                f"Linking founder {person_id} to company {company_id} failed: {e}",
                extra={"step": "link_company", "status": "error", "error": type(e).__name__},
            )
            return False

    def links_for_person(self, person_id: str) -> List[Dict[str, Any]]:
        cur = self.conn.cursor()
        cur.execute(
            "SELECT c.id, c.name, l.role, l.is_primary, l.is_active "
            "FROM founder_companies l JOIN companies c ON c.id = l.company_id "
            "WHERE l.founder_id = ? ORDER BY l.id",
            (person_id,),
        )
        return [
            {
                "company_id": r[0],
                "company_name": r[1],
                "role": r[2],
                "is_primary": bool(r[3]),
                "is_active": bool(r[4]),
            }
            for r in cur.fetchall()
        ]
