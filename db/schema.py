from __future__ import annotations

import sqlite3


def bootstrap(conn: sqlite3.Connection) -> None:
    """Create founder/company schema and indexes (idempotent)."""
    cur = conn.cursor()

    # Companies table
    cur.execute(
        (
            "CREATE TABLE IF NOT EXISTS companies (\n"
            "  id TEXT PRIMARY KEY,\n"
            "  name TEXT NOT NULL,\n"
            "  created_at TEXT NOT NULL DEFAULT (datetime('now'))\n"
            ")"
        )
    )
    # Case-insensitive exact name lookup
    cur.execute("CREATE INDEX IF NOT EXISTS idx_companies_name_lower ON companies(lower(name));")

    # Founders table
    cur.execute(
        (
            "CREATE TABLE IF NOT EXISTS founders (\n"
            "  id TEXT PRIMARY KEY,\n"
            "  name TEXT NOT NULL,\n"
            "  normalized_name TEXT NOT NULL,\n"
            "  email TEXT,\n"
            "  linkedin TEXT,\n"
            "  title TEXT,\n"
            "  bio TEXT,\n"
            "  location TEXT,\n"
            "  education TEXT,\n"
            "  experience TEXT,\n"
            "  skills_json TEXT NOT NULL DEFAULT '[]',\n"
            "  twitter TEXT,\n"
            "  github TEXT,\n"
            "  website TEXT,\n"
            "  source TEXT NOT NULL DEFAULT 'csv_upload',\n"
            "  pipeline_stage TEXT NOT NULL DEFAULT 'Screening',\n"
            "  created_at TEXT NOT NULL DEFAULT (datetime('now')),\n"
            "  updated_at TEXT NOT NULL DEFAULT (datetime('now'))\n"
            ")"
        )
    )
    cur.execute("CREATE INDEX IF NOT EXISTS idx_founders_normalized_name ON founders(normalized_name);")
    cur.execute("CREATE INDEX IF NOT EXISTS idx_founders_email ON founders(email);")

    # Founder <-> company links
    cur.execute(
        (
            "CREATE TABLE IF NOT EXISTS founder_companies (\n"
            "  id INTEGER PRIMARY KEY AUTOINCREMENT,\n"
            "  founder_id TEXT NOT NULL,\n"
            "  company_id TEXT NOT NULL,\n"
            "  role TEXT NOT NULL DEFAULT 'Founder',\n"
            "  is_primary INTEGER NOT NULL DEFAULT 0,\n"
            "  is_active INTEGER NOT NULL DEFAULT 1,\n"
            "  created_at TEXT NOT NULL DEFAULT (datetime('now')),\n"
            "  UNIQUE(founder_id, company_id),\n"
            "  FOREIGN KEY(founder_id) REFERENCES founders(id) ON DELETE CASCADE,\n"
            "  FOREIGN KEY(company_id) REFERENCES companies(id) ON DELETE CASCADE\n"
            ")"
        )
    )
    cur.execute("CREATE INDEX IF NOT EXISTS idx_founder_companies_company ON founder_companies(company_id);")

    conn.commit()
