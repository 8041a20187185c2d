import argparse
import json
import os
import time
import uuid as _uuid
from pathlib import Path

from config.settings import get_settings
from db.connection import get_connection
from db.repos.companies_repo import CompaniesRepo
from db.repos.founders_repo import FoundersRepo
from pipelines.import_founders import check_duplicates, import_founders
from services.mapping import csv_template, load_founder_rows
from services.matcher import MatchFinder
from services.reporting import print_duplicates, print_summary
from utils.logging_setup import init_logging


def _open(args):
    return get_connection(args.db, bootstrap=True)


def cmd_bootstrap(args):
    _open(args)
    print("Schema ready")


def cmd_add_company(args):
    conn = _open(args)
    company_id = CompaniesRepo(conn).upsert_company(args.name)
    print(json.dumps({"id": company_id, "name": args.name.strip()}))


def cmd_check_duplicates(args):
    conn = _open(args)
    rows = load_founder_rows(args.input)
    candidates = check_duplicates(conn, rows, name_threshold=args.threshold)
    if args.json:
        print(json.dumps([c.model_dump() for c in candidates if c.is_match], indent=2, ensure_ascii=False))
        return
    print_duplicates(candidates)


def cmd_import(args):
    settings = get_settings()
    if not os.getenv("RUN_ID"):
        os.environ["RUN_ID"] = _uuid.uuid4().hex
    conn = _open(args)
    rows = load_founder_rows(args.input)
    decisions = {}
    if args.decisions:
        decisions = json.loads(Path(args.decisions).read_text(encoding="utf-8"))
        if not isinstance(decisions, dict):
            raise SystemExit("Decisions file must be a JSON object of {row_index: merge|new|skip}")
    started = time.monotonic()
    outcome = import_founders(
        conn,
        rows,
        decisions,
        name_threshold=args.threshold,
        chunk_size=args.chunk_size or settings.import_chunk_size,
        primary_link=not args.no_primary,
    )
    if args.json:
        payload = outcome.model_dump(exclude={"candidates"})
        payload["errors"] = [str(e) for e in outcome.errors]
        payload["duplicates_found"] = outcome.duplicates_found
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return
    print_summary(outcome, total_rows=len(rows), elapsed_s=time.monotonic() - started)


def cmd_search_name(args):
    settings = get_settings()
    conn = _open(args)
    finder = MatchFinder(FoundersRepo(conn), name_threshold=args.threshold, prefix_length=settings.name_prefix_length)
    out = [
        {"id": person.id, "name": person.name, "email": person.email, "linkedin": person.linkedin, "similarity": score}
        for person, score in finder.find_by_name(args.name)
    ]
    print(json.dumps(out, indent=2, ensure_ascii=False))


def cmd_report_founder(args):
    conn = _open(args)
    repo = FoundersRepo(conn)
    finder = MatchFinder(repo, name_threshold=100)
    person = finder.find_by_linkedin(args.linkedin) if args.linkedin else finder.find_by_email(args.email)
    if not person:
        print("No founder found")
        return
    result = person.model_dump()
    result["companies"] = CompaniesRepo(conn).links_for_person(person.id)
    print(json.dumps(result, indent=2, ensure_ascii=False))


def cmd_csv_template(args):
    print(csv_template(), end="")


def main():
    settings = get_settings()
    init_logging(settings.log_level)
    parser = argparse.ArgumentParser(description="Founder import and duplicate resolution CLI")
    parser.add_argument("--db", default=settings.db_path, help="Path to SQLite DB (default from settings)")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_boot = sub.add_parser("bootstrap", help="Create tables and indexes")
    p_boot.set_defaults(func=cmd_bootstrap)

    p_co = sub.add_parser("add-company", help="Register a company founders can be linked to")
    p_co.add_argument("--name", required=True)
    p_co.set_defaults(func=cmd_add_company)

    p_chk = sub.add_parser("check-duplicates", help="Preview which rows match existing founders (no writes)")
    p_chk.add_argument("--input", required=True, help="Path to CSV or JSON file")
    p_chk.add_argument("--threshold", type=int, default=settings.name_match_threshold, help="Fuzzy name threshold 0-100")
    p_chk.add_argument("--json", action="store_true", help="Print matches as JSON")
    p_chk.set_defaults(func=cmd_check_duplicates)

    p_imp = sub.add_parser("import", help="Import founders, merging duplicates")
    p_imp.add_argument("--input", required=True, help="Path to CSV or JSON file")
    p_imp.add_argument("--decisions", help="JSON file mapping row index to merge|new|skip")
    p_imp.add_argument("--threshold", type=int, default=settings.name_match_threshold, help="Fuzzy name threshold 0-100")
    p_imp.add_argument("--chunk-size", type=int, default=None, help="Rows per chunk (default from settings)")
    p_imp.add_argument("--no-primary", action="store_true", help="Do not mark company links as primary")
    p_imp.add_argument("--json", action="store_true", help="Print the outcome as JSON")
    p_imp.set_defaults(func=cmd_import)

    p_sn = sub.add_parser("search-name", help="List stored founders with a similar name")
    p_sn.add_argument("--name", required=True)
    p_sn.add_argument("--threshold", type=int, default=settings.name_match_threshold)
    p_sn.set_defaults(func=cmd_search_name)

    p_rf = sub.add_parser("report-founder", help="Show a founder and their companies")
    g = p_rf.add_mutually_exclusive_group(required=True)
    g.add_argument("--linkedin", help="LinkedIn profile URL")
    g.add_argument("--email")
    p_rf.set_defaults(func=cmd_report_founder)

    p_tpl = sub.add_parser("csv-template", help="Print a CSV template for founder imports")
    p_tpl.set_defaults(func=cmd_csv_template)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
