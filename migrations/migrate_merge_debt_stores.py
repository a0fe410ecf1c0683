#!/usr/bin/env python3
"""Migration script to merge the legacy receivable/payable tables.

Older databases kept each lifecycle state in its own table:
- debts_active   → status "Active"
- debts_settled  → status "Settled"
- debts_bad      → status "BadDebt"

Moving a record between them was a copy followed by a delete, so an
interrupted move could leave the same record in two tables (duplicated) or
in none (lost, which cannot be detected here). This migration copies every
legacy row into the single debt_records table with a status column and
drops the legacy tables, all in one transaction.

A record found in more than one legacy table is migrated once, keeping the
state it was being moved into (Settled, then BadDebt, then Active), and is
reported so an operator can check it. A move that gave the copy a new id
cannot be told apart from a genuine second record, so rows whose content
matches an earlier row are migrated but reported as likely duplicates.

Usage:
    python migrations/migrate_merge_debt_stores.py [--db-path PATH]
"""

import sys
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path

# Add src to path so we can import ledgerbook modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sqlalchemy import inspect, text
from ledgerbook.database.factories import create_sqlite_database
from ledgerbook.utils.date_parser import parse_stored_date

# Highest precedence first
LEGACY_TABLES = (
    ("debts_settled", "Settled"),
    ("debts_bad", "BadDebt"),
    ("debts_active", "Active"),
)

COPIED_COLUMNS = (
    "name",
    "nationality",
    "description",
    "date",
    "particulars",
    "main_category",
    "sub_category",
    "debit",
    "credit",
    "due_date",
    "notes",
)

# Columns compared to spot a copy that was given a new id
CONTENT_COLUMNS = ("name", "date", "main_category", "sub_category", "debit", "credit")


@dataclass
class MergeReport:
    """Outcome of merging the legacy tables."""

    migrated: dict[str, int] = field(default_factory=dict)
    duplicated: dict[str, list[str]] = field(default_factory=dict)
    # (legacy id, status) of a migrated row -> (legacy id, status) of the earlier match
    likely_duplicated: dict[tuple[str, str], tuple[str, str]] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.migrated.values())


def content_key(row) -> tuple:
    """Key of the fields that identify a record regardless of its legacy id."""
    return tuple(
        Decimal(str(row[column] or 0)) if column in ("debit", "credit") else row[column]
        for column in CONTENT_COLUMNS
    )


def table_exists(engine, table_name: str) -> bool:
    """Check if a table exists.

    Args:
        engine: SQLAlchemy engine
        table_name: Name of the table

    Returns:
        True if table exists, False otherwise
    """
    return table_name in inspect(engine).get_table_names()


def merge_debt_stores(engine) -> MergeReport:
    """Copy legacy debt rows into debt_records and drop the legacy tables.

    Args:
        engine: SQLAlchemy engine with debt_records already created

    Returns:
        MergeReport with per-status counts and duplicated legacy ids
    """
    report = MergeReport()
    present = [(table, status) for table, status in LEGACY_TABLES if table_exists(engine, table)]
    if not present:
        return report

    seen: dict[str, str] = {}
    seen_content: dict[tuple, tuple[str, str]] = {}
    column_list = ", ".join(COPIED_COLUMNS)
    placeholders = ", ".join(f":{column}" for column in COPIED_COLUMNS)

    with engine.begin() as conn:
        for table, status in present:
            available = {col["name"] for col in inspect(conn).get_columns(table)}
            select_columns = ", ".join(
                column if column in available else f"NULL AS {column}" for column in COPIED_COLUMNS
            )
            rows = conn.execute(text(f"SELECT id, {select_columns} FROM {table} ORDER BY id")).mappings().all()

            migrated = 0
            for row in rows:
                legacy_id = str(row["id"])
                if legacy_id in seen:
                    report.duplicated.setdefault(legacy_id, [seen[legacy_id]]).append(status)
                    continue
                seen[legacy_id] = status

                key = content_key(row)
                if key in seen_content:
                    report.likely_duplicated[(legacy_id, status)] = seen_content[key]
                else:
                    seen_content[key] = (legacy_id, status)

                values = {column: row[column] for column in COPIED_COLUMNS}
                values["particulars"] = values["particulars"] or ""
                values["debit"] = values["debit"] or 0
                values["credit"] = values["credit"] or 0
                values["date"] = values["date"] or ""
                due_date = parse_stored_date(str(values["due_date"])) if values["due_date"] else None
                values["due_date"] = due_date.isoformat() if due_date else None
                values["status"] = status
                conn.execute(
                    text(
                        f"INSERT INTO debt_records ({column_list}, status, status_changed_at) "
                        f"VALUES ({placeholders}, :status, CURRENT_TIMESTAMP)"
                    ),
                    values,
                )
                migrated += 1
            report.migrated[status] = migrated

        for table, _ in present:
            conn.execute(text(f"DROP TABLE {table}"))

    return report


def migrate_database(database_path: str | None = None) -> None:
    """Migrate database to the single debt_records table.

    Args:
        database_path: Path to database file. If None, uses default location.

    Raises:
        Exception: If migration fails
    """
    # Creating the database instance creates debt_records if it is missing
    db = create_sqlite_database(database_path=database_path)
    db.connect()

    try:
        session = db.session_factory()
        try:
            engine = session.bind
            if engine is None:
                raise Exception("Could not get database engine from session")
        finally:
            session.close()

        if not any(table_exists(engine, table) for table, _ in LEGACY_TABLES):
            print("Migration already applied: no legacy debt tables found")
            return

        print("Starting migration: merging legacy debt tables...")
        report = merge_debt_stores(engine)

        for status, count in report.migrated.items():
            print(f"  Migrated {count} record(s) with status {status}")
        if report.duplicated:
            print(f"  {len(report.duplicated)} record(s) were found in more than one table:")
            for legacy_id, statuses in sorted(report.duplicated.items()):
                print(f"    {legacy_id}: {' + '.join(statuses)} (kept {statuses[0]})")
        if report.likely_duplicated:
            print(f"  {len(report.likely_duplicated)} record(s) match an earlier record and may be duplicates:")
            for (legacy_id, status), (match_id, match_status) in sorted(report.likely_duplicated.items()):
                print(f"    {legacy_id} ({status}) matches {match_id} ({match_status})")

        print("Migration completed successfully!")

    except Exception as e:
        print(f"Migration failed: {e}")
        raise
    finally:
        db.disconnect()


def main():
    """Main entry point for migration script."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Merge legacy receivable/payable tables into debt_records"
    )
    parser.add_argument(
        "--db-path",
        type=str,
        help="Path to database file (overrides LEDGERBOOK_DB_PATH environment variable)",
    )
    args = parser.parse_args()

    try:
        migrate_database(database_path=args.db_path)
        return 0
    except Exception as e:
        print(f"\nMigration failed: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
