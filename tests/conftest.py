"""Shared pytest fixtures for ledgerbook tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
from itertools import count
import pytest

from ledgerbook.database.factories import create_sqlite_database
from ledgerbook.domain.entities import LedgerEntry
from ledgerbook.domain.ledger import LedgerService
from ledgerbook.domain.lifecycle import DebtLifecycleService
from ledgerbook.domain.reports import ReportService
from ledgerbook.utils.date_parser import parse_stored_date


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def ledger_service(temp_db):
    """Create a LedgerService with a temporary database."""
    return LedgerService(temp_db)


@pytest.fixture
def report_service(temp_db):
    """Create a ReportService with a temporary database."""
    return ReportService(temp_db)


@pytest.fixture
def lifecycle_service(temp_db):
    """Create a DebtLifecycleService with a temporary database."""
    return DebtLifecycleService(temp_db)


@pytest.fixture
def make_entry():
    """Build in-memory LedgerEntry objects with sequential ids.

    ``when`` may be a date or the stored text form; text that is not a valid
    date gives an entry whose ``date`` is None.
    """
    ids = count(1)

    def _make(when, main="Expenses", sub="Rent", debit="0", credit="0", particulars=""):
        date_text = when.isoformat() if isinstance(when, date) else when
        return LedgerEntry(
            id=next(ids),
            date_text=date_text,
            date=parse_stored_date(date_text),
            particulars=particulars,
            main_category=main,
            sub_category=sub,
            debit=Decimal(debit),
            credit=Decimal(credit),
        )

    return _make


@pytest.fixture
def sample_entries(ledger_service):
    """Create a small balanced set of entries across two months of 2024."""
    ids = {}
    ids["capital"] = ledger_service.create_entry(
        entry_date=date(2023, 12, 31),
        main_category="Equity",
        sub_category="Retained Earnings",
        credit=Decimal("5000"),
    )
    ids["bank"] = ledger_service.create_entry(
        entry_date=date(2023, 12, 31),
        main_category="Current Assets",
        sub_category="Bank",
        debit=Decimal("5000"),
    )
    ids["sales"] = ledger_service.create_entry(
        entry_date=date(2024, 1, 10),
        main_category="Income",
        sub_category="Sales",
        credit=Decimal("1200"),
        particulars="Invoice 1",
    )
    ids["sales_cash"] = ledger_service.create_entry(
        entry_date=date(2024, 1, 10),
        main_category="Current Assets",
        sub_category="Cash",
        debit=Decimal("1200"),
    )
    ids["rent"] = ledger_service.create_entry(
        entry_date=date(2024, 1, 15),
        main_category="Expenses",
        sub_category="Rent",
        debit=Decimal("300"),
    )
    ids["rent_cash"] = ledger_service.create_entry(
        entry_date=date(2024, 1, 15),
        main_category="Current Assets",
        sub_category="Cash",
        credit=Decimal("300"),
    )
    ids["vehicle"] = ledger_service.create_entry(
        entry_date=date(2024, 2, 3),
        main_category="Assets",
        sub_category="Vehicles",
        debit=Decimal("2000"),
    )
    ids["vehicle_bank"] = ledger_service.create_entry(
        entry_date=date(2024, 2, 3),
        main_category="Current Assets",
        sub_category="Bank",
        credit=Decimal("2000"),
    )
    return ids


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
