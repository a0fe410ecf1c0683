"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, including the parsing of stored
date text into calendar dates.
"""

from decimal import Decimal

from ledgerbook.domain import entities as domain
from ledgerbook.database.models import (
    LedgerEntry as ORMLedgerEntry,
    DebtRecord as ORMDebtRecord,
)
from ledgerbook.utils.date_parser import parse_stored_date


def _amount(value) -> Decimal:
    """Normalize a stored amount to Decimal."""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def ledger_entry_to_domain(orm_entry: ORMLedgerEntry) -> domain.LedgerEntry:
    """Convert SQLAlchemy LedgerEntry model to domain LedgerEntry entity."""
    return domain.LedgerEntry(
        id=orm_entry.id,
        date_text=orm_entry.date,
        date=parse_stored_date(orm_entry.date),
        particulars=orm_entry.particulars or "",
        main_category=orm_entry.main_category,
        sub_category=orm_entry.sub_category,
        debit=_amount(orm_entry.debit),
        credit=_amount(orm_entry.credit),
        due_date=orm_entry.due_date,
        notes=orm_entry.notes,
        created_at=orm_entry.created_at,
    )


def debt_record_to_domain(orm_record: ORMDebtRecord) -> domain.DebtRecord:
    """Convert SQLAlchemy DebtRecord model to domain DebtRecord entity."""
    return domain.DebtRecord(
        id=orm_record.id,
        name=orm_record.name,
        date_text=orm_record.date,
        date=parse_stored_date(orm_record.date),
        particulars=orm_record.particulars or "",
        main_category=orm_record.main_category,
        sub_category=orm_record.sub_category,
        debit=_amount(orm_record.debit),
        credit=_amount(orm_record.credit),
        status=domain.DebtStatus(orm_record.status),
        nationality=orm_record.nationality,
        description=orm_record.description,
        due_date=orm_record.due_date,
        notes=orm_record.notes,
        status_changed_at=orm_record.status_changed_at,
    )
