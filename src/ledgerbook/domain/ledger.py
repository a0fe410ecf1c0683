"""Ledger entry domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional, Union

from ledgerbook.database.base import Database
from ledgerbook.domain.entities import ZERO, LedgerEntry
from ledgerbook.domain.errors import NotFoundError, ValidationError, entry_not_found
from ledgerbook.domain.taxonomy import require_valid_category
from ledgerbook.utils.amount_parser import CENTS

logger = logging.getLogger(__name__)


def validate_amounts(debit: Decimal, credit: Decimal) -> None:
    """Validate the debit/credit pair of an entry.

    Raises:
        ValidationError: If either amount is negative, has fractions of a
            cent, or both are zero
    """
    for label, amount in (("Debit", debit), ("Credit", credit)):
        if amount < ZERO:
            raise ValidationError(f"{label} must not be negative (got {amount})")
        # Stored as Numeric(14, 2); finer amounts would be rounded on write
        if amount != amount.quantize(CENTS):
            raise ValidationError(f"{label} must not have more than two decimal places (got {amount})")
    if debit == ZERO and credit == ZERO:
        raise ValidationError("Entry must have a debit or a credit amount")


def fields_to_clear(**flags: tuple[object, bool]) -> list[str]:
    """Return the field names flagged for clearing.

    Each keyword maps a field name to its (new value, clear flag) pair;
    setting and clearing the same field is rejected.

    Raises:
        ValidationError: If a field has both a new value and a clear flag
    """
    cleared = []
    for field_name, (value, clear) in flags.items():
        if not clear:
            continue
        if value is not None:
            raise ValidationError(f"Cannot both set and clear {field_name.replace('_', ' ')}")
        cleared.append(field_name)
    return cleared


def date_to_text(value: Union[date, str]) -> str:
    """Return the stored text form of an entry date."""
    if isinstance(value, date):
        return value.isoformat()
    return value


class LedgerService:
    """Service for entering and maintaining ledger entries."""

    def __init__(self, db: Database):
        """Initialize ledger service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_entry(
        self,
        entry_date: date,
        main_category: str,
        sub_category: str,
        debit: Decimal = ZERO,
        credit: Decimal = ZERO,
        particulars: str = "",
        due_date: Optional[date] = None,
        notes: Optional[str] = None,
    ) -> int:
        """Create a ledger entry.

        Args:
            entry_date: Entry date
            main_category: Main category (e.g., "Expenses")
            sub_category: Sub-category allowed under the main category
            debit: Debit amount
            credit: Credit amount
            particulars: Free-text particulars
            due_date: Optional due date
            notes: Optional notes

        Returns:
            Entry ID

        Raises:
            ValidationError: If the category pair or amounts are invalid
        """
        category = require_valid_category(main_category, sub_category)
        validate_amounts(debit, credit)

        entry_id = self.db.create_entry(
            date_text=date_to_text(entry_date),
            particulars=particulars,
            main_category=category.value,
            sub_category=sub_category,
            debit=debit,
            credit=credit,
            due_date=due_date,
            notes=notes,
        )
        logger.debug("Created ledger entry %s (%s / %s)", entry_id, category.value, sub_category)
        return entry_id

    def get_entry(self, entry_id: int) -> Optional[LedgerEntry]:
        """Get ledger entry by ID.

        Args:
            entry_id: Entry ID

        Returns:
            Ledger entry or None if not found
        """
        return self.db.get_entry(entry_id)

    def require_entry(self, entry_id: int) -> LedgerEntry:
        """Get ledger entry by ID or raise NotFoundError."""
        entry = self.db.get_entry(entry_id)
        if entry is None:
            raise NotFoundError(entry_not_found(entry_id))
        return entry

    def list_entries(self) -> list[LedgerEntry]:
        """List every entry in retrieval order.

        This is the raw listing: entries with an invalid date or an unknown
        category are included.
        """
        return self.db.list_entries()

    def update_entry(
        self,
        entry_id: int,
        entry_date: Optional[date] = None,
        main_category: Optional[str] = None,
        sub_category: Optional[str] = None,
        debit: Optional[Decimal] = None,
        credit: Optional[Decimal] = None,
        particulars: Optional[str] = None,
        due_date: Optional[date] = None,
        notes: Optional[str] = None,
        clear_due_date: bool = False,
        clear_notes: bool = False,
    ) -> None:
        """Update the provided fields of a ledger entry.

        The resulting entry is validated as a whole, so changing only the
        main category still requires the existing sub-category to fit it.
        ``clear_due_date`` and ``clear_notes`` remove those optional values.

        Raises:
            NotFoundError: If the entry doesn't exist
            ValidationError: If the resulting category pair or amounts are invalid
        """
        current = self.require_entry(entry_id)
        cleared = fields_to_clear(due_date=(due_date, clear_due_date), notes=(notes, clear_notes))

        new_main = main_category if main_category is not None else current.main_category
        new_sub = sub_category if sub_category is not None else current.sub_category
        if main_category is not None or sub_category is not None:
            new_main = require_valid_category(new_main, new_sub).value

        validate_amounts(
            debit if debit is not None else current.debit,
            credit if credit is not None else current.credit,
        )

        self.db.update_entry(
            entry_id=entry_id,
            date_text=date_to_text(entry_date) if entry_date is not None else None,
            particulars=particulars,
            main_category=new_main if main_category is not None else None,
            sub_category=sub_category,
            debit=debit,
            credit=credit,
            due_date=due_date,
            notes=notes,
            clear_fields=cleared,
        )

    def delete_entry(self, entry_id: int) -> None:
        """Delete a ledger entry.

        Raises:
            NotFoundError: If the entry doesn't exist
        """
        self.require_entry(entry_id)
        self.db.delete_entry(entry_id)
        logger.debug("Deleted ledger entry %s", entry_id)
