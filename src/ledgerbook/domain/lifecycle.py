"""Receivable/payable lifecycle domain service.

Records start Active. An Active record can be settled or marked as bad
debt; a bad debt can be reactivated. Settled and bad-debt records can be
deleted permanently. Settled is terminal otherwise.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from ledgerbook.database.base import Database
from ledgerbook.domain.entities import ZERO, DebtRecord, DebtStatus, DebtSummary
from ledgerbook.domain.errors import (
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
    record_not_found,
    transition_not_allowed,
)
from ledgerbook.domain.ledger import date_to_text, fields_to_clear, validate_amounts
from ledgerbook.domain.taxonomy import require_valid_category

logger = logging.getLogger(__name__)

# action -> (allowed source statuses, target status); None target means delete
TRANSITIONS: dict[str, tuple[tuple[DebtStatus, ...], Optional[DebtStatus]]] = {
    "settle": ((DebtStatus.ACTIVE,), DebtStatus.SETTLED),
    "mark as bad debt": ((DebtStatus.ACTIVE,), DebtStatus.BAD_DEBT),
    "reactivate": ((DebtStatus.BAD_DEBT,), DebtStatus.ACTIVE),
    "permanently delete": ((DebtStatus.SETTLED, DebtStatus.BAD_DEBT), None),
}


class DebtLifecycleService:
    """Service for receivable/payable records and their lifecycle."""

    def __init__(self, db: Database):
        """Initialize lifecycle service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_record(
        self,
        name: str,
        entry_date: date,
        main_category: str,
        sub_category: str,
        debit: Decimal = ZERO,
        credit: Decimal = ZERO,
        particulars: str = "",
        nationality: Optional[str] = None,
        description: Optional[str] = None,
        due_date: Optional[date] = None,
        notes: Optional[str] = None,
    ) -> int:
        """Create an Active receivable/payable record.

        Returns:
            Record ID

        Raises:
            ValidationError: If name, category pair or amounts are invalid
        """
        if not name or not name.strip():
            raise ValidationError("Record name is required")
        category = require_valid_category(main_category, sub_category)
        validate_amounts(debit, credit)

        record_id = self.db.create_debt_record(
            name=name.strip(),
            date_text=date_to_text(entry_date),
            particulars=particulars,
            main_category=category.value,
            sub_category=sub_category,
            debit=debit,
            credit=credit,
            nationality=nationality,
            description=description,
            due_date=due_date,
            notes=notes,
        )
        logger.info("Created record %s for %s", record_id, name)
        return record_id

    def get_record(self, record_id: int) -> Optional[DebtRecord]:
        """Get record by ID, or None if not found."""
        return self.db.get_debt_record(record_id)

    def require_record(self, record_id: int) -> DebtRecord:
        """Get record by ID or raise NotFoundError."""
        record = self.db.get_debt_record(record_id)
        if record is None:
            raise NotFoundError(record_not_found(record_id))
        return record

    def list_records(self, status: Optional[DebtStatus] = DebtStatus.ACTIVE) -> list[DebtRecord]:
        """List records in one status (Active by default), or all if status is None."""
        return self.db.list_debt_records(status=status)

    def update_record(
        self,
        record_id: int,
        name: Optional[str] = None,
        entry_date: Optional[date] = None,
        main_category: Optional[str] = None,
        sub_category: Optional[str] = None,
        debit: Optional[Decimal] = None,
        credit: Optional[Decimal] = None,
        particulars: Optional[str] = None,
        nationality: Optional[str] = None,
        description: Optional[str] = None,
        due_date: Optional[date] = None,
        notes: Optional[str] = None,
        clear_due_date: bool = False,
        clear_notes: bool = False,
    ) -> None:
        """Edit an Active record.

        ``clear_due_date`` and ``clear_notes`` remove those optional values.

        Raises:
            NotFoundError: If the record doesn't exist
            InvalidTransitionError: If the record is not Active
            ValidationError: If the resulting fields are invalid
        """
        record = self.require_record(record_id)
        if record.status != DebtStatus.ACTIVE:
            raise InvalidTransitionError(transition_not_allowed(record_id, record.status.value, "edit"))
        if name is not None and not name.strip():
            raise ValidationError("Record name is required")
        cleared = fields_to_clear(due_date=(due_date, clear_due_date), notes=(notes, clear_notes))

        new_main = main_category if main_category is not None else record.main_category
        new_sub = sub_category if sub_category is not None else record.sub_category
        if main_category is not None or sub_category is not None:
            new_main = require_valid_category(new_main, new_sub).value
        validate_amounts(
            debit if debit is not None else record.debit,
            credit if credit is not None else record.credit,
        )

        self.db.update_debt_record(
            record_id,
            clear_fields=cleared,
            name=name.strip() if name is not None else None,
            date=date_to_text(entry_date) if entry_date is not None else None,
            main_category=new_main if main_category is not None else None,
            sub_category=sub_category,
            debit=debit,
            credit=credit,
            particulars=particulars,
            nationality=nationality,
            description=description,
            due_date=due_date,
            notes=notes,
        )

    def _apply(self, record_id: int, action: str) -> DebtRecord:
        """Check and apply one lifecycle action."""
        allowed, target = TRANSITIONS[action]
        record = self.require_record(record_id)
        if record.status not in allowed:
            raise InvalidTransitionError(transition_not_allowed(record_id, record.status.value, action))

        if target is None:
            self.db.delete_debt_record(record_id, allowed_statuses=allowed)
        else:
            self.db.transition_debt_record(record_id, from_status=record.status, to_status=target)

        logger.info(
            "Record %s (%s): %s -> %s",
            record_id,
            record.name,
            record.status.value,
            target.value if target is not None else "deleted",
        )
        return record

    def settle(self, record_id: int) -> None:
        """Move an Active record to Settled."""
        self._apply(record_id, "settle")

    def mark_bad_debt(self, record_id: int) -> None:
        """Move an Active record to BadDebt."""
        self._apply(record_id, "mark as bad debt")

    def reactivate(self, record_id: int) -> None:
        """Move a BadDebt record back to Active.

        Raises:
            InvalidTransitionError: If the record is Active or Settled
        """
        self._apply(record_id, "reactivate")

    def permanent_delete(self, record_id: int) -> None:
        """Delete a Settled or BadDebt record permanently.

        Raises:
            InvalidTransitionError: If the record is still Active
        """
        self._apply(record_id, "permanently delete")

    def get_summary(self) -> DebtSummary:
        """Recompute debtor and creditor totals over Active records.

        Debtors are the debit side, creditors the credit side, and the net
        balance is debtors minus creditors.
        """
        total_debtors = ZERO
        total_creditors = ZERO
        counts = {status: 0 for status in DebtStatus}

        for record in self.db.list_debt_records(status=None):
            counts[record.status] += 1
            if record.status == DebtStatus.ACTIVE:
                total_debtors += record.debit
                total_creditors += record.credit

        return DebtSummary(
            total_debtors=total_debtors,
            total_creditors=total_creditors,
            net_balance=total_debtors - total_creditors,
            active_count=counts[DebtStatus.ACTIVE],
            settled_count=counts[DebtStatus.SETTLED],
            bad_debt_count=counts[DebtStatus.BAD_DEBT],
        )
