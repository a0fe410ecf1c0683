"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Callable, Iterable, Optional
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from ledgerbook.domain.entities import (
    ChangeEvent,
    DebtRecord,
    DebtStatus,
    LedgerEntry,
)

ChangeListener = Callable[[ChangeEvent], None]


class Database(ABC):
    """Abstract database interface for ledgerbook."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Ledger entry operations
    @abstractmethod
    def create_entry(
        self,
        date_text: str,
        particulars: str,
        main_category: str,
        sub_category: str,
        debit: Decimal,
        credit: Decimal,
        due_date: Optional[date] = None,
        notes: Optional[str] = None,
    ) -> int:
        """Create a ledger entry. Returns entry ID."""
        pass

    @abstractmethod
    def get_entry(self, entry_id: int) -> Optional[LedgerEntry]:
        """Get ledger entry by ID."""
        pass

    @abstractmethod
    def list_entries(self) -> list[LedgerEntry]:
        """List all ledger entries in retrieval (insertion) order."""
        pass

    @abstractmethod
    def update_entry(
        self,
        entry_id: int,
        date_text: Optional[str] = None,
        particulars: Optional[str] = None,
        main_category: Optional[str] = None,
        sub_category: Optional[str] = None,
        debit: Optional[Decimal] = None,
        credit: Optional[Decimal] = None,
        due_date: Optional[date] = None,
        notes: Optional[str] = None,
        clear_fields: Iterable[str] = (),
    ) -> None:
        """Update the provided ledger entry fields.

        None leaves a field unchanged; nullable fields named in
        ``clear_fields`` are set to NULL.
        """
        pass

    @abstractmethod
    def delete_entry(self, entry_id: int) -> None:
        """Delete a ledger entry."""
        pass

    # Receivable/payable record operations
    @abstractmethod
    def create_debt_record(
        self,
        name: str,
        date_text: str,
        particulars: str,
        main_category: str,
        sub_category: str,
        debit: Decimal,
        credit: Decimal,
        nationality: Optional[str] = None,
        description: Optional[str] = None,
        due_date: Optional[date] = None,
        notes: Optional[str] = None,
        status: DebtStatus = DebtStatus.ACTIVE,
    ) -> int:
        """Create a receivable/payable record. Returns record ID."""
        pass

    @abstractmethod
    def get_debt_record(self, record_id: int) -> Optional[DebtRecord]:
        """Get receivable/payable record by ID."""
        pass

    @abstractmethod
    def list_debt_records(self, status: Optional[DebtStatus] = None) -> list[DebtRecord]:
        """List records, optionally only those in one status."""
        pass

    @abstractmethod
    def update_debt_record(self, record_id: int, clear_fields: Iterable[str] = (), **fields) -> None:
        """Update the provided record fields (not the status).

        None leaves a field unchanged; nullable fields named in
        ``clear_fields`` are set to NULL.
        """
        pass

    @abstractmethod
    def transition_debt_record(
        self, record_id: int, from_status: DebtStatus, to_status: DebtStatus
    ) -> None:
        """Move a record between statuses in a single transaction.

        The update only applies if the record is still in ``from_status``.
        """
        pass

    @abstractmethod
    def delete_debt_record(self, record_id: int, allowed_statuses: Iterable[DebtStatus]) -> None:
        """Delete a record if its status is one of ``allowed_statuses``."""
        pass

    # Change notifications
    @abstractmethod
    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a listener called after each committed write.

        Returns:
            A callable that removes the listener
        """
        pass
