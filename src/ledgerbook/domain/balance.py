"""Balance engine: opening balances and running balances."""

from datetime import date
from decimal import Decimal
from typing import Iterable, Sequence

from ledgerbook.domain.entities import (
    ZERO,
    LedgerEntry,
    ReportingPeriod,
    RunningLedgerLine,
)
from ledgerbook.domain.period import entries_before


def sum_net(entries: Iterable[LedgerEntry]) -> Decimal:
    """Sum debit minus credit over entries using exact decimal arithmetic."""
    total = ZERO
    for entry in entries:
        total += entry.debit - entry.credit
    return total


def compute_opening_balance(all_entries: Sequence[LedgerEntry], period: ReportingPeriod) -> Decimal:
    """Compute the balance carried into a period.

    Args:
        all_entries: Every entry in the store, unfiltered
        period: Reporting period

    Returns:
        Sum of debit minus credit over entries dated before the period start;
        zero for All-time
    """
    return sum_net(entries_before(all_entries, period))


def chronological(entries: Iterable[LedgerEntry]) -> list[LedgerEntry]:
    """Sort entries by date ascending.

    The sort is stable, so entries sharing a date keep their retrieval order.
    Entries without a valid date sort after all dated entries.
    """
    return sorted(entries, key=lambda entry: entry.date if entry.date is not None else date.max)


def compute_running_balances(
    entries: Iterable[LedgerEntry], opening_balance: Decimal = ZERO
) -> list[RunningLedgerLine]:
    """Compute the balance after each entry in chronological order.

    Args:
        entries: Entries in retrieval order
        opening_balance: Balance seeding the first line

    Returns:
        One RunningLedgerLine per entry, sorted by date
    """
    lines: list[RunningLedgerLine] = []
    balance = opening_balance
    for entry in chronological(entries):
        balance = balance + entry.debit - entry.credit
        lines.append(RunningLedgerLine(entry=entry, balance_after=balance))
    return lines
