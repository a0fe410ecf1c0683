"""Period filter: selects ledger entries for a reporting period."""

import logging
from dataclasses import dataclass
from typing import Iterable, Sequence

from ledgerbook.domain.entities import LedgerEntry, PeriodMode, ReportingPeriod

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PeriodSelection:
    """Entries kept for a period plus ids skipped for an unparsable date."""

    entries: tuple[LedgerEntry, ...]
    skipped: tuple[int, ...] = ()


def select_entries(entries: Iterable[LedgerEntry], period: ReportingPeriod) -> PeriodSelection:
    """Select entries falling inside a reporting period.

    All-time keeps every entry, including those without a valid date. Yearly
    and Monthly keep entries whose year (and month) match and skip entries
    whose date could not be parsed. Retrieval order is preserved.
    """
    if period.mode == PeriodMode.ALL:
        return PeriodSelection(entries=tuple(entries))

    kept: list[LedgerEntry] = []
    skipped: list[int] = []
    for entry in entries:
        if entry.date is None:
            skipped.append(entry.id)
            continue
        if period.contains(entry.date):
            kept.append(entry)

    if skipped:
        logger.warning(
            "Skipped %d entr%s with an invalid date for period %s",
            len(skipped),
            "y" if len(skipped) == 1 else "ies",
            period.label(),
        )
    return PeriodSelection(entries=tuple(kept), skipped=tuple(skipped))


def entries_before(entries: Sequence[LedgerEntry], period: ReportingPeriod) -> list[LedgerEntry]:
    """Return entries dated strictly before the period start.

    All-time has no start, so nothing precedes it.
    """
    start = period.start
    if start is None:
        return []
    return [entry for entry in entries if entry.date is not None and entry.date < start]
