"""Report domain service.

Reports are recomputed from a fresh snapshot of the store on every call;
nothing is cached between calls.
"""

import logging
from decimal import Decimal
from typing import Sequence

from ledgerbook.database.base import Database
from ledgerbook.domain.balance import compute_opening_balance, compute_running_balances
from ledgerbook.domain.entities import (
    BalanceSheet,
    CashFlowStatement,
    LedgerEntry,
    ProfitAndLoss,
    ReportDiagnostics,
    ReportingPeriod,
    RunningLedger,
    StatementBundle,
    TrialBalance,
)
from ledgerbook.domain.period import PeriodSelection, select_entries
from ledgerbook.domain.statements import (
    build_balance_sheet,
    build_cash_flow,
    build_profit_and_loss,
)
from ledgerbook.domain.taxonomy import flag_unknown_categories
from ledgerbook.domain.trial_balance import build_trial_balance

logger = logging.getLogger(__name__)


def _diagnostics(selection: PeriodSelection) -> ReportDiagnostics:
    return ReportDiagnostics(
        skipped_invalid_dates=selection.skipped,
        unknown_categories=flag_unknown_categories(selection.entries),
    )


def build_running_ledger(entries: Sequence[LedgerEntry], period: ReportingPeriod) -> RunningLedger:
    """Build the running ledger for a period from a full snapshot."""
    selection = select_entries(entries, period)
    opening_balance = compute_opening_balance(entries, period)
    return RunningLedger(
        period=period,
        opening_balance=opening_balance,
        lines=tuple(compute_running_balances(selection.entries, opening_balance)),
        diagnostics=_diagnostics(selection),
    )


def build_statements(entries: Sequence[LedgerEntry], period: ReportingPeriod) -> StatementBundle:
    """Compute every statement for a period from a full snapshot of entries.

    This is a pure function of its inputs: the same entries and period always
    give an equal bundle.
    """
    selection = select_entries(entries, period)
    diagnostics = _diagnostics(selection)
    opening_balance = compute_opening_balance(entries, period)

    running_ledger = RunningLedger(
        period=period,
        opening_balance=opening_balance,
        lines=tuple(compute_running_balances(selection.entries, opening_balance)),
        diagnostics=diagnostics,
    )
    profit_and_loss = build_profit_and_loss(selection.entries, diagnostics)

    return StatementBundle(
        period=period,
        opening_balance=opening_balance,
        running_ledger=running_ledger,
        trial_balance=build_trial_balance(selection.entries, diagnostics),
        profit_and_loss=profit_and_loss,
        balance_sheet=build_balance_sheet(
            selection.entries, net_profit=profit_and_loss.net_profit, diagnostics=diagnostics
        ),
        cash_flow=build_cash_flow(selection.entries, diagnostics),
    )


class ReportService:
    """Service exposing the financial reports for a reporting period."""

    def __init__(self, db: Database):
        """Initialize report service.

        Args:
            db: Database instance
        """
        self.db = db

    def _select(self, period: ReportingPeriod) -> tuple[PeriodSelection, ReportDiagnostics]:
        selection = select_entries(self.db.list_entries(), period)
        return selection, _diagnostics(selection)

    def get_opening_balance(self, period: ReportingPeriod) -> Decimal:
        """Get the balance carried into a period (zero for All-time)."""
        return compute_opening_balance(self.db.list_entries(), period)

    def get_running_ledger(self, period: ReportingPeriod) -> RunningLedger:
        """Get the period's entries in date order with the balance after each."""
        return build_running_ledger(self.db.list_entries(), period)

    def get_trial_balance(self, period: ReportingPeriod) -> TrialBalance:
        """Get the trial balance for a period."""
        selection, diagnostics = self._select(period)
        return build_trial_balance(selection.entries, diagnostics)

    def get_profit_and_loss(self, period: ReportingPeriod) -> ProfitAndLoss:
        """Get the profit-and-loss statement for a period."""
        selection, diagnostics = self._select(period)
        return build_profit_and_loss(selection.entries, diagnostics)

    def get_balance_sheet(self, period: ReportingPeriod) -> BalanceSheet:
        """Get the balance sheet for a period."""
        selection, diagnostics = self._select(period)
        return build_balance_sheet(selection.entries, diagnostics=diagnostics)

    def get_cash_flow(self, period: ReportingPeriod) -> CashFlowStatement:
        """Get the cash-flow statement for a period."""
        selection, diagnostics = self._select(period)
        return build_cash_flow(selection.entries, diagnostics)

    def get_statements(self, period: ReportingPeriod) -> StatementBundle:
        """Get every statement for a period from one snapshot."""
        entries = self.db.list_entries()
        logger.debug("Computing statements for %s over %d entries", period.label(), len(entries))
        return build_statements(entries, period)
