"""Statement builder: profit and loss, balance sheet and cash flow.

Every builder here is a pure fold over an already-filtered set of entries.
Amounts stay as Decimal; rounding is left to the presentation layer.
"""

import logging
from decimal import Decimal
from typing import Callable, Iterable, Optional, Sequence

from ledgerbook.domain.entities import (
    ZERO,
    BalanceSheet,
    BalanceSheetSection,
    CashFlowLine,
    CashFlowSection,
    CashFlowStatement,
    CategoryAmount,
    LedgerEntry,
    ProfitAndLoss,
    ReportDiagnostics,
)
from ledgerbook.domain.taxonomy import MainCategory
from ledgerbook.domain.trial_balance import BALANCE_TOLERANCE

logger = logging.getLogger(__name__)

OPERATING = "Operating"
INVESTING = "Investing"
FINANCING = "Financing"


def _sum_by_sub_category(
    entries: Iterable[LedgerEntry],
    main_category: MainCategory,
    amount: Callable[[LedgerEntry], Decimal],
) -> tuple[CategoryAmount, ...]:
    """Sum an amount per sub-category for entries of one main category."""
    totals: dict[str, Decimal] = {}
    for entry in entries:
        if entry.main_category != main_category.value:
            continue
        totals[entry.sub_category] = totals.get(entry.sub_category, ZERO) + amount(entry)
    return tuple(
        CategoryAmount(sub_category=name, amount=total)
        for name, total in sorted(totals.items())
    )


def _total(lines: Sequence[CategoryAmount]) -> Decimal:
    return sum((line.amount for line in lines), ZERO)


def build_profit_and_loss(
    entries: Sequence[LedgerEntry],
    diagnostics: Optional[ReportDiagnostics] = None,
) -> ProfitAndLoss:
    """Build the profit-and-loss statement.

    Income is the credit side of Income entries and expense the debit side of
    Expenses entries. Amounts posted on the opposite side are not moved.
    """
    income = _sum_by_sub_category(entries, MainCategory.INCOME, lambda e: e.credit)
    expense = _sum_by_sub_category(entries, MainCategory.EXPENSES, lambda e: e.debit)
    total_income = _total(income)
    total_expense = _total(expense)

    return ProfitAndLoss(
        income=income,
        expense=expense,
        total_income=total_income,
        total_expense=total_expense,
        net_profit=total_income - total_expense,
        diagnostics=diagnostics or ReportDiagnostics(),
    )


def _debit_section(entries: Sequence[LedgerEntry], main_category: MainCategory) -> BalanceSheetSection:
    lines = _sum_by_sub_category(entries, main_category, lambda e: e.debit - e.credit)
    return BalanceSheetSection(main_category=main_category.value, lines=lines, total=_total(lines))


def _credit_section(entries: Sequence[LedgerEntry], main_category: MainCategory) -> BalanceSheetSection:
    lines = _sum_by_sub_category(entries, main_category, lambda e: e.credit - e.debit)
    return BalanceSheetSection(main_category=main_category.value, lines=lines, total=_total(lines))


def build_balance_sheet(
    entries: Sequence[LedgerEntry],
    net_profit: Optional[Decimal] = None,
    diagnostics: Optional[ReportDiagnostics] = None,
) -> BalanceSheet:
    """Build the balance sheet.

    Net profit for the same entries is folded into the liabilities and equity
    side as retained earnings. The grand totals are compared and the
    difference reported; they are never forced equal.

    Args:
        entries: Period-filtered entries
        net_profit: Net profit for the same entries; computed if omitted
        diagnostics: Diagnostics to attach to the result
    """
    if net_profit is None:
        net_profit = build_profit_and_loss(entries).net_profit

    assets = _debit_section(entries, MainCategory.ASSETS)
    current_assets = _debit_section(entries, MainCategory.CURRENT_ASSETS)
    liabilities = _credit_section(entries, MainCategory.LIABILITY)
    current_liabilities = _credit_section(entries, MainCategory.CURRENT_LIABILITIES)
    equity = _credit_section(entries, MainCategory.EQUITY)

    grand_total_assets = assets.total + current_assets.total
    grand_total_liab_equity = (
        liabilities.total + current_liabilities.total + equity.total + net_profit
    )
    difference = grand_total_assets - grand_total_liab_equity
    is_balanced = abs(difference) < BALANCE_TOLERANCE
    if not is_balanced:
        logger.debug("Balance sheet totals diverge by %s", difference)

    return BalanceSheet(
        assets=assets,
        current_assets=current_assets,
        liabilities=liabilities,
        current_liabilities=current_liabilities,
        equity=equity,
        net_profit=net_profit,
        grand_total_assets=grand_total_assets,
        grand_total_liab_equity=grand_total_liab_equity,
        difference=difference,
        is_balanced=is_balanced,
        diagnostics=diagnostics or ReportDiagnostics(),
    )


def _operating_labels(entry: LedgerEntry) -> tuple[str, str]:
    return entry.sub_category, entry.sub_category


def _investing_labels(entry: LedgerEntry) -> tuple[str, str]:
    return f"Sale of {entry.sub_category}", f"Purchase of {entry.sub_category}"


def _financing_labels(entry: LedgerEntry) -> tuple[str, str]:
    return f"Increase in {entry.sub_category}", f"Decrease in {entry.sub_category}"


# main category -> (section, labeller returning (inflow label, outflow label))
CASH_FLOW_CLASSIFICATION: dict[str, tuple[str, Callable[[LedgerEntry], tuple[str, str]]]] = {
    MainCategory.INCOME.value: (OPERATING, _operating_labels),
    MainCategory.EXPENSES.value: (OPERATING, _operating_labels),
    MainCategory.ASSETS.value: (INVESTING, _investing_labels),
    MainCategory.LIABILITY.value: (FINANCING, _financing_labels),
    MainCategory.EQUITY.value: (FINANCING, _financing_labels),
}


class _SectionAccumulator:
    """Collects inflows and outflows per label for one cash-flow section."""

    def __init__(self, name: str):
        self.name = name
        self.inflows: dict[str, Decimal] = {}
        self.outflows: dict[str, Decimal] = {}

    def add(self, inflow_label: str, outflow_label: str, entry: LedgerEntry) -> None:
        # Credit brings cash in, debit sends it out.
        if entry.credit:
            self.inflows[inflow_label] = self.inflows.get(inflow_label, ZERO) + entry.credit
        if entry.debit:
            self.outflows[outflow_label] = self.outflows.get(outflow_label, ZERO) + entry.debit

    def build(self) -> CashFlowSection:
        labels = sorted(set(self.inflows) | set(self.outflows))
        lines = tuple(
            CashFlowLine(
                label=label,
                inflow=self.inflows.get(label, ZERO),
                outflow=self.outflows.get(label, ZERO),
            )
            for label in labels
        )
        return CashFlowSection(
            name=self.name,
            lines=lines,
            total_inflow=sum(self.inflows.values(), ZERO),
            total_outflow=sum(self.outflows.values(), ZERO),
        )


def build_cash_flow(
    entries: Sequence[LedgerEntry],
    diagnostics: Optional[ReportDiagnostics] = None,
) -> CashFlowStatement:
    """Build the cash-flow statement by reclassifying entries per main category.

    Entries whose main category has no cash-flow mapping are listed in
    ``unclassified`` rather than dropped silently.
    """
    sections = {
        OPERATING: _SectionAccumulator(OPERATING),
        INVESTING: _SectionAccumulator(INVESTING),
        FINANCING: _SectionAccumulator(FINANCING),
    }
    unclassified: list[int] = []

    for entry in entries:
        classification = CASH_FLOW_CLASSIFICATION.get(entry.main_category)
        if classification is None:
            unclassified.append(entry.id)
            continue
        section_name, labeller = classification
        inflow_label, outflow_label = labeller(entry)
        sections[section_name].add(inflow_label, outflow_label, entry)

    operating = sections[OPERATING].build()
    investing = sections[INVESTING].build()
    financing = sections[FINANCING].build()

    return CashFlowStatement(
        operating=operating,
        investing=investing,
        financing=financing,
        net_cash_change=operating.net + investing.net + financing.net,
        unclassified=tuple(unclassified),
        diagnostics=diagnostics or ReportDiagnostics(),
    )
