"""Domain model entities for ledgerbook.

These are pure data classes representing business concepts, independent of
database schema. Reports are built from these and never hold references to
ORM rows, so a report stays valid after the store moves on.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from ledgerbook.domain.errors import ValidationError

ZERO = Decimal("0")


class NormalSide(str, Enum):
    """Column in which an account's increases are recorded."""

    DEBIT = "Debit"
    CREDIT = "Credit"


class DebtStatus(str, Enum):
    """Lifecycle status of a receivable/payable record."""

    ACTIVE = "Active"
    SETTLED = "Settled"
    BAD_DEBT = "BadDebt"


class PeriodMode(str, Enum):
    """How a reporting period selects entries."""

    ALL = "All"
    YEARLY = "Yearly"
    MONTHLY = "Monthly"


@dataclass(frozen=True)
class LedgerEntry:
    """Ledger entry domain entity.

    ``date_text`` is the date as the store holds it; ``date`` is None when
    that text is not a valid calendar date.
    """

    id: int
    date_text: str
    date: Optional[date]
    particulars: str
    main_category: str
    sub_category: str
    debit: Decimal
    credit: Decimal
    due_date: Optional[date] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def net(self) -> Decimal:
        """Debit minus credit."""
        return self.debit - self.credit


@dataclass(frozen=True)
class DebtRecord:
    """Receivable/payable record domain entity."""

    id: int
    name: str
    date_text: str
    date: Optional[date]
    particulars: str
    main_category: str
    sub_category: str
    debit: Decimal
    credit: Decimal
    status: DebtStatus
    nationality: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[date] = None
    notes: Optional[str] = None
    status_changed_at: Optional[datetime] = None


@dataclass(frozen=True)
class ReportingPeriod:
    """Reporting period used purely to filter entries by date."""

    mode: PeriodMode
    year: Optional[int] = None
    month: Optional[int] = None

    def __post_init__(self):
        if self.mode == PeriodMode.ALL:
            if self.year is not None or self.month is not None:
                raise ValidationError("All-time period takes no year or month")
            return
        if self.year is None or not 1 <= self.year <= 9999:
            raise ValidationError(f"Invalid year for {self.mode.value} period: {self.year}")
        if self.mode == PeriodMode.YEARLY and self.month is not None:
            raise ValidationError("Yearly period takes no month")
        if self.mode == PeriodMode.MONTHLY and (self.month is None or not 1 <= self.month <= 12):
            raise ValidationError(f"Invalid month for monthly period: {self.month}")

    @classmethod
    def all_time(cls) -> "ReportingPeriod":
        return cls(PeriodMode.ALL)

    @classmethod
    def yearly(cls, year: int) -> "ReportingPeriod":
        return cls(PeriodMode.YEARLY, year=year)

    @classmethod
    def monthly(cls, year: int, month: int) -> "ReportingPeriod":
        return cls(PeriodMode.MONTHLY, year=year, month=month)

    @property
    def start(self) -> Optional[date]:
        """First day of the period, or None for All-time."""
        if self.mode == PeriodMode.YEARLY:
            return date(self.year, 1, 1)
        if self.mode == PeriodMode.MONTHLY:
            return date(self.year, self.month, 1)
        return None

    def contains(self, value: date) -> bool:
        """Return True if the date falls inside the period."""
        if self.mode == PeriodMode.YEARLY:
            return value.year == self.year
        if self.mode == PeriodMode.MONTHLY:
            return (value.year, value.month) == (self.year, self.month)
        return True

    def label(self) -> str:
        """Human-readable period label."""
        if self.mode == PeriodMode.YEARLY:
            return f"{self.year}"
        if self.mode == PeriodMode.MONTHLY:
            return f"{self.year}-{self.month:02d}"
        return "All time"


@dataclass(frozen=True)
class ChangeEvent:
    """Notification delivered to store subscribers after a committed write."""

    collection: str
    action: str
    record_id: int


@dataclass(frozen=True)
class ReportDiagnostics:
    """Per-entry problems found while aggregating; never fatal."""

    skipped_invalid_dates: tuple[int, ...] = ()
    unknown_categories: tuple[int, ...] = ()

    @property
    def skipped_count(self) -> int:
        return len(self.skipped_invalid_dates)

    @property
    def flagged_count(self) -> int:
        return len(self.unknown_categories)


@dataclass(frozen=True)
class RunningLedgerLine:
    """A ledger entry together with the balance after it."""

    entry: LedgerEntry
    balance_after: Decimal


@dataclass(frozen=True)
class RunningLedger:
    """Chronological ledger for a period, seeded by its opening balance."""

    period: ReportingPeriod
    opening_balance: Decimal
    lines: tuple[RunningLedgerLine, ...]
    diagnostics: ReportDiagnostics = field(default_factory=ReportDiagnostics)

    @property
    def closing_balance(self) -> Decimal:
        if not self.lines:
            return self.opening_balance
        return self.lines[-1].balance_after


@dataclass(frozen=True)
class TrialBalanceAccount:
    """One account row of a trial balance."""

    account: str
    main_category: str
    sub_category: str
    debit: Decimal
    credit: Decimal


@dataclass(frozen=True)
class TrialBalance:
    """Trial balance with totals and the imbalance diagnostic."""

    accounts: tuple[TrialBalanceAccount, ...]
    total_debits: Decimal
    total_credits: Decimal
    is_balanced: bool
    difference: Decimal
    diagnostics: ReportDiagnostics = field(default_factory=ReportDiagnostics)


@dataclass(frozen=True)
class CategoryAmount:
    """Amount attributed to one sub-category."""

    sub_category: str
    amount: Decimal


@dataclass(frozen=True)
class ProfitAndLoss:
    """Profit-and-loss statement."""

    income: tuple[CategoryAmount, ...]
    expense: tuple[CategoryAmount, ...]
    total_income: Decimal
    total_expense: Decimal
    net_profit: Decimal
    diagnostics: ReportDiagnostics = field(default_factory=ReportDiagnostics)


@dataclass(frozen=True)
class BalanceSheetSection:
    """Balance-sheet section for one main category."""

    main_category: str
    lines: tuple[CategoryAmount, ...]
    total: Decimal


@dataclass(frozen=True)
class BalanceSheet:
    """Balance sheet; the two grand totals are reported, not reconciled."""

    assets: BalanceSheetSection
    current_assets: BalanceSheetSection
    liabilities: BalanceSheetSection
    current_liabilities: BalanceSheetSection
    equity: BalanceSheetSection
    net_profit: Decimal
    grand_total_assets: Decimal
    grand_total_liab_equity: Decimal
    difference: Decimal
    is_balanced: bool
    diagnostics: ReportDiagnostics = field(default_factory=ReportDiagnostics)


@dataclass(frozen=True)
class CashFlowLine:
    """Aggregated inflow/outflow for one cash-flow label."""

    label: str
    inflow: Decimal
    outflow: Decimal

    @property
    def net(self) -> Decimal:
        return self.inflow - self.outflow


@dataclass(frozen=True)
class CashFlowSection:
    """Operating, investing or financing section."""

    name: str
    lines: tuple[CashFlowLine, ...]
    total_inflow: Decimal
    total_outflow: Decimal

    @property
    def net(self) -> Decimal:
        return self.total_inflow - self.total_outflow


@dataclass(frozen=True)
class CashFlowStatement:
    """Cash-flow statement."""

    operating: CashFlowSection
    investing: CashFlowSection
    financing: CashFlowSection
    net_cash_change: Decimal
    unclassified: tuple[int, ...] = ()
    diagnostics: ReportDiagnostics = field(default_factory=ReportDiagnostics)


@dataclass(frozen=True)
class StatementBundle:
    """Every statement for one period, computed from one snapshot."""

    period: ReportingPeriod
    opening_balance: Decimal
    running_ledger: RunningLedger
    trial_balance: TrialBalance
    profit_and_loss: ProfitAndLoss
    balance_sheet: BalanceSheet
    cash_flow: CashFlowStatement


@dataclass(frozen=True)
class DebtSummary:
    """Totals over Active receivable/payable records."""

    total_debtors: Decimal
    total_creditors: Decimal
    net_balance: Decimal
    active_count: int
    settled_count: int
    bad_debt_count: int
