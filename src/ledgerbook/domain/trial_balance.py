"""Trial balance builder."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional

from ledgerbook.domain.entities import (
    ZERO,
    LedgerEntry,
    ReportDiagnostics,
    TrialBalance,
    TrialBalanceAccount,
)

# Accounts whose net is below this are treated as closed.
ZERO_BALANCE_TOLERANCE = Decimal("0.001")
# Debits and credits within this of each other count as balanced.
BALANCE_TOLERANCE = Decimal("0.01")


@dataclass
class AccountBucket:
    """Running debit and credit totals for one (main, sub) account."""

    main_category: str
    sub_category: str
    debit: Decimal = ZERO
    credit: Decimal = ZERO
    count: int = 0

    @property
    def account(self) -> str:
        return account_name(self.main_category, self.sub_category)

    @property
    def net(self) -> Decimal:
        return self.debit - self.credit


def account_name(main_category: str, sub_category: str) -> str:
    """Return the trial-balance account label, e.g. ``"Rent (Expenses)"``."""
    return f"{sub_category} ({main_category})"


def group_accounts(entries: Iterable[LedgerEntry]) -> dict[tuple[str, str], AccountBucket]:
    """Group entries into one bucket per (main_category, sub_category).

    Debits and credits are summed independently; nothing is netted here.
    """
    buckets: dict[tuple[str, str], AccountBucket] = {}
    for entry in entries:
        key = (entry.main_category, entry.sub_category)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = AccountBucket(main_category=entry.main_category, sub_category=entry.sub_category)
            buckets[key] = bucket
        bucket.debit += entry.debit
        bucket.credit += entry.credit
        bucket.count += 1
    return buckets


def build_trial_balance(
    entries: Iterable[LedgerEntry],
    diagnostics: Optional[ReportDiagnostics] = None,
) -> TrialBalance:
    """Build a trial balance from period-filtered entries.

    Accounts with a zero net are dropped. A positive net is listed as a debit
    balance, a negative net as a credit balance. An imbalance between total
    debits and credits is reported, never corrected.
    """
    accounts: list[TrialBalanceAccount] = []
    for bucket in group_accounts(entries).values():
        net = bucket.net
        if abs(net) < ZERO_BALANCE_TOLERANCE:
            continue
        if net > 0:
            debit, credit = net, ZERO
        else:
            debit, credit = ZERO, -net
        accounts.append(
            TrialBalanceAccount(
                account=bucket.account,
                main_category=bucket.main_category,
                sub_category=bucket.sub_category,
                debit=debit,
                credit=credit,
            )
        )

    accounts.sort(key=lambda row: row.account)
    total_debits = sum((row.debit for row in accounts), ZERO)
    total_credits = sum((row.credit for row in accounts), ZERO)
    difference = total_debits - total_credits

    return TrialBalance(
        accounts=tuple(accounts),
        total_debits=total_debits,
        total_credits=total_credits,
        is_balanced=abs(difference) < BALANCE_TOLERANCE,
        difference=difference,
        diagnostics=diagnostics or ReportDiagnostics(),
    )
