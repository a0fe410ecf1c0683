"""Tests for the report service and the statement bundle."""

from datetime import date
from decimal import Decimal

from ledgerbook.domain.entities import ReportingPeriod
from ledgerbook.domain.reports import build_running_ledger, build_statements


def _raw_entry(db, date_text, main, sub, debit="0", credit="0"):
    """Insert an entry straight into the store, bypassing validation."""
    return db.create_entry(
        date_text=date_text,
        particulars="",
        main_category=main,
        sub_category=sub,
        debit=Decimal(debit),
        credit=Decimal(credit),
    )


def test_opening_balance(report_service, sample_entries):
    assert report_service.get_opening_balance(ReportingPeriod.all_time()) == Decimal("0")
    # Both 2023 entries net to zero
    assert report_service.get_opening_balance(ReportingPeriod.yearly(2024)) == Decimal("0")


def test_opening_balance_carries_prior_months(ledger_service, report_service):
    ledger_service.create_entry(date(2024, 1, 3), "Current Assets", "Cash", debit=Decimal("250"))
    ledger_service.create_entry(date(2024, 2, 3), "Current Assets", "Cash", credit=Decimal("50"))

    assert report_service.get_opening_balance(ReportingPeriod.monthly(2024, 2)) == Decimal("250")
    assert report_service.get_opening_balance(ReportingPeriod.monthly(2024, 3)) == Decimal("200")


def test_running_ledger(report_service, sample_entries):
    ledger = report_service.get_running_ledger(ReportingPeriod.monthly(2024, 1))

    assert ledger.opening_balance == Decimal("0")
    assert [line.entry.id for line in ledger.lines] == [
        sample_entries["sales"],
        sample_entries["sales_cash"],
        sample_entries["rent"],
        sample_entries["rent_cash"],
    ]
    assert [line.balance_after for line in ledger.lines] == [
        Decimal("-1200"),
        Decimal("0"),
        Decimal("300"),
        Decimal("0"),
    ]
    assert ledger.closing_balance == Decimal("0")


def test_trial_balance(report_service, sample_entries):
    report = report_service.get_trial_balance(ReportingPeriod.all_time())

    assert report.is_balanced
    assert report.total_debits == Decimal("6200")
    assert report.total_credits == Decimal("6200")
    assert {row.account for row in report.accounts} == {
        "Bank (Current Assets)",
        "Cash (Current Assets)",
        "Rent (Expenses)",
        "Retained Earnings (Equity)",
        "Sales (Income)",
        "Vehicles (Assets)",
    }


def test_profit_and_loss_for_month(report_service, sample_entries):
    report = report_service.get_profit_and_loss(ReportingPeriod.monthly(2024, 1))

    assert report.total_income == Decimal("1200")
    assert report.total_expense == Decimal("300")
    assert report.net_profit == Decimal("900")

    february = report_service.get_profit_and_loss(ReportingPeriod.monthly(2024, 2))
    assert february.net_profit == Decimal("0")


def test_balance_sheet_all_time(report_service, sample_entries):
    report = report_service.get_balance_sheet(ReportingPeriod.all_time())

    assert report.grand_total_assets == Decimal("5900")
    assert report.grand_total_liab_equity == Decimal("5900")
    assert report.is_balanced


def test_cash_flow_for_year(report_service, sample_entries):
    report = report_service.get_cash_flow(ReportingPeriod.yearly(2024))

    assert report.operating.net == Decimal("900")
    assert report.investing.net == Decimal("-2000")
    assert report.financing.net == Decimal("0")
    assert report.net_cash_change == Decimal("-1100")
    assert len(report.unclassified) == 3


def test_income_on_debit_side_scenario(ledger_service, report_service):
    ledger_service.create_entry(date(2024, 1, 10), "Income", "Sales", debit=Decimal("1000"))
    ledger_service.create_entry(date(2024, 1, 15), "Expenses", "Rent", credit=Decimal("300"))
    period = ReportingPeriod.monthly(2024, 1)

    ledger = report_service.get_running_ledger(period)
    pnl = report_service.get_profit_and_loss(period)

    assert ledger.opening_balance == Decimal("0")
    assert [line.balance_after for line in ledger.lines] == [Decimal("1000"), Decimal("700")]
    assert pnl.total_income == Decimal("0")


def test_invalid_dates_are_skipped_and_reported(temp_db, report_service):
    good = _raw_entry(temp_db, "2024-01-05", "Expenses", "Rent", debit="100")
    bad = _raw_entry(temp_db, "31/01/2024", "Expenses", "Rent", debit="999")

    monthly = report_service.get_profit_and_loss(ReportingPeriod.monthly(2024, 1))
    assert monthly.total_expense == Decimal("100")
    assert monthly.diagnostics.skipped_invalid_dates == (bad,)

    all_time = report_service.get_profit_and_loss(ReportingPeriod.all_time())
    assert all_time.total_expense == Decimal("1099")
    assert all_time.diagnostics.skipped_count == 0

    assert [entry.id for entry in temp_db.list_entries()] == [good, bad]


def test_unknown_categories_are_flagged(temp_db, report_service):
    legacy = _raw_entry(temp_db, "2024-01-05", "Sundry", "Misc", debit="40")
    _raw_entry(temp_db, "2024-01-05", "Current Assets", "Cash", credit="40")

    report = report_service.get_trial_balance(ReportingPeriod.all_time())

    assert report.diagnostics.unknown_categories == (legacy,)
    assert "Misc (Sundry)" in {row.account for row in report.accounts}
    assert report.is_balanced


def test_statement_bundle_is_consistent(temp_db, report_service, sample_entries):
    period = ReportingPeriod.yearly(2024)
    bundle = report_service.get_statements(period)

    assert bundle.period == period
    assert bundle.opening_balance == report_service.get_opening_balance(period)
    assert bundle.trial_balance == report_service.get_trial_balance(period)
    assert bundle.profit_and_loss == report_service.get_profit_and_loss(period)
    assert bundle.balance_sheet == report_service.get_balance_sheet(period)
    assert bundle.cash_flow == report_service.get_cash_flow(period)
    assert bundle.running_ledger == report_service.get_running_ledger(period)


def test_recomputing_on_unchanged_entries_is_idempotent(temp_db, sample_entries):
    entries = temp_db.list_entries()

    for period in (
        ReportingPeriod.all_time(),
        ReportingPeriod.yearly(2024),
        ReportingPeriod.monthly(2024, 2),
    ):
        assert build_statements(entries, period) == build_statements(entries, period)
        assert build_running_ledger(entries, period) == build_running_ledger(entries, period)


def test_reports_follow_store_changes(ledger_service, report_service):
    period = ReportingPeriod.all_time()
    entry_id = ledger_service.create_entry(date(2024, 1, 1), "Expenses", "Rent", debit=Decimal("10"))
    assert report_service.get_profit_and_loss(period).total_expense == Decimal("10")

    ledger_service.update_entry(entry_id, debit=Decimal("25"))
    assert report_service.get_profit_and_loss(period).total_expense == Decimal("25")

    ledger_service.delete_entry(entry_id)
    assert report_service.get_profit_and_loss(period).total_expense == Decimal("0")
