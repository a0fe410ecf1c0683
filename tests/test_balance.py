"""Tests for opening and running balances."""

from decimal import Decimal

from ledgerbook.domain.balance import (
    chronological,
    compute_opening_balance,
    compute_running_balances,
    sum_net,
)
from ledgerbook.domain.entities import ReportingPeriod
from ledgerbook.domain.period import select_entries


def test_opening_balance_sums_entries_before_period(make_entry):
    entries = [
        make_entry("2023-11-02", debit="500"),
        make_entry("2023-12-20", credit="120.50"),
        make_entry("2024-01-03", debit="75"),
    ]

    assert compute_opening_balance(entries, ReportingPeriod.yearly(2024)) == Decimal("379.50")
    assert compute_opening_balance(entries, ReportingPeriod.monthly(2024, 1)) == Decimal("379.50")
    assert compute_opening_balance(entries, ReportingPeriod.monthly(2024, 2)) == Decimal("454.50")


def test_opening_balance_is_zero_for_all_time(make_entry):
    entries = [make_entry("2023-11-02", debit="500")]

    assert compute_opening_balance(entries, ReportingPeriod.all_time()) == Decimal("0")


def test_opening_balance_ignores_invalid_dates(make_entry):
    entries = [make_entry("2023-01-01", debit="10"), make_entry("garbage", debit="99")]

    assert compute_opening_balance(entries, ReportingPeriod.yearly(2024)) == Decimal("10")


def test_running_balances_are_sorted_by_date(make_entry):
    later = make_entry("2024-01-20", credit="40")
    earlier = make_entry("2024-01-05", debit="100")

    lines = compute_running_balances([later, earlier], opening_balance=Decimal("10"))

    assert [line.entry for line in lines] == [earlier, later]
    assert [line.balance_after for line in lines] == [Decimal("110"), Decimal("70")]


def test_same_date_keeps_arrival_order(make_entry):
    x = make_entry("2024-03-01", debit="10")
    y = make_entry("2024-03-01", credit="4")

    lines = compute_running_balances([x, y])

    assert [line.entry.id for line in lines] == [x.id, y.id]
    assert [line.balance_after for line in lines] == [Decimal("10"), Decimal("6")]


def test_undated_entries_sort_last(make_entry):
    undated = make_entry("n/a", debit="1")
    dated = make_entry("2024-03-01", debit="2")

    assert chronological([undated, dated]) == [dated, undated]


def test_running_balance_uses_exact_decimals(make_entry):
    entries = [make_entry("2024-01-01", debit="0.1") for _ in range(3)]

    lines = compute_running_balances(entries)

    assert lines[-1].balance_after == Decimal("0.3")


def test_empty_entries_give_no_lines():
    assert compute_running_balances([], opening_balance=Decimal("5")) == []


def test_final_running_balance_matches_opening_plus_net(make_entry):
    entries = [
        make_entry("2023-12-30", debit="250"),
        make_entry("2024-02-11", credit="19.99"),
        make_entry("2024-02-02", debit="1000"),
        make_entry("2024-02-28", credit="333.33"),
        make_entry("2024-03-01", debit="5"),
        make_entry("2024-02-02", credit="0.01"),
    ]
    period = ReportingPeriod.monthly(2024, 2)
    selected = select_entries(entries, period).entries
    opening = compute_opening_balance(entries, period)

    lines = compute_running_balances(selected, opening)

    assert lines[-1].balance_after == opening + sum_net(selected)
    assert lines[-1].balance_after == Decimal("896.67")


def test_income_posted_on_debit_side_is_not_corrected(make_entry):
    sales = make_entry("2024-01-10", main="Income", sub="Sales", debit="1000")
    rent = make_entry("2024-01-15", main="Expenses", sub="Rent", credit="300")
    period = ReportingPeriod.monthly(2024, 1)

    opening = compute_opening_balance([sales, rent], period)
    lines = compute_running_balances(select_entries([sales, rent], period).entries, opening)

    assert opening == Decimal("0")
    assert [line.balance_after for line in lines] == [Decimal("1000"), Decimal("700")]
