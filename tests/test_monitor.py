"""Tests for recomputing statements on store changes."""

import threading
from datetime import date
from decimal import Decimal

from ledgerbook.database.factories import create_database
from ledgerbook.domain.entities import ReportingPeriod
from ledgerbook.domain.ledger import LedgerService
from ledgerbook.domain.monitor import ReportMonitor


class FakeTimer:
    """Stand-in for threading.Timer that only fires when told to."""

    created = []

    def __init__(self, interval, function, args=()):
        self.interval = interval
        self.function = function
        self.args = args
        self.started = False
        self.cancelled = False
        self.daemon = False
        FakeTimer.created.append(self)

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if not self.cancelled:
            self.function(*self.args)


def _add_rent(ledger_service, amount):
    return ledger_service.create_entry(date(2024, 1, 15), "Expenses", "Rent", debit=Decimal(amount))


def test_start_computes_initial_bundle(temp_db, ledger_service):
    _add_rent(ledger_service, "100")
    monitor = ReportMonitor(temp_db, ReportingPeriod.all_time(), debounce_seconds=0)

    bundle = monitor.start()

    assert bundle.profit_and_loss.total_expense == Decimal("100")
    assert monitor.latest is bundle
    assert monitor.recompute_count == 1
    monitor.stop()


def test_every_change_recomputes_without_debounce(temp_db, ledger_service):
    updates = []
    monitor = ReportMonitor(
        temp_db, ReportingPeriod.yearly(2024), on_update=updates.append, debounce_seconds=0
    )
    monitor.start()

    entry_id = _add_rent(ledger_service, "100")
    ledger_service.update_entry(entry_id, debit=Decimal("120"))

    assert monitor.recompute_count == 3
    assert [bundle.profit_and_loss.total_expense for bundle in updates] == [
        Decimal("0"),
        Decimal("100"),
        Decimal("120"),
    ]
    monitor.stop()


def test_changes_within_debounce_interval_are_coalesced(temp_db, ledger_service):
    FakeTimer.created = []
    monitor = ReportMonitor(
        temp_db, ReportingPeriod.all_time(), debounce_seconds=0.5, timer_factory=FakeTimer
    )
    monitor.start()

    _add_rent(ledger_service, "10")
    _add_rent(ledger_service, "20")
    _add_rent(ledger_service, "30")

    assert monitor.recompute_count == 1
    assert monitor.pending_changes == 3
    assert len(FakeTimer.created) == 3
    assert all(timer.cancelled for timer in FakeTimer.created[:-1])
    assert FakeTimer.created[-1].started
    assert FakeTimer.created[-1].interval == 0.5

    FakeTimer.created[-1].fire()

    assert monitor.recompute_count == 2
    assert monitor.pending_changes == 0
    assert monitor.latest.profit_and_loss.total_expense == Decimal("60")
    monitor.stop()


def test_flush_without_pending_changes_does_nothing(temp_db):
    monitor = ReportMonitor(temp_db, ReportingPeriod.all_time(), timer_factory=FakeTimer)
    monitor.start()

    assert monitor.flush() is None
    assert monitor.recompute_count == 1
    monitor.stop()


def test_stop_unsubscribes(temp_db, ledger_service):
    monitor = ReportMonitor(temp_db, ReportingPeriod.all_time(), debounce_seconds=0)
    monitor.start()
    monitor.stop()

    _add_rent(ledger_service, "10")

    assert monitor.recompute_count == 1
    assert monitor.latest.profit_and_loss.total_expense == Decimal("0")


def test_set_period_recomputes(temp_db, ledger_service):
    _add_rent(ledger_service, "10")
    monitor = ReportMonitor(temp_db, ReportingPeriod.yearly(2023), debounce_seconds=0)
    monitor.start()
    assert monitor.latest.profit_and_loss.total_expense == Decimal("0")

    bundle = monitor.set_period(ReportingPeriod.monthly(2024, 1))

    assert bundle.period == ReportingPeriod.monthly(2024, 1)
    assert bundle.profit_and_loss.total_expense == Decimal("10")
    monitor.stop()


def test_lifecycle_moves_notify_subscribers(temp_db, lifecycle_service):
    events = []
    unsubscribe = temp_db.subscribe(events.append)

    record_id = lifecycle_service.create_record(
        "Client A", date(2024, 3, 1), "Current Assets", "Accounts Receivable", debit=Decimal("500")
    )
    lifecycle_service.settle(record_id)
    lifecycle_service.permanent_delete(record_id)
    unsubscribe()
    lifecycle_service.create_record(
        "Client B", date(2024, 3, 1), "Current Assets", "Accounts Receivable", debit=Decimal("1")
    )

    assert [(e.collection, e.action, e.record_id) for e in events] == [
        ("debt_records", "create", record_id),
        ("debt_records", "move", record_id),
        ("debt_records", "delete", record_id),
    ]


def test_failing_listener_does_not_block_others(temp_db, ledger_service, caplog):
    seen = []

    def broken(event):
        raise RuntimeError("listener crashed")

    temp_db.subscribe(broken)
    temp_db.subscribe(seen.append)

    entry_id = _add_rent(ledger_service, "10")

    assert [event.record_id for event in seen] == [entry_id]
    assert ledger_service.get_entry(entry_id) is not None
    assert "Change listener failed" in caplog.text


def test_debounced_recompute_on_real_timer_with_in_memory_store():
    db = create_database("sqlite://")
    bundles = []
    recomputed = threading.Event()

    def on_update(bundle):
        bundles.append(bundle)
        if len(bundles) == 2:
            recomputed.set()

    monitor = ReportMonitor(db, ReportingPeriod.all_time(), on_update=on_update, debounce_seconds=0.05)
    monitor.start()

    _add_rent(LedgerService(db), "100")

    assert recomputed.wait(timeout=5)
    assert monitor.recompute_count == 2
    assert monitor.pending_changes == 0
    assert monitor.latest.profit_and_loss.total_expense == Decimal("100")
    monitor.stop()
    db.disconnect()


def test_failed_debounced_recompute_stays_pending(temp_db, ledger_service, monkeypatch, caplog):
    import ledgerbook.domain.monitor as monitor_module

    FakeTimer.created = []
    monitor = ReportMonitor(
        temp_db, ReportingPeriod.all_time(), debounce_seconds=0.5, timer_factory=FakeTimer
    )
    monitor.start()
    _add_rent(ledger_service, "40")

    def broken(entries, period):
        raise RuntimeError("statement build failed")

    real_build = monitor_module.build_statements
    monkeypatch.setattr(monitor_module, "build_statements", broken)
    FakeTimer.created[-1].fire()

    assert monitor.recompute_count == 1
    assert monitor.pending_changes == 1
    assert monitor.latest.profit_and_loss.total_expense == Decimal("0")
    assert "Debounced recompute" in caplog.text

    monkeypatch.setattr(monitor_module, "build_statements", real_build)
    bundle = monitor.flush()

    assert bundle is not None
    assert bundle.profit_and_loss.total_expense == Decimal("40")
    assert monitor.pending_changes == 0
    monitor.stop()


def test_timer_after_refresh_does_not_recompute_again(temp_db, ledger_service):
    FakeTimer.created = []
    monitor = ReportMonitor(
        temp_db, ReportingPeriod.all_time(), debounce_seconds=0.5, timer_factory=FakeTimer
    )
    monitor.start()
    _add_rent(ledger_service, "10")

    monitor.refresh()
    timer = FakeTimer.created[-1]
    timer.cancelled = False
    timer.fire()

    assert monitor.recompute_count == 2
    monitor.stop()
