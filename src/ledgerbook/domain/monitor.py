"""Recompute statements whenever the ledger store changes."""

import logging
import threading
from typing import Callable, Optional

from ledgerbook.database.base import Database
from ledgerbook.domain.entities import ChangeEvent, LedgerEntry, ReportingPeriod, StatementBundle
from ledgerbook.domain.reports import build_statements

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.25


class ReportMonitor:
    """Keeps a StatementBundle current with the store.

    Each change notification schedules a full recomputation. Notifications
    arriving within ``debounce_seconds`` of each other are coalesced into one
    recomputation; with a zero interval every change recomputes immediately.

    The store is only read on the thread that delivers the notification.
    The debounce timer builds statements from the snapshot taken for the
    latest change and never touches the database session.
    """

    def __init__(
        self,
        db: Database,
        period: ReportingPeriod,
        on_update: Optional[Callable[[StatementBundle], None]] = None,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
    ):
        self.db = db
        self.period = period
        self.on_update = on_update
        self.debounce_seconds = debounce_seconds
        self.timer_factory = timer_factory
        self.latest: Optional[StatementBundle] = None
        self.recompute_count = 0
        self.pending_changes = 0
        self._snapshot: Optional[list[LedgerEntry]] = None
        self._generation = 0
        self._timer: Optional[threading.Timer] = None
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._lock = threading.RLock()

    def start(self) -> StatementBundle:
        """Subscribe to the store and compute the initial bundle."""
        if self._unsubscribe is None:
            self._unsubscribe = self.db.subscribe(self._on_change)
        return self.refresh()

    def stop(self) -> None:
        """Unsubscribe and drop any pending recomputation."""
        with self._lock:
            if self._unsubscribe is not None:
                self._unsubscribe()
                self._unsubscribe = None
            self._cancel_timer()
            self._snapshot = None
            self.pending_changes = 0

    def set_period(self, period: ReportingPeriod) -> StatementBundle:
        """Switch the reporting period and recompute."""
        self.period = period
        return self.refresh()

    def refresh(self) -> StatementBundle:
        """Recompute every statement from a fresh snapshot."""
        with self._lock:
            bundle = self._rebuild(self.db.list_entries())
        self._publish(bundle)
        return bundle

    def flush(self) -> Optional[StatementBundle]:
        """Run a pending debounced recomputation now, if there is one."""
        with self._lock:
            if self.pending_changes == 0:
                return None
        return self.refresh()

    def _rebuild(self, entries: list[LedgerEntry]) -> StatementBundle:
        """Build the bundle and clear pending state; caller holds the lock.

        Pending changes stay counted if building fails, so ``flush`` can
        still recover them.
        """
        bundle = build_statements(entries, self.period)
        self._cancel_timer()
        self._snapshot = None
        self.pending_changes = 0
        self.latest = bundle
        self.recompute_count += 1
        logger.debug(
            "Recomputed statements for %s (%d entries, run %d)",
            self.period.label(),
            len(entries),
            self.recompute_count,
        )
        return bundle

    def _publish(self, bundle: StatementBundle) -> None:
        if self.on_update is not None:
            self.on_update(bundle)

    def _on_change(self, event: ChangeEvent) -> None:
        logger.debug("Change %s %s %s", event.collection, event.action, event.record_id)
        with self._lock:
            self.pending_changes += 1
        if self.debounce_seconds <= 0:
            self.refresh()
            return

        entries = self.db.list_entries()
        with self._lock:
            self._snapshot = entries
            self._cancel_timer()
            self._generation += 1
            self._timer = self.timer_factory(
                self.debounce_seconds, self._on_timer, args=(self._generation,)
            )
            self._timer.daemon = True
            self._timer.start()

    def _on_timer(self, generation: int) -> None:
        """Build statements from the latest snapshot on the timer thread."""
        with self._lock:
            # A newer change rescheduled the timer, or a refresh already ran
            if generation != self._generation or self._snapshot is None:
                return
            try:
                bundle = self._rebuild(self._snapshot)
            except Exception:
                logger.exception(
                    "Debounced recompute for %s failed; %d change(s) still pending",
                    self.period.label(),
                    self.pending_changes,
                )
                return
        self._publish(bundle)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
