"""Domain layer for ledgerbook application."""

# Services import the database layer, which imports domain.entities; resolve
# them lazily so importing any domain module never runs that cycle.
_EXPORTS = {
    "LedgerService": "ledgerbook.domain.ledger",
    "ReportService": "ledgerbook.domain.reports",
    "build_statements": "ledgerbook.domain.reports",
    "DebtLifecycleService": "ledgerbook.domain.lifecycle",
    "ReportMonitor": "ledgerbook.domain.monitor",
}

__all__ = list(_EXPORTS)


def __getattr__(name):
    if name in _EXPORTS:
        from importlib import import_module

        return getattr(import_module(_EXPORTS[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
