"""Shared domain error messages and error types."""

from enum import Enum


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as a write against stale state."""


class InvalidTransitionError(ConflictError):
    """Lifecycle transition not allowed from the record's current status."""


class MoveOutcome(str, Enum):
    """What is left in the store after a failed lifecycle move."""

    ROLLED_BACK = "rolled_back"
    DUPLICATED = "duplicated"
    LOST = "lost"


class LifecycleMoveError(DomainError):
    """A lifecycle move failed and was not committed as a whole.

    ``outcome`` tells an operator whether the record is unchanged, present in
    both states, or missing from both, so it can be reconciled.
    """

    def __init__(self, message: str, record_id: int, outcome: MoveOutcome):
        super().__init__(message)
        self.record_id = record_id
        self.outcome = outcome


def entry_not_found(entry_id: int) -> str:
    """Return message for missing ledger entry."""
    return f"Ledger entry {entry_id} not found"


def record_not_found(record_id: int) -> str:
    """Return message for missing receivable/payable record."""
    return f"Record {record_id} not found"


def unknown_main_category(main_category: str) -> str:
    """Return message for a main category outside the taxonomy."""
    return f"Unknown main category '{main_category}'"


def invalid_sub_category(main_category: str, sub_category: str) -> str:
    """Return message for a sub-category not allowed under its main category."""
    return f"Sub-category '{sub_category}' is not allowed under '{main_category}'"


def transition_not_allowed(record_id: int, current: str, action: str) -> str:
    """Return message when a lifecycle action does not apply to the current status."""
    return f"Cannot {action} record {record_id}: it is {current}"
