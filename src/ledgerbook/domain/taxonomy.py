"""Category taxonomy: main categories, their sub-categories and normal sides."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Union

from ledgerbook.domain.entities import LedgerEntry, NormalSide
from ledgerbook.domain.errors import (
    ValidationError,
    invalid_sub_category,
    unknown_main_category,
)

logger = logging.getLogger(__name__)


class MainCategory(str, Enum):
    """Main account categories."""

    ASSETS = "Assets"
    CURRENT_ASSETS = "Current Assets"
    EXPENSES = "Expenses"
    LIABILITY = "Liability"
    CURRENT_LIABILITIES = "Current Liabilities"
    CAPITAL = "Capital"
    EQUITY = "Equity"
    INCOME = "Income"


@dataclass(frozen=True)
class CategoryDefinition:
    """Allowed sub-categories and normal side for a main category."""

    main_category: MainCategory
    normal_side: NormalSide
    sub_categories: tuple[str, ...]


TAXONOMY: dict[MainCategory, CategoryDefinition] = {
    definition.main_category: definition
    for definition in (
        CategoryDefinition(
            MainCategory.ASSETS,
            NormalSide.DEBIT,
            (
                "Land",
                "Buildings",
                "Vehicles",
                "Furniture & Fixtures",
                "Equipment",
                "Computers",
                "Investments",
            ),
        ),
        CategoryDefinition(
            MainCategory.CURRENT_ASSETS,
            NormalSide.DEBIT,
            (
                "Cash",
                "Bank",
                "Accounts Receivable",
                "Inventory",
                "Prepaid Expenses",
                "Deposits",
            ),
        ),
        CategoryDefinition(
            MainCategory.EXPENSES,
            NormalSide.DEBIT,
            (
                "Rent",
                "Salaries",
                "Utilities",
                "Transportation",
                "Office Supplies",
                "Maintenance",
                "Marketing",
                "Insurance",
                "Bank Charges",
                "Government Fees",
                "Miscellaneous",
            ),
        ),
        CategoryDefinition(
            MainCategory.LIABILITY,
            NormalSide.CREDIT,
            ("Long-term Loans", "Mortgage", "Deferred Payments"),
        ),
        CategoryDefinition(
            MainCategory.CURRENT_LIABILITIES,
            NormalSide.CREDIT,
            (
                "Accounts Payable",
                "Short-term Loans",
                "Accrued Expenses",
                "Taxes Payable",
                "Salaries Payable",
            ),
        ),
        CategoryDefinition(
            MainCategory.CAPITAL,
            NormalSide.CREDIT,
            ("Owner Capital", "Additional Capital"),
        ),
        CategoryDefinition(
            MainCategory.EQUITY,
            NormalSide.CREDIT,
            ("Retained Earnings", "Drawings", "Reserves"),
        ),
        CategoryDefinition(
            MainCategory.INCOME,
            NormalSide.CREDIT,
            ("Sales", "Services", "Commission", "Interest Income", "Rental Income", "Other Income"),
        ),
    )
}


def resolve_main_category(main: Union[str, MainCategory]) -> Optional[MainCategory]:
    """Return the MainCategory for a name, or None if it is not in the taxonomy."""
    if isinstance(main, MainCategory):
        return main
    try:
        return MainCategory(main)
    except ValueError:
        return None


def validate_sub_category(main: Union[str, MainCategory], sub: str) -> bool:
    """Return True if ``sub`` is an allowed sub-category of ``main``."""
    category = resolve_main_category(main)
    if category is None:
        return False
    return sub in TAXONOMY[category].sub_categories


def is_known_category(main: Union[str, MainCategory], sub: str) -> bool:
    """Return True if the (main, sub) pair is part of the taxonomy."""
    return validate_sub_category(main, sub)


def normal_side(main: Union[str, MainCategory]) -> NormalSide:
    """Return the normal side of a main category.

    Raises:
        ValidationError: If the main category is not in the taxonomy
    """
    category = resolve_main_category(main)
    if category is None:
        raise ValidationError(unknown_main_category(str(main)))
    return TAXONOMY[category].normal_side


def require_valid_category(main: Union[str, MainCategory], sub: str) -> MainCategory:
    """Validate a (main, sub) pair at the write boundary.

    Returns:
        The resolved MainCategory

    Raises:
        ValidationError: If the main category is unknown or the sub-category
            is not allowed under it
    """
    category = resolve_main_category(main)
    if category is None:
        raise ValidationError(unknown_main_category(str(main)))
    if sub not in TAXONOMY[category].sub_categories:
        raise ValidationError(invalid_sub_category(category.value, sub))
    return category


def list_taxonomy() -> list[CategoryDefinition]:
    """List category definitions in declaration order."""
    return list(TAXONOMY.values())


def flag_unknown_categories(entries: Iterable[LedgerEntry]) -> tuple[int, ...]:
    """Return ids of entries whose (main, sub) pair is outside the taxonomy.

    Stored entries are never rejected for this; the ids are surfaced in
    report diagnostics instead.
    """
    flagged = tuple(
        entry.id
        for entry in entries
        if not is_known_category(entry.main_category, entry.sub_category)
    )
    if flagged:
        logger.warning("Flagged %d entries with an unknown category", len(flagged))
    return flagged
