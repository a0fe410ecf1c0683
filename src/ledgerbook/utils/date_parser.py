"""Date parsing utilities."""

from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "January 15, 2024", etc.
    - Relative dates: "today", "yesterday", "last month", "this year", etc.

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    if date_str.startswith("last "):
        period = date_str[5:]
        if period == "month":
            return (today - relativedelta(months=1)).replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1) - relativedelta(years=1)

    elif date_str.startswith("this "):
        period = date_str[5:]
        if period == "month":
            return today.replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1)

    elif date_str.startswith("next "):
        period = date_str[5:]
        if period == "month":
            return (today + relativedelta(months=1)).replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1) + relativedelta(years=1)

    try:
        dt = date_parser.parse(date_str)
        return dt.date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_stored_date(date_text: Optional[str]) -> Optional[date]:
    """Parse a stored ISO date or timestamp, returning None if it is invalid.

    Stored dates are never interpreted loosely: "2024-01-15" and
    "2024-01-15T09:30:00Z" parse, "15/01/2024" or "2024-02-30" do not.
    """
    if not date_text:
        return None
    date_text = date_text.strip()
    # isoparse accepts "2024" and "2024-01"; a stored date needs a day.
    if len(date_text) < 10:
        return None
    try:
        return date_parser.isoparse(date_text).date()
    except (ValueError, TypeError, OverflowError):
        return None


def get_period_bounds(period: str) -> tuple[int, Optional[int]]:
    """Get the (year, month) for a named period.

    Args:
        period: Period string (this-month, this-year, last-month, last-year)

    Returns:
        Tuple of (year, month); month is None for yearly periods

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = date.today()

    if period == "this-month":
        return (today.year, today.month)

    elif period == "this-year":
        return (today.year, None)

    elif period == "last-month":
        last_month = today.replace(day=1) - relativedelta(months=1)
        return (last_month.year, last_month.month)

    elif period == "last-year":
        return (today.year - 1, None)

    else:
        raise ValueError(f"Unknown period: '{period}'. Supported periods: this-month, this-year, last-month, last-year")
