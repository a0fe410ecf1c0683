"""CLI helpers for reporting period resolution."""

import click

from ledgerbook.domain.entities import ReportingPeriod
from ledgerbook.domain.errors import ValidationError
from ledgerbook.utils.date_parser import get_period_bounds

PERIOD_FLAGS = ("this-month", "this-year", "last-month", "last-year")


def period_options(command):
    """Attach the reporting period options to a command."""
    options = [
        click.option("--year", type=int, help="Report on a calendar year (e.g., 2024)"),
        click.option("--month", type=click.IntRange(1, 12), help="Month within --year (1-12)"),
        click.option("--this-month", is_flag=True, help="Report on the current month"),
        click.option("--this-year", is_flag=True, help="Report on the current year"),
        click.option("--last-month", is_flag=True, help="Report on the previous month"),
        click.option("--last-year", is_flag=True, help="Report on the previous year"),
    ]
    for option in reversed(options):
        command = option(command)
    return command


def resolve_cli_period(
    ctx,
    *,
    year: int | None,
    month: int | None,
    period_flags: dict[str, bool],
) -> ReportingPeriod:
    """Resolve a reporting period from period flags or explicit year/month.

    No options means All-time.
    """
    period_count = sum(1 for is_set in period_flags.values() if is_set)

    if period_count > 1:
        click.echo(
            "Error: Only one period option (--this-month, --this-year, --last-month, --last-year) can be specified at a time.",
            err=True,
        )
        ctx.exit(1)

    if period_count > 0 and (year is not None or month is not None):
        click.echo(
            "Error: Period options (--this-month, --this-year, etc.) cannot be combined with --year or --month.",
            err=True,
        )
        ctx.exit(1)

    if month is not None and year is None:
        click.echo("Error: --month requires --year.", err=True)
        ctx.exit(1)

    if period_count == 1:
        for period, is_set in period_flags.items():
            if is_set:
                year, month = get_period_bounds(period)
                break

    try:
        if year is None:
            return ReportingPeriod.all_time()
        if month is None:
            return ReportingPeriod.yearly(year)
        return ReportingPeriod.monthly(year, month)
    except ValidationError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)


def period_flags_from(kwargs: dict) -> dict[str, bool]:
    """Collect the period flag values from command keyword arguments."""
    return {flag: bool(kwargs.get(flag.replace("-", "_"))) for flag in PERIOD_FLAGS}
