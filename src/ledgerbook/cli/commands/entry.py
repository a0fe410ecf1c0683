"""Ledger entry commands."""

import click
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.errors import DomainError
from ledgerbook.domain.ledger import LedgerService
from ledgerbook.domain.taxonomy import is_known_category
from ledgerbook.utils.amount_parser import format_amount, parse_amount
from ledgerbook.utils.date_parser import parse_date


def _parse_amount_or_exit(ctx, label: str, value: str | None):
    if value is None:
        return None
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label} amount: {e}", err=True)
        ctx.exit(1)


def _parse_date_or_exit(ctx, label: str, value: str | None):
    if value is None:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


@click.group()
def entry_group():
    """Manage ledger entries."""
    pass


@entry_group.command("add")
@click.option("--date", "entry_date", required=True, help="Entry date (YYYY-MM-DD or relative like 'today')")
@click.option("--main", "main_category", required=True, help="Main category (e.g., 'Expenses')")
@click.option("--sub", "sub_category", required=True, help="Sub-category (e.g., 'Rent')")
@click.option("--debit", help="Debit amount")
@click.option("--credit", help="Credit amount")
@click.option("--particulars", default="", help="Particulars")
@click.option("--due-date", help="Due date")
@click.option("--notes", help="Notes")
@click.pass_context
def add_entry(
    ctx,
    entry_date: str,
    main_category: str,
    sub_category: str,
    debit: str | None,
    credit: str | None,
    particulars: str,
    due_date: str | None,
    notes: str | None,
):
    """Add a ledger entry.

    Examples:
        ledgerbook entry add --date 2024-01-15 --main Expenses --sub Rent --debit 1200
        ledgerbook entry add --date today --main Income --sub Sales --credit 500 --particulars "Invoice 42"
    """
    db = ctx.obj["db"]
    service = LedgerService(db)

    parsed_date = _parse_date_or_exit(ctx, "date", entry_date)
    parsed_due = _parse_date_or_exit(ctx, "due date", due_date)
    parsed_debit = _parse_amount_or_exit(ctx, "debit", debit)
    parsed_credit = _parse_amount_or_exit(ctx, "credit", credit)

    try:
        entry_id = service.create_entry(
            entry_date=parsed_date,
            main_category=main_category,
            sub_category=sub_category,
            debit=parsed_debit if parsed_debit is not None else 0,
            credit=parsed_credit if parsed_credit is not None else 0,
            particulars=particulars,
            due_date=parsed_due,
            notes=notes,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    created = service.require_entry(entry_id)
    click.echo(f"Created entry {entry_id}")
    click.echo(f"  Date: {created.date_text}")
    click.echo(f"  Account: {created.sub_category} ({created.main_category})")
    click.echo(f"  Debit: {format_amount(created.debit)}")
    click.echo(f"  Credit: {format_amount(created.credit)}")


@entry_group.command("update")
@click.argument("entry_id", type=int)
@click.option("--date", "entry_date", help="Entry date")
@click.option("--main", "main_category", help="Main category")
@click.option("--sub", "sub_category", help="Sub-category")
@click.option("--debit", help="Debit amount")
@click.option("--credit", help="Credit amount")
@click.option("--particulars", help="Particulars")
@click.option("--due-date", help="Due date")
@click.option("--notes", help="Notes")
@click.option("--clear-due-date", is_flag=True, help="Remove the due date")
@click.option("--clear-notes", is_flag=True, help="Remove the notes")
@click.pass_context
def update_entry(
    ctx,
    entry_id: int,
    entry_date: str | None,
    main_category: str | None,
    sub_category: str | None,
    debit: str | None,
    credit: str | None,
    particulars: str | None,
    due_date: str | None,
    notes: str | None,
    clear_due_date: bool,
    clear_notes: bool,
):
    """Update a ledger entry. Only the provided fields change."""
    db = ctx.obj["db"]
    service = LedgerService(db)

    try:
        service.update_entry(
            entry_id,
            entry_date=_parse_date_or_exit(ctx, "date", entry_date),
            main_category=main_category,
            sub_category=sub_category,
            debit=_parse_amount_or_exit(ctx, "debit", debit),
            credit=_parse_amount_or_exit(ctx, "credit", credit),
            particulars=particulars,
            due_date=_parse_date_or_exit(ctx, "due date", due_date),
            notes=notes,
            clear_due_date=clear_due_date,
            clear_notes=clear_notes,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated entry {entry_id}")


@entry_group.command("delete")
@click.argument("entry_id", type=int)
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete_entry(ctx, entry_id: int, yes: bool):
    """Delete a ledger entry."""
    db = ctx.obj["db"]
    service = LedgerService(db)

    try:
        existing = service.require_entry(entry_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not yes:
        click.confirm(
            f"Delete entry {entry_id} ({existing.sub_category}, {existing.date_text})?",
            abort=True,
        )

    try:
        service.delete_entry(entry_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Deleted entry {entry_id}")


@entry_group.command("list")
@click.pass_context
def list_entries(ctx):
    """List every ledger entry as stored.

    Entries with an invalid date or an unknown category are marked.
    """
    db = ctx.obj["db"]
    service = LedgerService(db)

    entries = service.list_entries()
    if not entries:
        click.echo("No entries found.")
        return

    click.echo(f"\n{'ID':<6} {'Date':<12} {'Account':<40} {'Debit':>14} {'Credit':>14}")
    click.echo("-" * 90)
    for item in entries:
        account = f"{item.sub_category} ({item.main_category})"
        marks = []
        if item.date is None:
            marks.append("invalid date")
        if not is_known_category(item.main_category, item.sub_category):
            marks.append("unknown category")
        suffix = f"  [{', '.join(marks)}]" if marks else ""
        click.echo(
            f"{item.id:<6} {item.date_text[:12]:<12} {account[:40]:<40} "
            f"{format_amount(item.debit):>14} {format_amount(item.credit):>14}{suffix}"
        )
    click.echo(f"\n{len(entries)} entr{'y' if len(entries) == 1 else 'ies'}")


def register_commands(cli):
    """Register entry commands with main CLI."""
    cli.add_command(entry_group, name="entry")
