"""Receivable/payable commands."""

import click
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.entities import DebtStatus
from ledgerbook.domain.errors import DomainError
from ledgerbook.domain.lifecycle import DebtLifecycleService
from ledgerbook.utils.amount_parser import format_amount, parse_amount
from ledgerbook.utils.date_parser import parse_date

STATUS_CHOICES = {
    "active": DebtStatus.ACTIVE,
    "settled": DebtStatus.SETTLED,
    "bad-debt": DebtStatus.BAD_DEBT,
}


@click.group()
def debt_group():
    """Manage receivables and payables."""
    pass


@debt_group.command("add")
@click.option("--name", required=True, help="Debtor or creditor name")
@click.option("--date", "entry_date", required=True, help="Record date (YYYY-MM-DD or relative like 'today')")
@click.option("--main", "main_category", default="Current Assets", show_default=True, help="Main category")
@click.option("--sub", "sub_category", default="Accounts Receivable", show_default=True, help="Sub-category")
@click.option("--debit", help="Amount owed to the business")
@click.option("--credit", help="Amount the business owes")
@click.option("--particulars", default="", help="Particulars")
@click.option("--nationality", help="Nationality")
@click.option("--description", help="Description")
@click.option("--due-date", help="Due date")
@click.option("--notes", help="Notes")
@click.pass_context
def add_record(
    ctx,
    name: str,
    entry_date: str,
    main_category: str,
    sub_category: str,
    debit: str | None,
    credit: str | None,
    particulars: str,
    nationality: str | None,
    description: str | None,
    due_date: str | None,
    notes: str | None,
):
    """Add an Active receivable or payable.

    Examples:
        ledgerbook debt add --name "Client A" --date 2024-03-01 --debit 500
        ledgerbook debt add --name "Supplier B" --date today --main "Current Liabilities" --sub "Accounts Payable" --credit 750
    """
    service = DebtLifecycleService(ctx.obj["db"])

    try:
        record_date = parse_date(entry_date)
        parsed_due = parse_date(due_date) if due_date else None
        parsed_debit = parse_amount(debit) if debit else 0
        parsed_credit = parse_amount(credit) if credit else 0
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    try:
        record_id = service.create_record(
            name=name,
            entry_date=record_date,
            main_category=main_category,
            sub_category=sub_category,
            debit=parsed_debit,
            credit=parsed_credit,
            particulars=particulars,
            nationality=nationality,
            description=description,
            due_date=parsed_due,
            notes=notes,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created record {record_id} for {name}")


@debt_group.command("list")
@click.option(
    "--status",
    type=click.Choice(list(STATUS_CHOICES) + ["all"], case_sensitive=False),
    default="active",
    show_default=True,
    help="Which records to list",
)
@click.pass_context
def list_records(ctx, status: str):
    """List receivables and payables."""
    service = DebtLifecycleService(ctx.obj["db"])
    selected = None if status.lower() == "all" else STATUS_CHOICES[status.lower()]
    records = service.list_records(status=selected)

    if not records:
        click.echo("No records found.")
        return

    click.echo(f"\n{'ID':<6} {'Name':<24} {'Date':<12} {'Status':<9} {'Debit':>14} {'Credit':>14} {'Due':<12}")
    click.echo("-" * 96)
    for record in records:
        due = record.due_date.isoformat() if record.due_date else ""
        click.echo(
            f"{record.id:<6} {record.name[:24]:<24} {record.date_text[:12]:<12} {record.status.value:<9} "
            f"{format_amount(record.debit):>14} {format_amount(record.credit):>14} {due:<12}"
        )


def _lifecycle_command(name: str, method: str, done: str, confirm: bool = False):
    """Build a command applying one lifecycle action to a record."""

    @click.command(name)
    @click.argument("record_id", type=int)
    @click.pass_context
    def command(ctx, record_id: int, **options):
        service = DebtLifecycleService(ctx.obj["db"])
        try:
            record = service.require_record(record_id)
            if confirm and not options.get("yes"):
                click.confirm(f"Permanently delete record {record_id} ({record.name})?", abort=True)
            getattr(service, method)(record_id)
        except DomainError as e:
            handle_domain_error(ctx, e)
        click.echo(done.format(record_id=record_id, name=record.name))

    if confirm:
        command = click.option("--yes", is_flag=True, help="Skip confirmation")(command)
    return command


settle_record = _lifecycle_command("settle", "settle", "Settled record {record_id} ({name})")
settle_record.help = "Mark an Active record as settled."
bad_debt_record = _lifecycle_command("bad-debt", "mark_bad_debt", "Record {record_id} ({name}) marked as bad debt")
bad_debt_record.help = "Mark an Active record as bad debt."
reactivate_record = _lifecycle_command("reactivate", "reactivate", "Reactivated record {record_id} ({name})")
reactivate_record.help = "Move a bad-debt record back to Active."
delete_record = _lifecycle_command(
    "delete", "permanent_delete", "Permanently deleted record {record_id} ({name})", confirm=True
)
delete_record.help = "Permanently delete a settled or bad-debt record."

for _command in (settle_record, bad_debt_record, reactivate_record, delete_record):
    debt_group.add_command(_command)


@debt_group.command("summary")
@click.pass_context
def summary(ctx):
    """Show debtor and creditor totals over Active records."""
    service = DebtLifecycleService(ctx.obj["db"])
    totals = service.get_summary()

    click.echo("\nReceivables & Payables (Active)")
    click.echo(f"  {'Total debtors:':<20} {format_amount(totals.total_debtors):>16}")
    click.echo(f"  {'Total creditors:':<20} {format_amount(totals.total_creditors):>16}")
    click.echo(f"  {'Net balance:':<20} {format_amount(totals.net_balance):>16}")
    click.echo(
        f"\nActive: {totals.active_count}  Settled: {totals.settled_count}  Bad debt: {totals.bad_debt_count}"
    )


def register_commands(cli):
    """Register debt commands with main CLI."""
    cli.add_command(debt_group, name="debt")
