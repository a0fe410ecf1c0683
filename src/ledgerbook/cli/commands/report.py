"""Financial report commands."""

import click
from ledgerbook.cli.period_options import period_flags_from, period_options, resolve_cli_period
from ledgerbook.domain.entities import (
    BalanceSheetSection,
    CashFlowSection,
    CategoryAmount,
    ReportDiagnostics,
)
from ledgerbook.domain.reports import ReportService
from ledgerbook.utils.amount_parser import format_amount

LABEL_WIDTH = 44
AMOUNT_WIDTH = 16


def _period(ctx, year, month, flags):
    return resolve_cli_period(ctx, year=year, month=month, period_flags=period_flags_from(flags))


def _row(label: str, amount, indent: int = 0) -> str:
    label = " " * indent + label
    return f"{label:<{LABEL_WIDTH}} {format_amount(amount):>{AMOUNT_WIDTH}}"


def _echo_diagnostics(diagnostics: ReportDiagnostics) -> None:
    """Print skip and flag counts; printed whenever they are non-zero."""
    if diagnostics.skipped_count:
        ids = ", ".join(str(i) for i in diagnostics.skipped_invalid_dates)
        click.echo(f"Skipped {diagnostics.skipped_count} entries with an invalid date (IDs: {ids})")
    if diagnostics.flagged_count:
        ids = ", ".join(str(i) for i in diagnostics.unknown_categories)
        click.echo(f"Flagged {diagnostics.flagged_count} entries with an unknown category (IDs: {ids})")


def _echo_lines(lines: tuple[CategoryAmount, ...], indent: int = 2) -> None:
    for line in lines:
        click.echo(_row(line.sub_category, line.amount, indent))


@click.group()
def report_group():
    """Produce financial reports."""
    pass


@report_group.command("opening")
@period_options
@click.pass_context
def opening_balance(ctx, year, month, **flags):
    """Show the balance carried into a period."""
    period = _period(ctx, year, month, flags)
    service = ReportService(ctx.obj["db"])
    balance = service.get_opening_balance(period)
    click.echo(f"Opening balance for {period.label()}: {format_amount(balance)}")


@report_group.command("ledger")
@period_options
@click.pass_context
def running_ledger(ctx, year, month, **flags):
    """Show entries in date order with the running balance."""
    period = _period(ctx, year, month, flags)
    service = ReportService(ctx.obj["db"])
    ledger = service.get_running_ledger(period)

    click.echo(f"\nLedger: {period.label()}")
    click.echo(f"Opening balance: {format_amount(ledger.opening_balance)}")
    if not ledger.lines:
        click.echo("No entries found.")
    else:
        click.echo(
            f"\n{'Date':<12} {'Particulars':<30} {'Debit':>14} {'Credit':>14} {'Balance':>16}"
        )
        click.echo("-" * 90)
        for line in ledger.lines:
            item = line.entry
            particulars = item.particulars or item.sub_category
            click.echo(
                f"{item.date_text[:12]:<12} {particulars[:30]:<30} "
                f"{format_amount(item.debit):>14} {format_amount(item.credit):>14} "
                f"{format_amount(line.balance_after):>16}"
            )
    click.echo(f"Closing balance: {format_amount(ledger.closing_balance)}")
    _echo_diagnostics(ledger.diagnostics)


@report_group.command("trial-balance")
@period_options
@click.pass_context
def trial_balance(ctx, year, month, **flags):
    """Show the trial balance."""
    period = _period(ctx, year, month, flags)
    service = ReportService(ctx.obj["db"])
    report = service.get_trial_balance(period)

    click.echo(f"\nTrial Balance: {period.label()}")
    click.echo(f"{'Account':<{LABEL_WIDTH}} {'Debit':>{AMOUNT_WIDTH}} {'Credit':>{AMOUNT_WIDTH}}")
    click.echo("-" * (LABEL_WIDTH + 2 * AMOUNT_WIDTH + 2))
    for row in report.accounts:
        click.echo(
            f"{row.account[:LABEL_WIDTH]:<{LABEL_WIDTH}} "
            f"{format_amount(row.debit):>{AMOUNT_WIDTH}} {format_amount(row.credit):>{AMOUNT_WIDTH}}"
        )
    click.echo("-" * (LABEL_WIDTH + 2 * AMOUNT_WIDTH + 2))
    click.echo(
        f"{'Total':<{LABEL_WIDTH}} "
        f"{format_amount(report.total_debits):>{AMOUNT_WIDTH}} {format_amount(report.total_credits):>{AMOUNT_WIDTH}}"
    )
    if report.is_balanced:
        click.echo("Status: Balanced")
    else:
        click.echo(f"Status: Out of balance by {format_amount(report.difference)}")
    _echo_diagnostics(report.diagnostics)


@report_group.command("profit-loss")
@period_options
@click.pass_context
def profit_loss(ctx, year, month, **flags):
    """Show the profit-and-loss statement."""
    period = _period(ctx, year, month, flags)
    service = ReportService(ctx.obj["db"])
    report = service.get_profit_and_loss(period)

    click.echo(f"\nProfit and Loss: {period.label()}")
    click.echo("Income")
    _echo_lines(report.income)
    click.echo(_row("Total Income", report.total_income))
    click.echo("Expenses")
    _echo_lines(report.expense)
    click.echo(_row("Total Expenses", report.total_expense))
    click.echo(_row("Net Profit" if report.net_profit >= 0 else "Net Loss", report.net_profit))
    _echo_diagnostics(report.diagnostics)


def _echo_section(section: BalanceSheetSection) -> None:
    click.echo(section.main_category)
    _echo_lines(section.lines)
    click.echo(_row(f"Total {section.main_category}", section.total))


@report_group.command("balance-sheet")
@period_options
@click.pass_context
def balance_sheet(ctx, year, month, **flags):
    """Show the balance sheet."""
    period = _period(ctx, year, month, flags)
    service = ReportService(ctx.obj["db"])
    report = service.get_balance_sheet(period)

    click.echo(f"\nBalance Sheet: {period.label()}")
    _echo_section(report.assets)
    _echo_section(report.current_assets)
    click.echo(_row("Total Assets", report.grand_total_assets))
    click.echo()
    _echo_section(report.liabilities)
    _echo_section(report.current_liabilities)
    _echo_section(report.equity)
    click.echo(_row("Net Profit (retained earnings)", report.net_profit))
    click.echo(_row("Total Liabilities & Equity", report.grand_total_liab_equity))
    if not report.is_balanced:
        click.echo(f"Warning: Totals differ by {format_amount(report.difference)}")
    _echo_diagnostics(report.diagnostics)


def _echo_cash_section(section: CashFlowSection) -> None:
    click.echo(f"{section.name} Activities")
    for line in section.lines:
        click.echo(_row(line.label, line.net, indent=2))
    click.echo(_row(f"Net Cash from {section.name}", section.net))


@report_group.command("cash-flow")
@period_options
@click.pass_context
def cash_flow(ctx, year, month, **flags):
    """Show the cash-flow statement."""
    period = _period(ctx, year, month, flags)
    service = ReportService(ctx.obj["db"])
    report = service.get_cash_flow(period)

    click.echo(f"\nCash Flow: {period.label()}")
    _echo_cash_section(report.operating)
    _echo_cash_section(report.investing)
    _echo_cash_section(report.financing)
    click.echo(_row("Net Change in Cash", report.net_cash_change))
    if report.unclassified:
        click.echo(f"Not classified: {len(report.unclassified)} entries")
    _echo_diagnostics(report.diagnostics)


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
